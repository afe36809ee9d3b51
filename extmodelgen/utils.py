# File: extmodelgen/utils.py
"""
ExtModelGen - Utility Functions & Helpers
===========================================
String helpers shared by the normalizer and serializer, plus file I/O and
timing utilities used by the orchestrator and exporter.

- String helpers mirror annotation conventions: empty or whitespace-only
  strings count as "not given".
- File writes go through a temporary file in the target directory and an
  atomic rename, so a partially written artifact is never observed.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.utils")


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------


def has_text(value: Optional[str]) -> bool:
    """True when *value* contains at least one non-whitespace character."""
    return bool(value) and not value.isspace()


def trim_to_none(value: Optional[str]) -> Optional[str]:
    """
    Strip *value*; return None when nothing is left.

    Examples:
        >>> trim_to_none("  read ")
        'read'
        >>> trim_to_none("   ") is None
        True
    """
    if value is None:
        return None
    stripped: str = value.strip()
    return stripped or None


def capitalize(name: str) -> str:
    """Upper-case the first character only: ``firstName`` → ``FirstName``."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def uncapitalize(name: str) -> str:
    """Lower-case the first character only: ``FirstName`` → ``firstName``."""
    if not name:
        return name
    return name[0].lower() + name[1:]


def simple_type_name(type_name: str) -> str:
    """
    Strip package and generic parts from a type name.

    Examples:
        >>> simple_type_name("java.util.List<com.acme.Order>")
        'List'
        >>> simple_type_name("com.acme.Order")
        'Order'
    """
    base: str = type_name.split("<", 1)[0].split("[", 1)[0].strip()
    return base.rsplit(".", 1)[-1]


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def write_file(path: Path, content: str) -> int:
    """
    Write *content* to *path* atomically.

    Writes to a temporary file in the same directory, then renames it over
    the target (atomic on POSIX when on the same filesystem).

    Returns the number of bytes written.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")
    fd, tmp_path = tempfile.mkstemp(
        dir=str(path.parent),
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(encoded)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, str(path))
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


# ---------------------------------------------------------------------------
# Checksum & metrics
# ---------------------------------------------------------------------------


def sha256_hex(content: str) -> str:
    """Return SHA-256 hex digest of a string."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def count_lines(content: str) -> int:
    """Count the number of lines in a string, for any line-ending style."""
    if not content:
        return 0
    return len(content.splitlines())


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("generate models") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


__all__: List[str] = [
    "has_text",
    "trim_to_none",
    "capitalize",
    "uncapitalize",
    "simple_type_name",
    "ensure_directory",
    "write_file",
    "sha256_hex",
    "count_lines",
    "Timer",
]
