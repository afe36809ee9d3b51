# File: extmodelgen/exporters.py
"""
ExtModelGen - Artifact Exporter
=================================
Writes generated model definitions to the filesystem.

Resource naming: a model named ``App.model.User`` is written to
``model/User.js``; the part between the first and the last dot becomes the
directory.  A name without dots is written as ``<name>.js``.

Base-and-subclass mode produces two artifacts per model:

1. ``<file>Base.js`` holding the definition renamed to ``<name>Base``;
   always (over)written.
2. ``<file>.js`` holding ``Ext.define("<name>",{extend:"<name>Base"})``;
   created only when absent, so hand edits survive regeneration.

Step 2 probes for the file and then writes it.  The probe is best-effort:
two builds racing on the same directory can both see the file missing.

Every write goes to a temporary file in the target directory first and is
renamed into place (``extmodelgen.utils.write_file``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from extmodelgen.errors import ResourceError
from extmodelgen.models import GenerationConfig
from extmodelgen.serializer import generate_subclass_javascript, rename_to_base
from extmodelgen.utils import count_lines, sha256_hex, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.exporters")

ARTIFACT_SUFFIX: str = ".js"


# ---------------------------------------------------------------------------
# Data classes for export results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Artifact:
    """One file to write; ``create_only`` artifacts never replace a file."""

    relative_path: str
    content: str
    create_only: bool = False


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single exported file."""

    relative_path: str
    absolute_path: str
    size_bytes: int
    line_count: int
    sha256: str


@dataclass(frozen=False, slots=True)
class ExportResult:
    """Files written and left untouched for one model."""

    model_name: str = ""
    written: List[FileRecord] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return sum(r.size_bytes for r in self.written)

    @property
    def total_lines(self) -> int:
        return sum(r.line_count for r in self.written)


# ---------------------------------------------------------------------------
# Resource naming
# ---------------------------------------------------------------------------


def resource_location(model_name: str) -> Tuple[str, str]:
    """
    Split a model name into (directory, file stem).

    Examples:
        >>> resource_location("App.model.User")
        ('model', 'User')
        >>> resource_location("App.model.sales.Order")
        ('model/sales', 'Order')
        >>> resource_location("User")
        ('', 'User')
    """
    first: int = model_name.find(".")
    last: int = model_name.rfind(".")
    if last < 0:
        return "", model_name
    stem: str = model_name[last + 1:]
    if first == last:
        return "", stem
    return model_name[first + 1:last].replace(".", "/"), stem


def plan_artifacts(model_name: str, code: str, config: GenerationConfig) -> List[Artifact]:
    """Artifacts to write for one rendered model."""
    directory, stem = resource_location(model_name)
    prefix: str = f"{directory}/" if directory else ""

    if not config.create_base_and_subclass:
        return [Artifact(f"{prefix}{stem}{ARTIFACT_SUFFIX}", code)]

    return [
        Artifact(f"{prefix}{stem}Base{ARTIFACT_SUFFIX}", rename_to_base(code)),
        Artifact(
            f"{prefix}{stem}{ARTIFACT_SUFFIX}",
            generate_subclass_javascript(model_name, config),
            create_only=True,
        ),
    ]


# ---------------------------------------------------------------------------
# ArtifactExporter class
# ---------------------------------------------------------------------------


class ArtifactExporter:
    """
    Writes the artifacts of generated models under one output directory.

    Usage::

        exporter = ArtifactExporter(config, output_dir=Path("./generated"))
        result = exporter.export("App.model.User", code)

    Thread-safety: NOT thread-safe.  Use one exporter per output directory.
    """

    def __init__(self, config: GenerationConfig, output_dir: Path) -> None:
        self._config: GenerationConfig = config
        self._output_dir: Path = output_dir.resolve()

        logger.debug("ArtifactExporter initialised: output_dir=%s.", self._output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def export(self, model_name: str, code: str) -> ExportResult:
        """
        Write every artifact of one model.

        Raises:
            ResourceError: when an artifact cannot be written.
        """
        result = ExportResult(model_name=model_name)
        for artifact in plan_artifacts(model_name, code, self._config):
            target: Path = self._output_dir / artifact.relative_path

            if artifact.create_only and target.exists():
                logger.info("Keeping existing %s.", artifact.relative_path)
                result.skipped.append(artifact.relative_path)
                continue

            result.written.append(self._write_single_file(target, artifact))

        logger.info(
            "Exported '%s': %d written, %d kept.",
            model_name,
            len(result.written),
            len(result.skipped),
        )
        return result

    # -----------------------------------------------------------------
    # Internal: file writing
    # -----------------------------------------------------------------

    def _write_single_file(self, target: Path, artifact: Artifact) -> FileRecord:
        try:
            size_bytes: int = write_file(target, artifact.content)
        except OSError as exc:
            raise ResourceError(
                f"Failed to write {artifact.relative_path}: {exc}",
                path=str(target),
            ) from exc

        logger.debug("Wrote file: %s (%d bytes).", artifact.relative_path, size_bytes)
        return FileRecord(
            relative_path=artifact.relative_path,
            absolute_path=str(target),
            size_bytes=size_bytes,
            line_count=count_lines(artifact.content),
            sha256=sha256_hex(artifact.content),
        )


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ARTIFACT_SUFFIX",
    "Artifact",
    "FileRecord",
    "ExportResult",
    "resource_location",
    "plan_artifacts",
    "ArtifactExporter",
]

logger.debug("extmodelgen.exporters loaded.")
