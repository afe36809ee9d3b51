# File: extmodelgen/literals.py
"""
ExtModelGen - JavaScript Literal Writer
=========================================
Renders a document of dicts, lists and scalars as JavaScript object-literal
text.

Compact output has no whitespace at all.  Pretty output follows this layout::

    {
      extend : "Ext.data.Model",
      fields : [ "name", {
        name : "age",
        type : "int"
      } ]
    }

- Object entries go on their own lines, indented two spaces per object
  level; arrays stay inline and do not add a level.
- Keys are written bare unless ``quote_keys`` is set.
- ``RawJs`` values (``undefined``, function source, regex literals) are
  written verbatim.
- Sets are written as sorted arrays so output never depends on hash order.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Sequence, Set

from extmodelgen.errors import SerializationError

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.literals")

_INDENT: str = "  "

# Magnitudes written in plain decimal notation; others use ``1.0E16`` form.
_PLAIN_MIN: float = 1e-3
_PLAIN_MAX: float = 1e7


def _format_float(value: float) -> str:
    """Shortest round-trip digits in the notation Java's Double.toString uses."""
    if value == 0 or _PLAIN_MIN <= abs(value) < _PLAIN_MAX:
        return repr(value)
    number = Decimal(repr(value))
    digits: str = "".join(str(d) for d in number.as_tuple().digits).rstrip("0") or "0"
    sign: str = "-" if value < 0 else ""
    return f"{sign}{digits[0]}.{digits[1:] or '0'}E{number.adjusted()}"


@dataclass(frozen=True, slots=True)
class RawJs:
    """JavaScript source written to the output as-is."""

    code: str

    def __str__(self) -> str:
        return self.code


UNDEFINED: RawJs = RawJs("undefined")


class LiteralWriter:
    """
    Reusable literal writer; each ``write`` call starts fresh.

    Usage::

        writer = LiteralWriter(pretty=True)
        text = writer.write({"extend": "Ext.data.Model", "fields": ["name"]})
    """

    def __init__(self, *, pretty: bool = False, quote_keys: bool = False) -> None:
        self._pretty: bool = pretty
        self._quote_keys: bool = quote_keys
        self._key_separator: str = " : " if pretty else ":"
        self._active: Set[int] = set()

    def write(self, value: Any) -> str:
        """
        Render *value*.

        Raises:
            SerializationError: on non-finite numbers, cycles or unsupported types.
        """
        self._active.clear()
        return self._value(value, 0)

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _value(self, value: Any, depth: int) -> str:
        if isinstance(value, RawJs):
            return value.code
        if value is None:
            return "null"
        if isinstance(value, Enum):
            value = value.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if not math.isfinite(value):
                raise SerializationError(
                    "Non-finite number cannot be written.", context={"value": value}
                )
            return _format_float(value)
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, Mapping):
            return self._container(value, depth, self._object)
        if isinstance(value, (list, tuple)):
            return self._container(value, depth, self._array)
        if isinstance(value, (set, frozenset)):
            return self._array(sorted(value), depth)
        raise SerializationError(
            f"Unsupported value of type {type(value).__name__}.",
            context={"value": value},
        )

    def _container(self, value: Any, depth: int, render: Any) -> str:
        marker: int = id(value)
        if marker in self._active:
            raise SerializationError("Cyclic structure cannot be written.")
        self._active.add(marker)
        try:
            return render(value, depth)
        finally:
            self._active.discard(marker)

    def _key(self, key: Any) -> str:
        text: str = key.value if isinstance(key, Enum) else str(key)
        if self._quote_keys:
            return json.dumps(text, ensure_ascii=False)
        return text

    def _object(self, mapping: Mapping[Any, Any], depth: int) -> str:
        if not mapping:
            return "{ }" if self._pretty else "{}"
        entries: List[str] = [
            f"{self._key(key)}{self._key_separator}{self._value(item, depth + 1)}"
            for key, item in mapping.items()
        ]
        if not self._pretty:
            return "{" + ",".join(entries) + "}"
        inner: str = "\n" + _INDENT * (depth + 1)
        return "{" + inner + ("," + inner).join(entries) + "\n" + _INDENT * depth + "}"

    def _array(self, items: Sequence[Any], depth: int) -> str:
        if not items:
            return "[ ]" if self._pretty else "[]"
        rendered: List[str] = [self._value(item, depth) for item in items]
        if not self._pretty:
            return "[" + ",".join(rendered) + "]"
        return "[ " + ", ".join(rendered) + " ]"


def write_literal(value: Any, *, pretty: bool = False, quote_keys: bool = False) -> str:
    """Shortcut for ``LiteralWriter(...).write(value)``."""
    return LiteralWriter(pretty=pretty, quote_keys=quote_keys).write(value)


__all__: List[str] = [
    "RawJs",
    "UNDEFINED",
    "LiteralWriter",
    "write_literal",
]
