# File: extmodelgen/errors.py
"""
ExtModelGen - Error Taxonomy
==============================
Exceptions raised by the model-compilation core.

    ExtModelGenError
    ├── MetadataError        malformed or contradictory class metadata
    ├── SerializationError   document could not be rendered as text
    └── ResourceError        artifact could not be created or written

The core raises; the orchestrator (``extmodelgen.generator``) catches per
class, logs, and continues with the next class.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ExtModelGenError(Exception):
    """Base exception carrying an optional context mapping."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.context: Dict[str, Any] = context or {}

    def __str__(self) -> str:
        message: str = super().__str__()
        if not self.context:
            return message
        details: str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{message} ({details})"


class MetadataError(ExtModelGenError, ValueError):
    """Raised when a property's metadata cannot be converted."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if field:
            context["field"] = field
        super().__init__(message, context=context)
        self.field: Optional[str] = field


class SerializationError(ExtModelGenError):
    """Raised when a document contains a value that cannot be written."""


class ResourceError(ExtModelGenError):
    """Raised when an output artifact cannot be created or written."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = dict(context or {})
        if path:
            context["path"] = path
        super().__init__(message, context=context)
        self.path: Optional[str] = path


__all__: List[str] = [
    "ExtModelGenError",
    "MetadataError",
    "SerializationError",
    "ResourceError",
]
