# File: extmodelgen/__init__.py
"""
ExtModelGen — Ext JS / Sencha Touch Model Generator
=====================================================

Compiles class metadata descriptors into ``Ext.define(...)`` data model
definitions for Ext JS 4, Ext JS 5 and Sencha Touch 2.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌──────────────────┐
    │  CLI / Entry │────▶│ ModelGenerator │────▶│ ArtifactExporter │
    │   (cli.py)   │     │ (generator.py) │     │  (exporters.py)  │
    └──────────────┘     └───────┬────────┘     └──────────────────┘
                                 │
                 ┌───────────────┼────────────────┐
                 ▼               ▼                ▼
          ┌────────────┐  ┌─────────────┐  ┌──────────────┐
          │ assembler  │  │  requires   │  │  serializer  │
          │ fields ... │  │             │  │  dialects    │
          └────────────┘  └─────────────┘  └──────────────┘

Usage::

    # As a library
    from extmodelgen import ClassDescriptor, GenerationConfig, generate_javascript_for_class
    code = generate_javascript_for_class(descriptor, GenerationConfig(debug=True))

    # From the command line
    python -m extmodelgen --input models.yaml --output ./app/model --verbose

Public API:
    - ModelGenerator     — Master orchestrator
    - GenerationConfig   — Generation settings model
    - ClassDescriptor    — Input record for one class
    - build_model        — Descriptor → canonical ModelDefinition
    - generate_javascript — ModelDefinition → Ext.define text
"""

from __future__ import annotations

__version__: str = "1.0.0"
__author__: str = "ExtModelGen Team"
__license__: str = "MIT"

from extmodelgen.models import (
    ApiQuoteStyle,
    Association,
    AssociationType,
    FieldDescriptor,
    FieldType,
    GenerationConfig,
    IncludeValidation,
    LineEnding,
    ModelDefinition,
    OutputFormat,
    Validation,
    ValidationType,
)
from extmodelgen.descriptors import (
    AssociationSpec,
    ClassDescriptor,
    ConstraintSpec,
    FieldSpec,
    ModelSpec,
    PropertyDescriptor,
    ValidationSpec,
)
from extmodelgen.errors import (
    ExtModelGenError,
    MetadataError,
    ResourceError,
    SerializationError,
)
from extmodelgen.assembler import build_model
from extmodelgen.serializer import (
    generate_javascript,
    generate_javascript_for_class,
    generate_subclass_javascript,
    rename_to_base,
)
from extmodelgen.exporters import ArtifactExporter, ExportResult
from extmodelgen.generator import GenerationReport, ModelGenerator

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core orchestrator
    "ModelGenerator",
    "GenerationReport",
    # Models
    "ApiQuoteStyle",
    "Association",
    "AssociationType",
    "FieldDescriptor",
    "FieldType",
    "GenerationConfig",
    "IncludeValidation",
    "LineEnding",
    "ModelDefinition",
    "OutputFormat",
    "Validation",
    "ValidationType",
    # Descriptors
    "AssociationSpec",
    "ClassDescriptor",
    "ConstraintSpec",
    "FieldSpec",
    "ModelSpec",
    "PropertyDescriptor",
    "ValidationSpec",
    # Errors
    "ExtModelGenError",
    "MetadataError",
    "ResourceError",
    "SerializationError",
    # Core
    "build_model",
    "generate_javascript",
    "generate_javascript_for_class",
    "generate_subclass_javascript",
    "rename_to_base",
    # Exporters
    "ArtifactExporter",
    "ExportResult",
]
