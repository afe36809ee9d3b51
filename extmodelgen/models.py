# File: extmodelgen/models.py
"""
ExtModelGen - Core Data Models
================================
Pydantic V2 models for the canonical, dialect-independent representation of
one data class, plus the generation configuration.

    ModelDefinition
    ├── fields        name → FieldDescriptor (insertion order = discovery order)
    ├── associations  [Association]
    └── validations   [Validation]

A ``ModelDefinition`` is built once per source class by
``extmodelgen.assembler`` and rendered by ``extmodelgen.serializer``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.models")

# ---------------------------------------------------------------------------
# Enums — fixed vocabularies used across the entire project
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Supported output dialects."""

    EXTJS4 = "extjs4"
    EXTJS5 = "extjs5"
    TOUCH2 = "touch2"


class IncludeValidation(str, Enum):
    """Which validations make it into the generated model."""

    NONE = "none"
    BUILTIN = "builtin"
    ALL = "all"


class LineEnding(str, Enum):
    """Line-break normalization applied to the final text."""

    CRLF = "crlf"
    LF = "lf"
    SYSTEM = "system"


class ApiQuoteStyle(str, Enum):
    """How proxy API method names are written."""

    NEVER = "never"
    ALWAYS = "always"
    DIALECT = "dialect"


class FieldType(str, Enum):
    """Semantic field types; the value is the name written to the output."""

    AUTO = "auto"
    STRING = "string"
    INTEGER = "int"
    FLOAT = "float"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


class AssociationType(str, Enum):
    """Association kinds."""

    HAS_MANY = "hasMany"
    BELONGS_TO = "belongsTo"
    HAS_ONE = "hasOne"


class ValidationType(str, Enum):
    """Validation vocabulary."""

    PRESENCE = "presence"
    LENGTH = "length"
    EMAIL = "email"
    FORMAT = "format"
    INCLUSION = "inclusion"
    EXCLUSION = "exclusion"
    RANGE = "range"
    CREDIT_CARD_NUMBER = "creditCardNumber"
    DIGITS = "digits"
    FUTURE = "future"
    PAST = "past"
    NOT_BLANK = "notBlank"

    @property
    def builtin(self) -> bool:
        """True for validations the client framework ships with."""
        return self in _BUILTIN_VALIDATIONS


_BUILTIN_VALIDATIONS = frozenset({
    ValidationType.PRESENCE,
    ValidationType.LENGTH,
    ValidationType.EMAIL,
    ValidationType.FORMAT,
    ValidationType.INCLUSION,
    ValidationType.EXCLUSION,
    ValidationType.RANGE,
})


# Literal default value that renders as the bare ``undefined`` token.
DEFAULT_VALUE_UNDEFINED: str = "undefined"

# Types for which ``allowNull`` is meaningful.
NULLABLE_TYPES = frozenset({
    FieldType.INTEGER,
    FieldType.FLOAT,
    FieldType.NUMBER,
    FieldType.STRING,
    FieldType.BOOLEAN,
})

# ---------------------------------------------------------------------------
# Mixin: shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    use_enum_values=True,
    frozen=False,
    extra="forbid",
)

DefaultValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr]


# ---------------------------------------------------------------------------
# Field-level building blocks
# ---------------------------------------------------------------------------


class Reference(BaseModel):
    """Structured field reference (``reference`` config of a field)."""

    model_config = _SHARED_CONFIG

    type: Optional[str] = Field(default=None, description="Referenced model.")
    association: Optional[str] = Field(default=None, description="Association name.")
    child: Optional[bool] = Field(default=None, description="Owned child records.")
    parent: Optional[bool] = Field(default=None, description="Owning parent record.")
    role: Optional[str] = Field(default=None, description="Role on the owner.")
    inverse: Optional[str] = Field(default=None, description="Inverse role name.")
    unique: Optional[bool] = Field(default=None, description="One-to-one reference.")

    def has_any_properties(self) -> bool:
        return any(v is not None for v in self.model_dump().values())

    def type_only(self) -> bool:
        """True when nothing but ``type`` is set."""
        values: Dict[str, Any] = self.model_dump()
        others = [v for k, v in values.items() if k != "type" and v is not None]
        return values["type"] is not None and not others


class Validation(BaseModel):
    """One validation rule bound to a field."""

    model_config = _SHARED_CONFIG

    field: str = Field(..., min_length=1, description="Validated field name.")
    type: ValidationType = Field(..., description="Validation kind.")
    params: Dict[str, Any] = Field(
        default_factory=dict,
        description="Kind-specific parameters in output order.",
    )

    def __repr__(self) -> str:
        return f"<Validation {self.type} on {self.field}>"


class FieldDescriptor(BaseModel):
    """
    Canonical description of one property destined for the ``fields`` list.

    ``None`` means "not set"; the serializer omits unset attributes and uses
    the bare field name when nothing visible in the dialect is set.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)
    field_type: Optional[FieldType] = Field(default=None)
    custom_type: Optional[str] = Field(
        default=None, description="Verbatim type name, bypasses detection."
    )
    date_format: Optional[str] = None
    default_value: Optional[DefaultValue] = None
    allow_null: Optional[bool] = None
    allow_blank: Optional[bool] = None
    unique: Optional[bool] = None
    persist: Optional[bool] = None
    critical: Optional[bool] = None
    mapping: Optional[str] = None
    convert: Optional[str] = None
    calculate: Optional[str] = None
    depends: Optional[List[str]] = None
    reference: Optional[Union[StrictStr, Reference]] = None

    @property
    def type_name(self) -> Optional[str]:
        """Custom type if given, else the semantic type's name."""
        if self.custom_type:
            return self.custom_type
        return self.field_type

    def __repr__(self) -> str:
        return f"<Field {self.name}: {self.type_name}>"


class Association(BaseModel):
    """Directional relation from the owning model to ``model``."""

    model_config = _SHARED_CONFIG

    type: AssociationType
    model: str = Field(..., min_length=1, description="Target model name.")
    auto_load: Optional[bool] = None
    foreign_key: Optional[str] = None
    name: Optional[str] = None
    primary_key: Optional[str] = None
    setter_name: Optional[str] = None
    getter_name: Optional[str] = None
    association_key: Optional[str] = None
    instance_name: Optional[str] = None

    def __repr__(self) -> str:
        return f"<Association {self.type} → {self.model}>"


# ---------------------------------------------------------------------------
# Data option bundles
# ---------------------------------------------------------------------------


class DataOptionsSpec(BaseModel):
    """Raw data-option flags as declared on a class."""

    model_config = _SHARED_CONFIG

    associated: bool = False
    changes: bool = False
    critical: bool = False
    persist: bool = True


class DataOptions(BaseModel):
    """
    Canonical writer data options.

    The all-default combination (persist only) collapses to "nothing set";
    ``critical`` survives only with ``changes``; ``persist`` only without it.
    """

    model_config = _SHARED_CONFIG

    associated: Optional[bool] = None
    changes: Optional[bool] = None
    critical: Optional[bool] = None
    persist: Optional[bool] = None

    @classmethod
    def from_spec(cls, spec: Optional[DataOptionsSpec]) -> "DataOptions":
        options = cls()
        if spec is None:
            return options
        all_default: bool = (
            spec.persist and not spec.associated
            and not spec.changes and not spec.critical
        )
        if all_default:
            return options

        if spec.associated:
            options.associated = True
        if spec.changes:
            options.changes = True
            if spec.critical:
                options.critical = True
        elif spec.persist:
            options.persist = True
        return options

    def has_any_properties(self) -> bool:
        return any(v is not None for v in self.model_dump().values())

    def to_config(self) -> Dict[str, bool]:
        """Set options only, in declaration order."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class AllDataOptions(DataOptions):
    """Options for ``allDataOptions`` on the proxy writer."""


class PartialDataOptions(DataOptions):
    """Options for ``partialDataOptions`` on the proxy writer."""


# ---------------------------------------------------------------------------
# Model — the canonical, per-class container
# ---------------------------------------------------------------------------


class ModelDefinition(BaseModel):
    """
    Complete canonical representation of one data class.

    Invariant: ``fields`` keys are unique.  A second field with an existing
    name is ignored, unless the existing one was declared at type level, in
    which case the new declaration replaces it in place.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Model (class) name.")
    extend: str = Field(default="Ext.data.Model", description="Base class.")
    autodetect_types: bool = Field(default=True)

    id_property: str = Field(default="id")
    client_id_property: Optional[str] = None
    client_id_property_add_to_writer: bool = False
    version_property: Optional[str] = None

    paging: bool = False
    disable_paging_parameters: bool = False

    create_method: Optional[str] = None
    read_method: Optional[str] = None
    update_method: Optional[str] = None
    destroy_method: Optional[str] = None

    writer: Optional[str] = None
    reader: Optional[str] = None
    message_property: Optional[str] = None
    success_property: Optional[str] = None
    total_property: Optional[str] = None
    root_property: Optional[str] = None

    identifier: Optional[str] = None
    write_all_fields: Optional[bool] = Field(
        default=None, description="None keeps the dialect's writer default."
    )
    all_data_options: AllDataOptions = Field(default_factory=AllDataOptions)
    partial_data_options: PartialDataOptions = Field(
        default_factory=PartialDataOptions
    )

    fields: Dict[str, FieldDescriptor] = Field(default_factory=dict)
    associations: List[Association] = Field(default_factory=list)
    validations: List[Validation] = Field(default_factory=list)
    has_many: Optional[List[str]] = None

    _type_level_names: Set[str] = PrivateAttr(default_factory=set)

    # -- Mutation -----------------------------------------------------------

    def add_field(self, field: FieldDescriptor, *, type_level: bool = False) -> bool:
        """Register a field; returns False when it was ignored."""
        existing: Optional[FieldDescriptor] = self.fields.get(field.name)
        if existing is None:
            self.fields[field.name] = field
            if type_level:
                self._type_level_names.add(field.name)
            return True

        if not type_level and field.name in self._type_level_names:
            self.fields[field.name] = field
            self._type_level_names.discard(field.name)
            logger.debug(
                "Model '%s': field '%s' overrides its type-level declaration.",
                self.name,
                field.name,
            )
            return True

        logger.debug(
            "Model '%s': duplicate field '%s' ignored.", self.name, field.name
        )
        return False

    def add_association(self, association: Association) -> None:
        self.associations.append(association)

    def add_validation(self, validation: Validation) -> bool:
        """Register a validation; same kind on the same field is kept once."""
        for existing in self.validations:
            if existing.field == validation.field and existing.type == validation.type:
                logger.debug(
                    "Model '%s': duplicate %s validation on '%s' ignored.",
                    self.name,
                    validation.type,
                    validation.field,
                )
                return False
        self.validations.append(validation)
        return True

    # -- Query --------------------------------------------------------------

    @property
    def field_names(self) -> List[str]:
        return list(self.fields)

    def __repr__(self) -> str:
        return (
            f"<ModelDefinition {self.name} "
            f"({len(self.fields)} fields, {len(self.associations)} associations, "
            f"{len(self.validations)} validations)>"
        )


# ---------------------------------------------------------------------------
# Generation Configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Every option that controls rendering and export.

    One instance is shared by all classes of a generation run.
    """

    model_config = _SHARED_CONFIG

    output_format: OutputFormat = Field(
        default=OutputFormat.EXTJS5, description="Target dialect."
    )
    debug: bool = Field(
        default=False, description="Pretty-print with two-space indentation."
    )
    include_validation: IncludeValidation = Field(
        default=IncludeValidation.NONE, description="Validations to include."
    )
    use_single_quotes: bool = Field(
        default=False, description="Replace every double quote with a single one."
    )
    api_quote_style: ApiQuoteStyle = Field(
        default=ApiQuoteStyle.NEVER,
        description="Quote proxy API method names never, always, or per dialect.",
    )
    quote_field_names: bool = Field(
        default=False, description="Write object keys as quoted strings."
    )
    line_ending: LineEnding = Field(
        default=LineEnding.SYSTEM, description="Line-break normalization."
    )
    create_base_and_subclass: bool = Field(
        default=False,
        description="Write a '<Name>Base' artifact plus a create-once subclass.",
    )
    output_dir: str = Field(
        default="./generated", min_length=1, description="Artifact root directory."
    )

    @field_validator(
        "output_format", "include_validation", "line_ending", "api_quote_style",
        mode="before",
    )
    @classmethod
    def _normalize_enum_case(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "OutputFormat",
    "IncludeValidation",
    "LineEnding",
    "ApiQuoteStyle",
    "FieldType",
    "AssociationType",
    "ValidationType",
    "DEFAULT_VALUE_UNDEFINED",
    "NULLABLE_TYPES",
    "DefaultValue",
    "Reference",
    "Validation",
    "FieldDescriptor",
    "Association",
    "DataOptionsSpec",
    "DataOptions",
    "AllDataOptions",
    "PartialDataOptions",
    "ModelDefinition",
    "GenerationConfig",
]

logger.debug("extmodelgen.models loaded — %d public symbols.", len(__all__))
