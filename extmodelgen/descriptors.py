# File: extmodelgen/descriptors.py
"""
ExtModelGen - Class Metadata Descriptors
==========================================
Input records supplied by the discovery layer.

The core never inspects live classes.  A discovery front-end (annotation
processor, reflection walker, hand-written YAML) describes each class as a
``ClassDescriptor``: its class-level settings (``ModelSpec``), type-level
declarations, and the properties found on the class and its superclasses.

String attributes follow annotation conventions: an empty string means
"not given".  Normalization into the canonical model happens in
``extmodelgen.fields`` and ``extmodelgen.assembler``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from extmodelgen.models import (
    AssociationType,
    DataOptionsSpec,
    FieldType,
    ValidationType,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.descriptors")

_DESCRIPTOR_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    use_enum_values=True,
    extra="forbid",
)


# ---------------------------------------------------------------------------
# Annotation equivalents
# ---------------------------------------------------------------------------


class ReferenceSpec(BaseModel):
    """Declared field reference."""

    model_config = _DESCRIPTOR_CONFIG

    type: str = ""
    association: str = ""
    child: bool = False
    parent: bool = False
    role: str = ""
    inverse: str = ""
    unique: bool = False


class FieldSpec(BaseModel):
    """Field declaration, on a property or at type level (``value`` required)."""

    model_config = _DESCRIPTOR_CONFIG

    value: str = Field(default="", description="Explicit field name.")
    type: Optional[FieldType] = Field(
        default=None, description="Semantic type; None means not specified."
    )
    custom_type: str = ""
    date_format: str = ""
    default_value: str = ""
    use_null: bool = False
    allow_null: bool = False
    allow_blank: bool = True
    unique: bool = False
    mapping: str = ""
    persist: bool = True
    critical: bool = False
    convert: str = ""
    calculate: str = ""
    depends: List[str] = Field(default_factory=list)
    reference: ReferenceSpec = Field(default_factory=ReferenceSpec)


class AssociationSpec(BaseModel):
    """Declared association, on a property or at type level."""

    model_config = _DESCRIPTOR_CONFIG

    type: AssociationType = AssociationType.HAS_MANY
    model: str = Field(default="", description="Target type; defaults to the property type.")
    property_name: str = Field(default="", description="Owning property for type-level use.")
    foreign_key: str = ""
    primary_key: str = ""
    setter_name: str = ""
    getter_name: str = ""
    auto_load: bool = False
    instance_name: str = ""
    association_key: str = ""


class ValidationSpec(BaseModel):
    """Declared validation; ``property_name`` is required at type level."""

    model_config = _DESCRIPTOR_CONFIG

    type: ValidationType
    property_name: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ConstraintSpec(BaseModel):
    """Bean-validation style constraint (``NotNull``, ``Size(min=2)``, ...)."""

    model_config = _DESCRIPTOR_CONFIG

    name: str = Field(..., min_length=1)
    attributes: Dict[str, Any] = Field(default_factory=dict)


class ClientIdSpec(BaseModel):
    """Marks the client-id property."""

    model_config = _DESCRIPTOR_CONFIG

    configure_writer: bool = True


# ---------------------------------------------------------------------------
# Properties and classes
# ---------------------------------------------------------------------------


class PropertyDescriptor(BaseModel):
    """One discovered field or accessor method."""

    model_config = _DESCRIPTOR_CONFIG

    kind: Literal["field", "method"] = "field"
    name: str = Field(..., min_length=1, description="Field or method name.")
    type_name: str = Field(
        default="", description="Declared type, or return type for methods."
    )
    element_type: str = Field(
        default="", description="Element type for collection-valued properties."
    )
    public: bool = False
    has_read_method: bool = Field(
        default=False, description="Readable through a non-ignored accessor."
    )
    json_ignore: bool = False

    field_spec: Optional[FieldSpec] = None
    id_marker: bool = False
    client_id: Optional[ClientIdSpec] = None
    version_marker: bool = False
    association: Optional[AssociationSpec] = None
    validations: List[ValidationSpec] = Field(default_factory=list)
    constraints: List[ConstraintSpec] = Field(default_factory=list)
    accessor_constraints: List[ConstraintSpec] = Field(
        default_factory=list, description="Constraints on the getter or setter."
    )


class ModelSpec(BaseModel):
    """Class-level model settings."""

    model_config = _DESCRIPTOR_CONFIG

    value: str = Field(default="", description="Model name override.")
    extend: str = "Ext.data.Model"
    autodetect_types: bool = True
    id_property: str = "id"
    client_id_property: str = ""
    version_property: str = ""
    paging: bool = False
    disable_paging_parameters: bool = False
    create_method: str = ""
    read_method: str = ""
    update_method: str = ""
    destroy_method: str = ""
    message_property: str = ""
    writer: str = ""
    reader: str = ""
    success_property: str = ""
    total_property: str = ""
    root_property: str = ""
    write_all_fields: Optional[bool] = None
    all_data_options: DataOptionsSpec = Field(default_factory=DataOptionsSpec)
    partial_data_options: DataOptionsSpec = Field(default_factory=DataOptionsSpec)
    identifier: str = ""
    has_many: List[str] = Field(default_factory=list)


class RelatedModel(BaseModel):
    """What is known about an association target type."""

    model_config = _DESCRIPTOR_CONFIG

    name: str = Field(..., min_length=1, description="Target model name.")
    id_property: str = "id"


class ClassDescriptor(BaseModel):
    """
    Everything the core needs to know about one source class.

    ``fields`` lists field properties from the class itself first, then its
    superclasses, so the first occurrence of a name is the most specific one.
    """

    model_config = _DESCRIPTOR_CONFIG

    simple_name: str = Field(..., min_length=1)
    interface: bool = False
    model: Optional[ModelSpec] = None

    type_fields: List[FieldSpec] = Field(default_factory=list)
    type_associations: List[AssociationSpec] = Field(default_factory=list)
    type_validations: List[ValidationSpec] = Field(default_factory=list)

    fields: List[PropertyDescriptor] = Field(default_factory=list)
    methods: List[PropertyDescriptor] = Field(default_factory=list)

    related: Dict[str, RelatedModel] = Field(
        default_factory=dict, description="Association targets by type name."
    )

    def __repr__(self) -> str:
        return (
            f"<ClassDescriptor {self.simple_name} "
            f"({len(self.fields)} fields, {len(self.methods)} methods)>"
        )


__all__: List[str] = [
    "ReferenceSpec",
    "FieldSpec",
    "AssociationSpec",
    "ValidationSpec",
    "ConstraintSpec",
    "ClientIdSpec",
    "PropertyDescriptor",
    "ModelSpec",
    "RelatedModel",
    "ClassDescriptor",
]
