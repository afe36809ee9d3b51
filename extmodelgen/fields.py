# File: extmodelgen/fields.py
"""
ExtModelGen - Field Normalizer
================================
Turns one discovered property into canonical model entries.

For each ``PropertyDescriptor`` the normalizer:

1. Derives the field name (``getName`` → ``name``, ``isActive`` →
   ``active``; an explicit ``field_spec.value`` wins).
2. Resolves the semantic type: a custom type verbatim, a declared type, the
   first matching entry of the type matcher table (when the model
   autodetects types), or ``auto``.
3. Applies the declared field attributes with their defaulting rules.
4. Registers the field plus any id / client-id / version marker,
   association, and validations on the ``ModelDefinition``.

A property without a field declaration whose type matches nothing is not a
field; its markers and association are still registered.
"""

from __future__ import annotations

import logging
import math
import re
from typing import FrozenSet, List, Optional, Tuple

from extmodelgen.associations import create_association
from extmodelgen.descriptors import (
    ClassDescriptor,
    FieldSpec,
    PropertyDescriptor,
    ReferenceSpec,
)
from extmodelgen.errors import MetadataError
from extmodelgen.models import (
    DEFAULT_VALUE_UNDEFINED,
    NULLABLE_TYPES,
    FieldDescriptor,
    FieldType,
    GenerationConfig,
    IncludeValidation,
    ModelDefinition,
    Reference,
    Validation,
)
from extmodelgen.utils import has_text, simple_type_name, trim_to_none, uncapitalize
from extmodelgen.validations import create_validation, validations_from_constraints

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.fields")

_VOID_TYPES: FrozenSet[str] = frozenset({"void", "Void", "None", "NoneType"})

# Plain decimal literals only; no underscores, nan or infinity.
_INTEGER_RE: re.Pattern[str] = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE: re.Pattern[str] = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# ---------------------------------------------------------------------------
# Type matchers — checked in order, first match wins
# ---------------------------------------------------------------------------

TYPE_MATCHERS: Tuple[Tuple[FieldType, FrozenSet[str]], ...] = (
    (
        FieldType.INTEGER,
        frozenset({
            "int", "long", "short", "byte",
            "Integer", "Long", "Short", "Byte", "BigInteger",
            "AtomicInteger", "AtomicLong",
        }),
    ),
    (
        FieldType.FLOAT,
        frozenset({"float", "double", "Float", "Double", "BigDecimal", "Decimal"}),
    ),
    (
        FieldType.STRING,
        frozenset({"str", "String", "char", "Character"}),
    ),
    (
        FieldType.BOOLEAN,
        frozenset({"bool", "boolean", "Boolean"}),
    ),
    (
        FieldType.DATE,
        frozenset({
            "date", "datetime", "Date", "Timestamp", "Calendar",
            "GregorianCalendar", "LocalDate", "LocalDateTime",
            "ZonedDateTime", "OffsetDateTime", "Instant", "DateTime",
        }),
    ),
)


def _unwrap_optional(type_name: str) -> str:
    text: str = type_name.strip()
    for prefix in ("Optional[", "typing.Optional["):
        if text.startswith(prefix) and text.endswith("]"):
            return text[len(prefix):-1]
    return text


def detect_field_type(type_name: str) -> Optional[FieldType]:
    """
    Semantic type for a declared type name, or None if nothing matches.

    Examples:
        >>> detect_field_type("java.lang.Long")
        <FieldType.INTEGER: 'int'>
        >>> detect_field_type("Optional[bool]")
        <FieldType.BOOLEAN: 'boolean'>
        >>> detect_field_type("com.acme.Address") is None
        True
    """
    if not has_text(type_name):
        return None
    name: str = simple_type_name(_unwrap_optional(type_name))
    for field_type, names in TYPE_MATCHERS:
        if name in names:
            return field_type
    return None


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def accessor_property_name(method_name: str) -> str:
    """``getFirstName`` → ``firstName``; ``isActive`` → ``active``."""
    if method_name.startswith("get") and len(method_name) > 3:
        return uncapitalize(method_name[3:])
    if method_name.startswith("is") and len(method_name) > 2:
        return uncapitalize(method_name[2:])
    return method_name


def property_name(prop: PropertyDescriptor) -> str:
    """Field name of *prop*; an explicit field name overrides the derived one."""
    if prop.field_spec is not None and has_text(prop.field_spec.value):
        return prop.field_spec.value.strip()
    if prop.kind == "method":
        return accessor_property_name(prop.name)
    return prop.name


# ---------------------------------------------------------------------------
# Field attributes
# ---------------------------------------------------------------------------


def _typed_default(field: FieldDescriptor, raw: str) -> object:
    if raw == DEFAULT_VALUE_UNDEFINED:
        return DEFAULT_VALUE_UNDEFINED
    text: str = raw.strip()
    if field.field_type == FieldType.BOOLEAN:
        return text.lower() == "true"
    if field.field_type == FieldType.INTEGER and _INTEGER_RE.match(text):
        return int(text)
    if field.field_type in (FieldType.FLOAT, FieldType.NUMBER) and _DECIMAL_RE.match(text):
        value: float = float(text)
        if math.isfinite(value):
            return value
    if field.field_type not in (FieldType.INTEGER, FieldType.FLOAT, FieldType.NUMBER):
        return raw
    raise MetadataError(
        f"Default value {raw!r} is not valid for type '{field.field_type}'.",
        field=field.name,
    )


def _reference(spec: ReferenceSpec) -> Optional[object]:
    reference = Reference(
        type=trim_to_none(spec.type),
        association=trim_to_none(spec.association),
        child=True if spec.child else None,
        parent=True if spec.parent else None,
        role=trim_to_none(spec.role),
        inverse=trim_to_none(spec.inverse),
        unique=True if spec.unique else None,
    )
    if not reference.has_any_properties():
        return None
    if reference.type_only():
        return reference.type
    return reference


def apply_field_spec(field: FieldDescriptor, spec: FieldSpec) -> FieldDescriptor:
    """
    Copy declared attributes onto *field* following the defaulting rules.

    Raises:
        MetadataError: when the default value does not fit the field type.
    """
    if has_text(spec.date_format) and field.field_type == FieldType.DATE:
        field.date_format = spec.date_format

    if has_text(spec.default_value):
        field.default_value = _typed_default(field, spec.default_value)

    nullable: bool = field.field_type is not None and FieldType(field.field_type) in NULLABLE_TYPES
    if (spec.use_null or spec.allow_null) and nullable:
        field.allow_null = True

    if not spec.allow_blank:
        field.allow_blank = False
    if spec.unique:
        field.unique = True

    field.mapping = trim_to_none(spec.mapping)

    if not spec.persist:
        field.persist = False
    if spec.critical:
        field.critical = True

    field.convert = trim_to_none(spec.convert)
    field.calculate = trim_to_none(spec.calculate)
    field.depends = list(spec.depends) if spec.depends else None
    field.reference = _reference(spec.reference)
    return field


def create_field(name: str, spec: FieldSpec, detected: Optional[FieldType]) -> FieldDescriptor:
    """Field for a declaration; the declared type wins over *detected*."""
    if has_text(spec.custom_type):
        field = FieldDescriptor(name=name, custom_type=spec.custom_type.strip())
    else:
        field = FieldDescriptor(
            name=name,
            field_type=spec.type if spec.type is not None else detected,
        )
    return apply_field_spec(field, spec)


# ---------------------------------------------------------------------------
# Property normalization
# ---------------------------------------------------------------------------


def is_void_method(prop: PropertyDescriptor) -> bool:
    """Methods returning nothing never contribute to a model."""
    return prop.kind == "method" and prop.type_name.strip() in _VOID_TYPES


def _property_validations(
    name: str,
    prop: PropertyDescriptor,
    include: str,
) -> List[Validation]:
    if prop.validations:
        result: List[Validation] = []
        for spec in prop.validations:
            validation: Optional[Validation] = create_validation(name, spec, include)
            if validation is not None:
                result.append(validation)
        return result

    constraints = list(prop.constraints)
    if prop.kind == "field":
        constraints.extend(prop.accessor_constraints)
    return validations_from_constraints(name, constraints, include)


def normalize_property(
    model: ModelDefinition,
    owner: ClassDescriptor,
    prop: PropertyDescriptor,
    config: GenerationConfig,
) -> Optional[FieldDescriptor]:
    """
    Register everything *prop* contributes to *model*.

    Returns the field registered (or ignored as a duplicate), or None when
    the property is not a field.

    Raises:
        MetadataError: on malformed declarations.
    """
    if is_void_method(prop):
        logger.debug("Skipping void method %s.%s().", owner.simple_name, prop.name)
        return None

    name: str = property_name(prop)

    detected: Optional[FieldType]
    if model.autodetect_types:
        detected = detect_field_type(prop.type_name)
    else:
        detected = FieldType.AUTO

    field: Optional[FieldDescriptor] = None
    if prop.field_spec is not None:
        field = create_field(name, prop.field_spec, detected)
    elif detected is not None:
        field = FieldDescriptor(name=name, field_type=detected)

    if field is not None:
        model.add_field(field)

    if prop.id_marker:
        model.id_property = name

    if prop.client_id is not None:
        model.client_id_property = name
        model.client_id_property_add_to_writer = prop.client_id.configure_writer

    if prop.version_marker:
        model.version_property = name

    if prop.association is not None:
        model.add_association(
            create_association(
                owner,
                prop.association,
                property_name=name,
                type_name=prop.type_name,
                element_type=prop.element_type,
                owner_id_property=model.id_property,
            )
        )

    if field is not None and config.include_validation != IncludeValidation.NONE:
        for validation in _property_validations(name, prop, config.include_validation):
            model.add_validation(validation)

    return field


__all__: List[str] = [
    "TYPE_MATCHERS",
    "detect_field_type",
    "accessor_property_name",
    "property_name",
    "is_void_method",
    "apply_field_spec",
    "create_field",
    "normalize_property",
]
