# File: extmodelgen/assembler.py
"""
ExtModelGen - Model Assembler
===============================
Builds one ``ModelDefinition`` from a ``ClassDescriptor``.

Processing order decides precedence, so it is fixed:

    class-level settings (ModelSpec)
    → type-level fields → type-level associations → type-level validations
    → field properties (subclass first, first name wins)
    → annotated accessor methods, sorted by name

Interface-style descriptors have no fields; all of their methods are
processed in name order.  A field or method declaration replaces a
type-level field of the same name; any other duplicate is ignored.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from extmodelgen.associations import create_association
from extmodelgen.descriptors import (
    AssociationSpec,
    ClassDescriptor,
    ModelSpec,
    PropertyDescriptor,
)
from extmodelgen.errors import MetadataError
from extmodelgen.fields import create_field, is_void_method, normalize_property
from extmodelgen.models import (
    AllDataOptions,
    Association,
    GenerationConfig,
    ModelDefinition,
    PartialDataOptions,
    Validation,
)
from extmodelgen.utils import has_text, simple_type_name, trim_to_none, uncapitalize
from extmodelgen.validations import create_validation

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.assembler")


# ---------------------------------------------------------------------------
# Class-level settings
# ---------------------------------------------------------------------------


def model_name(descriptor: ClassDescriptor) -> str:
    """Explicit model name if declared, else the class's simple name."""
    if descriptor.model is not None and has_text(descriptor.model.value):
        return descriptor.model.value.strip()
    return descriptor.simple_name


def _apply_model_spec(model: ModelDefinition, spec: ModelSpec) -> None:
    model.autodetect_types = spec.autodetect_types
    model.extend = trim_to_none(spec.extend) or "Ext.data.Model"
    model.id_property = trim_to_none(spec.id_property) or "id"
    model.version_property = trim_to_none(spec.version_property)
    model.paging = spec.paging
    model.disable_paging_parameters = spec.disable_paging_parameters

    model.create_method = trim_to_none(spec.create_method)
    model.read_method = trim_to_none(spec.read_method)
    model.update_method = trim_to_none(spec.update_method)
    model.destroy_method = trim_to_none(spec.destroy_method)

    model.message_property = trim_to_none(spec.message_property)
    model.writer = trim_to_none(spec.writer)
    model.reader = trim_to_none(spec.reader)
    model.success_property = trim_to_none(spec.success_property)
    model.total_property = trim_to_none(spec.total_property)
    model.root_property = trim_to_none(spec.root_property)

    model.write_all_fields = spec.write_all_fields
    model.all_data_options = AllDataOptions.from_spec(spec.all_data_options)
    model.partial_data_options = PartialDataOptions.from_spec(spec.partial_data_options)
    model.identifier = trim_to_none(spec.identifier)

    client_id_property: Optional[str] = trim_to_none(spec.client_id_property)
    model.client_id_property = client_id_property
    model.client_id_property_add_to_writer = client_id_property is not None

    if spec.has_many and has_text(spec.has_many[0]):
        model.has_many = list(spec.has_many)


# ---------------------------------------------------------------------------
# Type-level declarations
# ---------------------------------------------------------------------------


def _add_type_level(
    model: ModelDefinition,
    descriptor: ClassDescriptor,
    config: GenerationConfig,
) -> None:
    for field_spec in descriptor.type_fields:
        if not has_text(field_spec.value):
            logger.debug("Type-level field without a name on %s ignored.", model.name)
            continue
        model.add_field(create_field(field_spec.value.strip(), field_spec, None), type_level=True)

    for spec in descriptor.type_associations:
        model.add_association(_type_level_association(model, descriptor, spec))

    for spec in descriptor.type_validations:
        if not has_text(spec.property_name):
            raise MetadataError(
                f"Type-level '{spec.type}' validation on '{model.name}' "
                "needs a property name."
            )
        validation: Optional[Validation] = create_validation(
            spec.property_name.strip(), spec, config.include_validation
        )
        if validation is not None:
            model.add_validation(validation)


def _type_level_association(
    model: ModelDefinition,
    descriptor: ClassDescriptor,
    spec: AssociationSpec,
) -> Association:
    if not has_text(spec.model):
        raise MetadataError(
            f"Type-level {spec.type} association on '{model.name}' needs a model."
        )
    name: str = trim_to_none(spec.property_name) or uncapitalize(simple_type_name(spec.model))
    return create_association(
        descriptor,
        spec,
        property_name=name,
        type_name=spec.model,
        element_type=spec.model,
        owner_id_property=model.id_property,
    )


# ---------------------------------------------------------------------------
# Property selection
# ---------------------------------------------------------------------------


def _selected_fields(descriptor: ClassDescriptor) -> List[PropertyDescriptor]:
    """Field properties that contribute, first occurrence of a name only."""
    seen: Set[str] = set()
    selected: List[PropertyDescriptor] = []
    for prop in descriptor.fields:
        if prop.name in seen:
            continue
        explicit: bool = prop.field_spec is not None or prop.association is not None
        implicit: bool = (prop.public or prop.has_read_method) and not prop.json_ignore
        if explicit or implicit:
            seen.add(prop.name)
            selected.append(prop)
    return selected


def _selected_methods(descriptor: ClassDescriptor) -> List[PropertyDescriptor]:
    if descriptor.interface:
        methods = list(descriptor.methods)
    else:
        methods = [
            m for m in descriptor.methods
            if (m.field_spec is not None or m.association is not None) and not m.json_ignore
        ]
    return sorted(methods, key=lambda m: m.name)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_model(descriptor: ClassDescriptor, config: GenerationConfig) -> ModelDefinition:
    """
    Assemble the canonical model for one class.

    Raises:
        MetadataError: on malformed or contradictory metadata.
    """
    model = ModelDefinition(name=model_name(descriptor))
    if descriptor.model is not None:
        _apply_model_spec(model, descriptor.model)

    if descriptor.interface:
        properties: List[PropertyDescriptor] = _selected_methods(descriptor)
    else:
        _add_type_level(model, descriptor, config)
        properties = _selected_fields(descriptor) + _selected_methods(descriptor)

    id_names: List[str] = []
    for prop in properties:
        normalize_property(model, descriptor, prop, config)
        if prop.id_marker and not is_void_method(prop):
            if id_names and model.id_property not in id_names:
                raise MetadataError(
                    f"Model '{model.name}' declares two id properties: "
                    f"'{id_names[0]}' and '{model.id_property}'.",
                    field=model.id_property,
                )
            id_names.append(model.id_property)

    _warn_on_unused_critical(model)

    logger.debug("Assembled %r.", model)
    return model


def _warn_on_unused_critical(model: ModelDefinition) -> None:
    if model.all_data_options.changes or model.partial_data_options.changes:
        return
    critical: List[str] = [f.name for f in model.fields.values() if f.critical]
    if critical:
        logger.warning(
            "Model '%s': critical field(s) %s have no effect unless a data "
            "options bundle sets 'changes'.",
            model.name,
            ", ".join(critical),
        )


__all__: List[str] = [
    "model_name",
    "build_model",
]
