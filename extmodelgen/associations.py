# File: extmodelgen/associations.py
"""
ExtModelGen - Association Factory
===================================
Builds canonical ``Association`` records from declared association specs.

Target resolution: an explicit ``model`` wins; otherwise the element type of
a collection (``hasMany``) or the property type (``belongsTo``/``hasOne``).
A type listed in the descriptor's ``related`` table resolves to that model's
name; anything else resolves to its simple name.

Defaults filled in when not declared:

    hasMany               foreignKey = <owner>_id, name = property
    belongsTo / hasOne    foreignKey = <property>_id,
                          getterName / setterName = get<Property> / set<Property>
"""

from __future__ import annotations

import logging
from typing import List, Optional

from extmodelgen.descriptors import AssociationSpec, ClassDescriptor, RelatedModel
from extmodelgen.errors import MetadataError
from extmodelgen.models import Association, AssociationType
from extmodelgen.utils import capitalize, simple_type_name, trim_to_none, uncapitalize

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.associations")


def _related(owner: ClassDescriptor, type_name: str) -> Optional[RelatedModel]:
    return owner.related.get(type_name) or owner.related.get(simple_type_name(type_name))


def resolve_model_name(owner: ClassDescriptor, type_name: str) -> str:
    """Model name for an association target type."""
    related: Optional[RelatedModel] = _related(owner, type_name)
    if related is not None:
        return related.name
    return simple_type_name(type_name)


def create_association(
    owner: ClassDescriptor,
    spec: AssociationSpec,
    *,
    property_name: str,
    type_name: str = "",
    element_type: str = "",
    owner_id_property: str = "id",
) -> Association:
    """
    Build one association for *property_name* of *owner*.

    Raises:
        MetadataError: when no target type can be determined.
    """
    kind: AssociationType = AssociationType(spec.type)
    is_has_many: bool = kind == AssociationType.HAS_MANY

    target_type: Optional[str] = trim_to_none(spec.model)
    if target_type is None:
        target_type = trim_to_none(element_type if is_has_many else type_name)
    if target_type is None:
        raise MetadataError(
            f"Cannot determine the target model of {kind.value} association.",
            field=property_name,
        )

    related: Optional[RelatedModel] = _related(owner, target_type)
    association = Association(type=kind, model=resolve_model_name(owner, target_type))

    if spec.auto_load:
        if is_has_many:
            association.auto_load = True
        else:
            logger.warning(
                "autoLoad is only supported for hasMany; ignored on '%s'.",
                property_name,
            )

    association.foreign_key = trim_to_none(spec.foreign_key)
    if association.foreign_key is None:
        if is_has_many:
            association.foreign_key = uncapitalize(owner.simple_name) + "_id"
        else:
            association.foreign_key = property_name + "_id"

    if is_has_many:
        association.name = property_name

    association.primary_key = trim_to_none(spec.primary_key)
    if association.primary_key is None:
        if is_has_many and owner_id_property != "id":
            association.primary_key = owner_id_property
        elif not is_has_many and related is not None and related.id_property != "id":
            association.primary_key = related.id_property

    association.setter_name = trim_to_none(spec.setter_name)
    association.getter_name = trim_to_none(spec.getter_name)
    if not is_has_many:
        if association.setter_name is None:
            association.setter_name = "set" + capitalize(property_name)
        if association.getter_name is None:
            association.getter_name = "get" + capitalize(property_name)

    association.association_key = trim_to_none(spec.association_key) or property_name
    association.instance_name = trim_to_none(spec.instance_name)

    logger.debug(
        "Association %s.%s → %s (%s).",
        owner.simple_name,
        property_name,
        association.model,
        association.type,
    )
    return association


__all__: List[str] = [
    "resolve_model_name",
    "create_association",
]
