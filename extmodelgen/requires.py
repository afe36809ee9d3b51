# File: extmodelgen/requires.py
"""
ExtModelGen - Validation / Requires Resolver
==============================================
Derives the auxiliary framework classes a model depends on, and the
per-field validator lists for dialects that embed validators in fields.

Sources of requires:

- each validation kind with a validator class (table below); kinds without
  one contribute nothing,
- a proxy with content → ``Ext.data.proxy.Direct``,
- a well-known identifier strategy → ``Ext.data.identifier.*``.

Requires are returned sorted; the result is the same however often the
resolver runs on the same model.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from extmodelgen.dialects import DialectRules
from extmodelgen.models import ModelDefinition, Validation

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.requires")

VALIDATOR_CLASSES: Dict[str, str] = {
    "email": "Ext.data.validator.Email",
    "exclusion": "Ext.data.validator.Exclusion",
    "format": "Ext.data.validator.Format",
    "inclusion": "Ext.data.validator.Inclusion",
    "length": "Ext.data.validator.Length",
    "presence": "Ext.data.validator.Presence",
    "range": "Ext.data.validator.Range",
}

IDENTIFIER_CLASSES: Dict[str, str] = {
    "sequential": "Ext.data.identifier.Sequential",
    "uuid": "Ext.data.identifier.Uuid",
    "negative": "Ext.data.identifier.Negative",
}

PROXY_CLASS: str = "Ext.data.proxy.Direct"


def validator_class(kind: str) -> Optional[str]:
    """Framework class for a validation kind, None for kinds without one."""
    return VALIDATOR_CLASSES.get(getattr(kind, "value", kind))


@dataclass(frozen=False, slots=True)
class Requirements:
    """Output of the resolver for one model and dialect."""

    requires: List[str] = field(default_factory=list)
    validators: Dict[str, List[Validation]] = field(default_factory=dict)


def field_validators(model: ModelDefinition) -> Dict[str, List[Validation]]:
    """
    Validators per field in field order; one per kind, first one wins.

    Validations naming an unknown field are left out.
    """
    result: Dict[str, List[Validation]] = {}
    for name in model.fields:
        validators: List[Validation] = []
        kinds: Set[str] = set()
        for validation in model.validations:
            if validation.field == name and validation.type not in kinds:
                kinds.add(validation.type)
                validators.append(validation)
        if validators:
            result[name] = validators
    return result


def resolve_requirements(
    model: ModelDefinition,
    rules: DialectRules,
    *,
    proxy_has_content: bool,
) -> Requirements:
    """Requires and inline validators of *model* under *rules*."""
    result = Requirements()
    if rules.inline_validators:
        result.validators = field_validators(model)

    if not rules.supports_requires:
        return result

    requires: Set[str] = set()
    for validators in result.validators.values():
        for validation in validators:
            class_name: Optional[str] = validator_class(validation.type)
            if class_name is not None:
                requires.add(class_name)

    if proxy_has_content:
        requires.add(PROXY_CLASS)

    if model.identifier in IDENTIFIER_CLASSES:
        requires.add(IDENTIFIER_CLASSES[model.identifier])

    result.requires = sorted(requires)
    logger.debug("Model '%s' requires %s.", model.name, result.requires)
    return result


__all__: List[str] = [
    "VALIDATOR_CLASSES",
    "IDENTIFIER_CLASSES",
    "PROXY_CLASS",
    "validator_class",
    "Requirements",
    "field_validators",
    "resolve_requirements",
]
