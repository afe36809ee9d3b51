# File: extmodelgen/dialects.py
"""
ExtModelGen - Dialect Decision Table
======================================
Every way the three output dialects differ, in one place.

    rule                    extjs4      extjs5          touch2
    ──────────────────────  ──────────  ──────────────  ──────────
    config placement        top level   top level       "config"
    requires                no          yes             no
    identifier key          idgen       identifier      identifier
    versionProperty         no          yes             no
    implicit clientId       -           -               clientId
    validations             list        field validators list
    null flag key           useNull     allowNull       allowNull
    reader root key         root        rootProperty    rootProperty
    writeAllFields default  true        false           true
    data options on writer  no          yes             no
    quoted API (dialect)    no          yes             no
    float type written as   float       number          float

The serializer only ever asks ``rules_for(output_format)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from extmodelgen.models import FieldType, OutputFormat

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.dialects")

# Field attributes every dialect understands.
_COMMON_FIELD_ATTRIBUTES: FrozenSet[str] = frozenset({
    "type", "dateFormat", "defaultValue", "mapping", "persist", "convert",
})


@dataclass(frozen=True, slots=True)
class DialectRules:
    """Rendering rules for one output dialect."""

    output_format: OutputFormat
    nested_config: bool
    supports_requires: bool
    identifier_key: str
    supports_version_property: bool
    implicit_client_id_property: Optional[str]
    inline_validators: bool
    null_key: str
    reader_root_key: str
    default_write_all_fields: bool
    supports_data_options: bool
    quote_api_by_default: bool
    float_type_name: str
    field_attributes: FrozenSet[str]

    def type_name(self, field_type: Optional[str]) -> Optional[str]:
        """Written name of a semantic type; FLOAT and NUMBER alias per dialect."""
        if field_type in (FieldType.FLOAT, FieldType.NUMBER):
            return self.float_type_name
        return field_type

    def shows(self, attribute: str) -> bool:
        """Whether a field attribute is part of this dialect's field view."""
        return attribute in self.field_attributes


_RULES: Dict[OutputFormat, DialectRules] = {
    OutputFormat.EXTJS4: DialectRules(
        output_format=OutputFormat.EXTJS4,
        nested_config=False,
        supports_requires=False,
        identifier_key="idgen",
        supports_version_property=False,
        implicit_client_id_property=None,
        inline_validators=False,
        null_key="useNull",
        reader_root_key="root",
        default_write_all_fields=True,
        supports_data_options=False,
        quote_api_by_default=False,
        float_type_name=FieldType.FLOAT.value,
        field_attributes=_COMMON_FIELD_ATTRIBUTES | {"useNull"},
    ),
    OutputFormat.EXTJS5: DialectRules(
        output_format=OutputFormat.EXTJS5,
        nested_config=False,
        supports_requires=True,
        identifier_key="identifier",
        supports_version_property=True,
        implicit_client_id_property=None,
        inline_validators=True,
        null_key="allowNull",
        reader_root_key="rootProperty",
        default_write_all_fields=False,
        supports_data_options=True,
        quote_api_by_default=True,
        float_type_name=FieldType.NUMBER.value,
        field_attributes=_COMMON_FIELD_ATTRIBUTES | {
            "allowNull", "allowBlank", "unique", "critical", "calculate",
            "depends", "reference", "validators",
        },
    ),
    OutputFormat.TOUCH2: DialectRules(
        output_format=OutputFormat.TOUCH2,
        nested_config=True,
        supports_requires=False,
        identifier_key="identifier",
        supports_version_property=False,
        implicit_client_id_property="clientId",
        inline_validators=False,
        null_key="allowNull",
        reader_root_key="rootProperty",
        default_write_all_fields=True,
        supports_data_options=False,
        quote_api_by_default=False,
        float_type_name=FieldType.FLOAT.value,
        field_attributes=_COMMON_FIELD_ATTRIBUTES | {"allowNull"},
    ),
}


def rules_for(output_format: str) -> DialectRules:
    """Decision table entry for *output_format* (an ``OutputFormat`` or its value)."""
    return _RULES[OutputFormat(output_format)]


__all__: List[str] = [
    "DialectRules",
    "rules_for",
]
