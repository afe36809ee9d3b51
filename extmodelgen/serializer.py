# File: extmodelgen/serializer.py
"""
ExtModelGen - Dialect Serializer
==================================
Renders a ``ModelDefinition`` as an ``Ext.define(...)`` call.

Pipeline::

    ModelDefinition ──build_document──► ordered dict ──LiteralWriter──► text
                                                     ──wrap──► Ext.define("Name",{...});
                                                     ──post-process──► quotes, line endings

Document key order is fixed::

    extend, uses,
    [config:] requires, identifier|idgen, idProperty, versionProperty,
              clientIdProperty, fields, hasMany, associations, validations, proxy

Whether the bracketed block sits at the top level or under ``config``, and
every other dialect difference, comes from ``extmodelgen.dialects``.  The
model is never modified; type aliasing and validator placement are
computed per call, so rendering twice gives byte-identical text.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

from extmodelgen.assembler import build_model
from extmodelgen.descriptors import ClassDescriptor
from extmodelgen.dialects import DialectRules, rules_for
from extmodelgen.literals import UNDEFINED, LiteralWriter, RawJs
from extmodelgen.models import (
    DEFAULT_VALUE_UNDEFINED,
    ApiQuoteStyle,
    Association,
    FieldDescriptor,
    FieldType,
    GenerationConfig,
    LineEnding,
    ModelDefinition,
    Reference,
    Validation,
)
from extmodelgen.requires import Requirements, resolve_requirements
from extmodelgen.validations import RAW_PARAMS

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.serializer")

_LINE_BREAK_RE: re.Pattern[str] = re.compile(r"\r?\n")
_DEFINE_NAME_RE: re.Pattern[str] = re.compile(r"(Ext\.define\([\"'].+?)([\"'],)")

_LINE_ENDINGS: Dict[str, str] = {
    LineEnding.CRLF.value: "\r\n",
    LineEnding.LF.value: "\n",
}

# Types that do not keep a field from being written as a bare name.
_IMPLICIT_TYPES = (None, FieldType.AUTO, FieldType.STRING)

_ASSOCIATION_KEYS = (
    ("type", "type"),
    ("model", "model"),
    ("auto_load", "autoLoad"),
    ("foreign_key", "foreignKey"),
    ("name", "name"),
    ("primary_key", "primaryKey"),
    ("setter_name", "setterName"),
    ("getter_name", "getterName"),
    ("association_key", "associationKey"),
    ("instance_name", "instanceName"),
)


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


def _validation_params(validation: Validation) -> Dict[str, Any]:
    return {
        key: RawJs(value) if key in RAW_PARAMS else value
        for key, value in validation.params.items()
    }


def _default_value(value: Any) -> Any:
    if value == DEFAULT_VALUE_UNDEFINED:
        return UNDEFINED
    return value


def _reference(reference: Any) -> Any:
    if isinstance(reference, Reference):
        return reference.model_dump(exclude_none=True)
    return reference


def field_attributes(
    field: FieldDescriptor,
    rules: DialectRules,
    validators: Optional[List[Validation]] = None,
) -> Dict[str, Any]:
    """Attributes of *field* visible in the dialect, in output order."""
    type_name: Optional[str] = (
        field.custom_type if field.custom_type else rules.type_name(field.field_type)
    )
    candidates: List[tuple] = [
        ("type", type_name),
        ("dateFormat", field.date_format),
        ("defaultValue", None if field.default_value is None else _default_value(field.default_value)),
        (rules.null_key, field.allow_null),
        ("allowBlank", field.allow_blank),
        ("unique", field.unique),
        ("mapping", field.mapping),
        ("persist", field.persist),
        ("critical", field.critical),
        ("convert", RawJs(field.convert) if field.convert else None),
        ("calculate", RawJs(field.calculate) if field.calculate else None),
        ("depends", field.depends),
        ("reference", _reference(field.reference)),
        (
            "validators",
            [{"type": v.type, **_validation_params(v)} for v in validators] if validators else None,
        ),
    ]
    return {
        key: value
        for key, value in candidates
        if value is not None and rules.shows(key)
    }


def render_field(
    field: FieldDescriptor,
    rules: DialectRules,
    validators: Optional[List[Validation]] = None,
) -> Any:
    """
    Bare name when nothing but an implicit type is set, else an object.

    Examples:
        >>> rules = rules_for("extjs5")
        >>> render_field(FieldDescriptor(name="name", field_type="string"), rules)
        'name'
        >>> render_field(FieldDescriptor(name="age", field_type="int"), rules)
        {'name': 'age', 'type': 'int'}
    """
    attributes: Dict[str, Any] = field_attributes(field, rules, validators)
    only_type: bool = set(attributes) <= {"type"}
    if only_type and not field.custom_type and field.field_type in _IMPLICIT_TYPES:
        return field.name
    return {"name": field.name, **attributes}


# ---------------------------------------------------------------------------
# Associations & validations
# ---------------------------------------------------------------------------


def render_association(association: Association) -> Dict[str, Any]:
    values: Dict[str, Any] = association.model_dump()
    return {
        key: values[attr]
        for attr, key in _ASSOCIATION_KEYS
        if values[attr] is not None
    }


def render_validation(validation: Validation) -> Dict[str, Any]:
    return {"type": validation.type, "field": validation.field, **_validation_params(validation)}


# ---------------------------------------------------------------------------
# Proxy
# ---------------------------------------------------------------------------


def _quote_api(config: GenerationConfig, rules: DialectRules) -> bool:
    if config.api_quote_style == ApiQuoteStyle.ALWAYS:
        return True
    if config.api_quote_style == ApiQuoteStyle.DIALECT:
        return rules.quote_api_by_default
    return False


def _api_value(method: str, quoted: bool) -> Any:
    return method if quoted else RawJs(method)


def build_proxy(
    model: ModelDefinition,
    rules: DialectRules,
    config: GenerationConfig,
) -> Optional[Dict[str, Any]]:
    """Direct proxy configuration, or None when the model declares none."""
    quoted: bool = _quote_api(config, rules)
    content: Dict[str, Any] = {}

    methods: Dict[str, Optional[str]] = {
        "create": model.create_method,
        "read": model.read_method,
        "update": model.update_method,
        "destroy": model.destroy_method,
    }
    declared: Dict[str, str] = {k: v for k, v in methods.items() if v is not None}
    if list(declared) == ["read"]:
        content["directFn"] = _api_value(declared["read"], quoted)
    elif declared:
        content["api"] = {k: _api_value(v, quoted) for k, v in declared.items()}

    reader: Dict[str, Any] = {}
    if model.reader is not None:
        reader["type"] = model.reader
    root: Optional[str] = model.root_property or ("records" if model.paging else None)
    if root is not None:
        reader[rules.reader_root_key] = root
    for key, value in (
        ("successProperty", model.success_property),
        ("totalProperty", model.total_property),
        ("messageProperty", model.message_property),
    ):
        if value is not None:
            reader[key] = value
    if reader:
        content["reader"] = reader

    writer: Dict[str, Any] = {}
    if model.writer is not None:
        writer["type"] = model.writer
    if (
        model.write_all_fields is not None
        and model.write_all_fields != rules.default_write_all_fields
    ):
        writer["writeAllFields"] = model.write_all_fields
    if model.client_id_property and model.client_id_property_add_to_writer:
        writer["clientIdProperty"] = model.client_id_property
    if rules.supports_data_options:
        if model.all_data_options.has_any_properties():
            writer["allDataOptions"] = model.all_data_options.to_config()
        if model.partial_data_options.has_any_properties():
            writer["partialDataOptions"] = model.partial_data_options.to_config()
    if writer:
        content["writer"] = writer

    if not content:
        return None

    proxy: Dict[str, Any] = {"type": "direct"}
    if model.id_property != "id":
        proxy["idParam"] = model.id_property
    if model.disable_paging_parameters:
        proxy["pageParam"] = UNDEFINED
        proxy["startParam"] = UNDEFINED
        proxy["limitParam"] = UNDEFINED
    proxy.update(content)
    return proxy


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def build_document(model: ModelDefinition, config: GenerationConfig) -> Dict[str, Any]:
    """Ordered key/value document for *model* in the configured dialect."""
    rules: DialectRules = rules_for(config.output_format)
    proxy: Optional[Dict[str, Any]] = build_proxy(model, rules, config)
    requirements: Requirements = resolve_requirements(
        model, rules, proxy_has_content=proxy is not None
    )

    document: Dict[str, Any] = {"extend": model.extend}

    uses: List[str] = sorted({a.model for a in model.associations} - {model.name})
    if uses:
        document["uses"] = uses

    block: Dict[str, Any] = {}
    if requirements.requires:
        block["requires"] = requirements.requires
    if model.identifier:
        block[rules.identifier_key] = model.identifier
    if model.id_property and model.id_property != "id":
        block["idProperty"] = model.id_property
    if rules.supports_version_property and model.version_property:
        block["versionProperty"] = model.version_property
    if (
        model.client_id_property
        and model.client_id_property != rules.implicit_client_id_property
    ):
        block["clientIdProperty"] = model.client_id_property

    block["fields"] = [
        render_field(field, rules, requirements.validators.get(name))
        for name, field in model.fields.items()
    ]

    if model.has_many is not None:
        block["hasMany"] = list(model.has_many)
    if model.associations:
        block["associations"] = [render_association(a) for a in model.associations]
    if model.validations and not rules.inline_validators:
        block["validations"] = [render_validation(v) for v in model.validations]
    if proxy is not None:
        block["proxy"] = proxy

    if rules.nested_config:
        document["config"] = block
    else:
        document.update(block)
    return document


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def post_process(code: str, config: GenerationConfig) -> str:
    """Apply quote style, then line-ending normalization."""
    if config.use_single_quotes:
        code = code.replace('"', "'")
    line_ending: str = _LINE_ENDINGS.get(config.line_ending, os.linesep)
    return _LINE_BREAK_RE.sub(line_ending, code)


def _define(name: str, document: Dict[str, Any], config: GenerationConfig) -> str:
    writer = LiteralWriter(pretty=config.debug, quote_keys=config.quote_field_names)
    parts: List[str] = ["Ext.define(", json.dumps(name, ensure_ascii=False), ","]
    if config.debug:
        parts.append("\r\n")
    parts.append(writer.write(document))
    parts.append(");")
    return post_process("".join(parts), config)


def generate_javascript(model: ModelDefinition, config: GenerationConfig) -> str:
    """
    Render *model* as ``Ext.define("<name>",{...});``.

    Raises:
        SerializationError: when the document cannot be written.
    """
    code: str = _define(model.name, build_document(model, config), config)
    logger.debug(
        "Rendered '%s' as %s (%d chars).", model.name, config.output_format, len(code)
    )
    return code


def generate_javascript_for_class(
    descriptor: ClassDescriptor,
    config: GenerationConfig,
) -> str:
    """Assemble and render one class descriptor."""
    return generate_javascript(build_model(descriptor, config), config)


def generate_subclass_javascript(name: str, config: GenerationConfig) -> str:
    """Companion definition ``Ext.define("<name>",{extend:"<name>Base"});``."""
    return _define(name, {"extend": f"{name}Base"}, config)


def rename_to_base(code: str) -> str:
    """Append ``Base`` to the name of the first ``Ext.define`` in *code*."""
    return _DEFINE_NAME_RE.sub(r"\1Base\2", code, count=1)


__all__: List[str] = [
    "field_attributes",
    "render_field",
    "render_association",
    "render_validation",
    "build_proxy",
    "build_document",
    "post_process",
    "generate_javascript",
    "generate_javascript_for_class",
    "generate_subclass_javascript",
    "rename_to_base",
]
