"""
tests/test_fields.py
Unit tests for extmodelgen.fields (field normalizer).

Tests cover:
- Type detection from declared type names
- Accessor and explicit field naming
- Field attribute defaulting rules and typed default values
- Marker, association and validation registration per property
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import pytest

from extmodelgen.descriptors import (
    ClassDescriptor,
    FieldSpec,
    PropertyDescriptor,
    ReferenceSpec,
)
from extmodelgen.errors import MetadataError
from extmodelgen.fields import (
    accessor_property_name,
    apply_field_spec,
    create_field,
    detect_field_type,
    normalize_property,
    property_name,
)
from extmodelgen.models import (
    FieldDescriptor,
    FieldType,
    GenerationConfig,
    ModelDefinition,
    Reference,
)


# ===========================================================================
# Type detection
# ===========================================================================


class TestDetectFieldType:
    """Tests for detect_field_type()."""

    @pytest.mark.parametrize(
        "type_name, expected",
        [
            ("int", FieldType.INTEGER),
            ("java.lang.Long", FieldType.INTEGER),
            ("BigInteger", FieldType.INTEGER),
            ("double", FieldType.FLOAT),
            ("java.math.BigDecimal", FieldType.FLOAT),
            ("String", FieldType.STRING),
            ("str", FieldType.STRING),
            ("boolean", FieldType.BOOLEAN),
            ("Optional[bool]", FieldType.BOOLEAN),
            ("java.time.LocalDate", FieldType.DATE),
            ("datetime", FieldType.DATE),
        ],
    )
    def test_known_types(self, type_name: str, expected: FieldType) -> None:
        assert detect_field_type(type_name) == expected

    @pytest.mark.parametrize(
        "type_name",
        ["com.acme.Address", "java.util.List<String>", "", "   "],
    )
    def test_unknown_types_yield_none(self, type_name: str) -> None:
        assert detect_field_type(type_name) is None


# ===========================================================================
# Naming
# ===========================================================================


class TestNaming:
    """Tests for accessor_property_name() and property_name()."""

    @pytest.mark.parametrize(
        "method_name, expected",
        [
            ("getFirstName", "firstName"),
            ("isActive", "active"),
            ("getURL", "uRL"),
            ("get", "get"),
            ("name", "name"),
        ],
    )
    def test_accessor_names(self, method_name: str, expected: str) -> None:
        assert accessor_property_name(method_name) == expected

    def test_method_name_is_derived(self) -> None:
        prop = PropertyDescriptor(kind="method", name="getEmail", type_name="String")
        assert property_name(prop) == "email"

    def test_field_name_is_kept(self) -> None:
        prop = PropertyDescriptor(name="getEmail", type_name="String")
        assert property_name(prop) == "getEmail"

    def test_explicit_name_wins(self) -> None:
        prop = PropertyDescriptor(
            kind="method",
            name="getEmail",
            field_spec=FieldSpec(value="  mail  "),
        )
        assert property_name(prop) == "mail"


# ===========================================================================
# Field attributes
# ===========================================================================


class TestApplyFieldSpec:
    """Tests for apply_field_spec() and create_field()."""

    @pytest.mark.parametrize(
        "field_type, raw, expected",
        [
            (FieldType.BOOLEAN, "TRUE", True),
            (FieldType.BOOLEAN, "no", False),
            (FieldType.INTEGER, "42", 42),
            (FieldType.FLOAT, "1.5", 1.5),
            (FieldType.NUMBER, "-2e3", -2000.0),
            (FieldType.FLOAT, " .5 ", 0.5),
            (FieldType.STRING, "hello", "hello"),
            (FieldType.INTEGER, "undefined", "undefined"),
        ],
    )
    def test_typed_default_values(
        self, field_type: FieldType, raw: str, expected: Any
    ) -> None:
        field = create_field("f", FieldSpec(default_value=raw), field_type)
        assert field.default_value == expected
        assert type(field.default_value) is type(expected)

    def test_invalid_default_value_raises(self) -> None:
        with pytest.raises(MetadataError) as exc_info:
            create_field("age", FieldSpec(default_value="abc"), FieldType.INTEGER)
        assert exc_info.value.field == "age"

    @pytest.mark.parametrize(
        "field_type, raw",
        [
            (FieldType.FLOAT, "nan"),
            (FieldType.FLOAT, "inf"),
            (FieldType.NUMBER, "-Infinity"),
            (FieldType.FLOAT, "1e999"),
            (FieldType.INTEGER, "1_000"),
            (FieldType.FLOAT, "1_000.5"),
            (FieldType.INTEGER, "1.0"),
        ],
    )
    def test_non_plain_numeric_default_raises(self, field_type: FieldType, raw: str) -> None:
        with pytest.raises(MetadataError) as exc_info:
            create_field("score", FieldSpec(default_value=raw), field_type)
        assert exc_info.value.field == "score"

    def test_unset_attributes_stay_none(self) -> None:
        field = create_field("name", FieldSpec(), FieldType.STRING)
        assert field.allow_null is None
        assert field.allow_blank is None
        assert field.unique is None
        assert field.persist is None
        assert field.critical is None
        assert field.mapping is None
        assert field.depends is None
        assert field.reference is None

    def test_declared_type_wins_over_detected(self) -> None:
        field = create_field("code", FieldSpec(type="string"), FieldType.INTEGER)
        assert field.field_type == FieldType.STRING

    def test_custom_type_is_verbatim(self) -> None:
        field = create_field("money", FieldSpec(custom_type=" App.type.Money "), FieldType.FLOAT)
        assert field.custom_type == "App.type.Money"
        assert field.type_name == "App.type.Money"

    @pytest.mark.parametrize(
        "field_type, expected",
        [
            (FieldType.INTEGER, True),
            (FieldType.STRING, True),
            (FieldType.BOOLEAN, True),
            (FieldType.DATE, None),
            (FieldType.AUTO, None),
        ],
    )
    def test_allow_null_only_for_nullable_types(
        self, field_type: FieldType, expected: Optional[bool]
    ) -> None:
        field = create_field("f", FieldSpec(allow_null=True), field_type)
        assert field.allow_null is expected

    def test_use_null_sets_allow_null(self) -> None:
        field = create_field("f", FieldSpec(use_null=True), FieldType.INTEGER)
        assert field.allow_null is True

    def test_date_format_only_on_dates(self) -> None:
        on_date = create_field("d", FieldSpec(date_format="Y-m-d"), FieldType.DATE)
        on_string = create_field("s", FieldSpec(date_format="Y-m-d"), FieldType.STRING)
        assert on_date.date_format == "Y-m-d"
        assert on_string.date_format is None

    def test_flags_that_differ_from_defaults(self) -> None:
        spec = FieldSpec(
            allow_blank=False,
            unique=True,
            persist=False,
            critical=True,
            mapping=" address.city ",
            convert="function(v){return v;}",
            depends=["first", "last"],
        )
        field = create_field("city", spec, FieldType.STRING)
        assert field.allow_blank is False
        assert field.unique is True
        assert field.persist is False
        assert field.critical is True
        assert field.mapping == "address.city"
        assert field.convert == "function(v){return v;}"
        assert field.depends == ["first", "last"]

    def test_type_only_reference_collapses_to_string(self) -> None:
        field = create_field(
            "owner", FieldSpec(reference=ReferenceSpec(type="User")), FieldType.INTEGER
        )
        assert field.reference == "User"

    def test_structured_reference(self) -> None:
        spec = FieldSpec(reference=ReferenceSpec(type="User", inverse="orders", child=True))
        field = create_field("owner", spec, FieldType.INTEGER)
        assert isinstance(field.reference, Reference)
        assert field.reference.type == "User"
        assert field.reference.inverse == "orders"
        assert field.reference.child is True
        assert field.reference.parent is None

    def test_apply_returns_same_instance(self) -> None:
        field = FieldDescriptor(name="x", field_type="int")
        assert apply_field_spec(field, FieldSpec()) is field


# ===========================================================================
# Property normalization
# ===========================================================================


class TestNormalizeProperty:
    """Tests for normalize_property()."""

    @pytest.fixture()
    def owner(self, make_descriptor: Callable[..., ClassDescriptor]) -> ClassDescriptor:
        return make_descriptor("Order")

    @pytest.fixture()
    def model(self) -> ModelDefinition:
        return ModelDefinition(name="Order")

    def test_detected_field_is_registered(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        prop = PropertyDescriptor(name="total", type_name="BigDecimal", public=True)
        field = normalize_property(model, owner, prop, config)
        assert field is not None
        assert model.fields["total"].field_type == FieldType.FLOAT

    def test_undetected_type_is_not_a_field(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        prop = PropertyDescriptor(name="address", type_name="com.acme.Address")
        assert normalize_property(model, owner, prop, config) is None
        assert model.fields == {}

    def test_field_spec_makes_any_type_a_field(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        prop = PropertyDescriptor(
            name="address", type_name="com.acme.Address", field_spec=FieldSpec()
        )
        field = normalize_property(model, owner, prop, config)
        assert field is not None
        assert field.field_type is None

    def test_autodetect_off_yields_auto(
        self, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        model = ModelDefinition(name="Order", autodetect_types=False)
        prop = PropertyDescriptor(name="total", type_name="double")
        normalize_property(model, owner, prop, config)
        assert model.fields["total"].field_type == FieldType.AUTO

    def test_void_method_is_skipped(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        prop = PropertyDescriptor(
            kind="method", name="recalculate", type_name="void", field_spec=FieldSpec()
        )
        assert normalize_property(model, owner, prop, config) is None
        assert model.fields == {}

    def test_markers(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        normalize_property(
            model, owner,
            PropertyDescriptor(name="orderId", type_name="long", id_marker=True),
            config,
        )
        normalize_property(
            model, owner,
            PropertyDescriptor(
                name="tempId", type_name="String", client_id={"configure_writer": False}
            ),
            config,
        )
        normalize_property(
            model, owner,
            PropertyDescriptor(name="rev", type_name="int", version_marker=True),
            config,
        )
        assert model.id_property == "orderId"
        assert model.client_id_property == "tempId"
        assert model.client_id_property_add_to_writer is False
        assert model.version_property == "rev"

    def test_association_is_registered(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        prop = PropertyDescriptor(
            name="lines",
            type_name="java.util.List<com.acme.OrderLine>",
            element_type="com.acme.OrderLine",
            association={"type": "hasMany"},
        )
        assert normalize_property(model, owner, prop, config) is None
        assert len(model.associations) == 1
        assert model.associations[0].model == "OrderLine"

    def test_validations_skipped_when_excluded(
        self, model: ModelDefinition, owner: ClassDescriptor, config: GenerationConfig
    ) -> None:
        prop = PropertyDescriptor(
            name="email", type_name="String", validations=[{"type": "email"}]
        )
        normalize_property(model, owner, prop, config)
        assert model.validations == []

    def test_explicit_validations_take_precedence_over_constraints(
        self,
        model: ModelDefinition,
        owner: ClassDescriptor,
        make_config: Callable[..., GenerationConfig],
    ) -> None:
        prop = PropertyDescriptor(
            name="email",
            type_name="String",
            validations=[{"type": "email"}],
            constraints=[{"name": "NotNull"}],
        )
        normalize_property(model, owner, prop, make_config(include_validation="builtin"))
        assert [v.type for v in model.validations] == ["email"]

    def test_accessor_constraints_apply_to_field_properties(
        self,
        model: ModelDefinition,
        owner: ClassDescriptor,
        make_config: Callable[..., GenerationConfig],
    ) -> None:
        prop = PropertyDescriptor(
            name="email",
            type_name="String",
            constraints=[{"name": "NotNull"}],
            accessor_constraints=[{"name": "Email"}],
        )
        normalize_property(model, owner, prop, make_config(include_validation="all"))
        assert [v.type for v in model.validations] == ["presence", "email"]

    def test_no_validations_for_non_fields(
        self,
        model: ModelDefinition,
        owner: ClassDescriptor,
        make_config: Callable[..., GenerationConfig],
    ) -> None:
        prop = PropertyDescriptor(
            name="address",
            type_name="com.acme.Address",
            constraints=[{"name": "NotNull"}],
        )
        normalize_property(model, owner, prop, make_config(include_validation="all"))
        assert model.validations == []
