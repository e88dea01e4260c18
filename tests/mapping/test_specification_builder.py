# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for SpecificationBuilder — the declare-then-build mapping DSL."""

from __future__ import annotations

from decimal import Decimal

import pytest

from flymap.kernel.exceptions import (
    IncompleteClassMappingError,
    IncompleteFieldError,
    InvalidConfigurationError,
    InvalidFieldNameError,
    TypeNotFoundError,
    TypeResolutionError,
)
from flymap.mapping.builder import SpecificationBuilder, _FieldRuleBuilder, new_specification
from flymap.mapping.rules import ExclusionRule, MappingRule
from flymap.mapping.types import MappingDirection, RelationshipType, RuleStrategy


# ── Test types ────────────────────────────────────────────────────────


class Customer:
    pass


class CustomerDto:
    pass


class Order:
    pass


class OrderDto:
    pass


class MoneyConverter:
    pass


class DictTypeLoader:
    """Resolves names from a fixed registry."""

    def __init__(self, types: dict[str, type]) -> None:
        self._types = types
        self.requested: list[str] = []

    def resolve(self, type_name: str) -> type:
        self.requested.append(type_name)
        try:
            return self._types[type_name]
        except KeyError:
            raise TypeNotFoundError(type_name) from None


def _mapping(builder: SpecificationBuilder, source: type = Customer, destination: type = CustomerDto):
    mapping = builder.new_class_mapping()
    mapping.source_type(source)
    mapping.destination_type(destination)
    return mapping


# ── Tests ─────────────────────────────────────────────────────────────


class TestEndToEnd:
    def test_full_specification(self) -> None:
        builder = new_specification()
        builder.configuration().map_null(False).custom_converter(MoneyConverter).class_a(Customer).class_b(CustomerDto)

        mapping = _mapping(builder)
        mapping.new_field_mapping().source("name").end().destination("fullName")
        mapping.new_field_mapping().source("items[0]").end().destination("firstItem")
        mapping.new_field_exclusion().source("secret").end().destination("secret")

        spec = builder.build()

        assert len(spec.class_mappings) == 1
        rules = spec.class_mappings[0].rules
        assert len(rules) == 3
        assert isinstance(rules[0], MappingRule)
        assert (rules[0].source.name, rules[0].destination.name) == ("name", "fullName")
        assert isinstance(rules[1], MappingRule)
        assert rules[1].source.name == "items"
        assert rules[1].source.indexed is True
        assert rules[1].source.index == 0
        assert rules[1].destination.name == "firstItem"
        assert isinstance(rules[2], ExclusionRule)
        assert rules[2].source.name == "secret"

        assert spec.configuration is not None
        assert spec.configuration.map_null is False
        assert len(spec.configuration.custom_converters) == 1
        converter = spec.configuration.custom_converters[0]
        assert converter.converter_type is MoneyConverter
        assert (converter.class_a, converter.class_b) == (Customer, CustomerDto)


class TestDeclarationOrder:
    def test_rules_preserve_declaration_order(self) -> None:
        builder = new_specification()
        mapping = _mapping(builder)
        for name in ("f1", "f2", "f3"):
            mapping.new_field_mapping().source(name).end().destination(name.upper())

        rules = builder.build().class_mappings[0].rules
        assert [r.source.name for r in rules] == ["f1", "f2", "f3"]

    def test_order_is_creation_order_not_completion_order(self) -> None:
        builder = new_specification()
        mapping = _mapping(builder)
        first = mapping.new_field_mapping()
        second = mapping.new_field_mapping()
        second.source("b")
        first.source("a")

        rules = builder.build().class_mappings[0].rules
        assert [r.source.name for r in rules] == ["a", "b"]

    def test_class_mappings_preserve_order(self) -> None:
        builder = new_specification()
        _mapping(builder, Customer, CustomerDto)
        _mapping(builder, Order, OrderDto)

        spec = builder.build()
        assert [cm.source_type.cls for cm in spec] == [Customer, Order]


class TestFieldEndpoints:
    def test_destination_only_rule(self) -> None:
        builder = new_specification()
        _mapping(builder).new_field_mapping().destination("created")

        rule = builder.build().class_mappings[0].rules[0]
        assert rule.source is None
        assert rule.destination.name == "created"

    def test_source_only_rule(self) -> None:
        builder = new_specification()
        _mapping(builder).new_field_mapping().source("legacy")

        rule = builder.build().class_mappings[0].rules[0]
        assert rule.source.name == "legacy"
        assert rule.destination is None

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_field_names_fail_for_mappings(self, blank: str) -> None:
        field = _mapping(new_specification()).new_field_mapping()
        with pytest.raises(InvalidFieldNameError):
            field.source(blank)
        with pytest.raises(InvalidFieldNameError):
            field.destination(blank)

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_field_names_fail_for_exclusions(self, blank: str) -> None:
        exclusion = _mapping(new_specification()).new_field_exclusion()
        with pytest.raises(InvalidFieldNameError):
            exclusion.source(blank)
        with pytest.raises(InvalidFieldNameError):
            exclusion.destination(blank)

    def test_field_definition_attributes(self) -> None:
        builder = new_specification()
        field = _mapping(builder).new_field_mapping()
        (
            field.source("created", "datetime.date")
            .date_format("%Y-%m-%d")
            .creation_method("today")
            .accessible(False)
        )
        field.destination("tags").iterate().key("k")

        rule = builder.build().class_mappings[0].rules[0]
        assert rule.source.declared_type == "datetime.date"
        assert rule.source.date_format == "%Y-%m-%d"
        assert rule.source.creation_method == "today"
        assert rule.source.accessible is False
        assert rule.destination.iterate is True
        assert rule.destination.map_key == "k"
        assert rule.destination.accessible is None


class TestIncompleteFields:
    def test_rule_without_endpoints_fails_at_build(self) -> None:
        builder = new_specification()
        _mapping(builder).new_field_mapping().map_id("orphan")

        with pytest.raises(IncompleteFieldError) as exc_info:
            builder.build()
        assert [e.field for e in exc_info.value.errors] == ["class_mappings[0].rules[0]"]

    def test_every_incomplete_rule_is_reported(self) -> None:
        builder = new_specification()
        first = _mapping(builder)
        first.new_field_mapping().source("ok")
        first.new_field_mapping()
        second = _mapping(builder, Order, OrderDto)
        second.new_field_exclusion()

        with pytest.raises(IncompleteFieldError) as exc_info:
            builder.build()
        assert [e.field for e in exc_info.value.errors] == [
            "class_mappings[0].rules[1]",
            "class_mappings[1].rules[0]",
        ]
        assert "field exclusion" in exc_info.value.errors[1].message

    def test_failed_build_attaches_no_rules(self) -> None:
        builder = new_specification()
        mapping = _mapping(builder)
        mapping.new_field_mapping().source("ok")
        mapping.new_field_mapping()

        with pytest.raises(IncompleteFieldError):
            builder.build()
        assert mapping._class_mapping.rules == []


class TestStrategySelection:
    def test_generic_by_default(self) -> None:
        builder = new_specification()
        _mapping(builder).new_field_mapping().source("a").end().destination("b")
        assert builder.build().class_mappings[0].rules[0].strategy is RuleStrategy.GENERIC

    def test_custom_accessor(self) -> None:
        builder = new_specification()
        field = _mapping(builder).new_field_mapping()
        field.source("a").accessor_method("read_a")
        field.destination("b")
        assert builder.build().class_mappings[0].rules[0].strategy is RuleStrategy.CUSTOM_ACCESSOR

    def test_map_keyed_field(self) -> None:
        builder = new_specification()
        field = _mapping(builder).new_field_mapping()
        field.source("a").map_accessor_method("get").accessor_method("read_a")
        field.destination("b")
        assert builder.build().class_mappings[0].rules[0].strategy is RuleStrategy.MAP_KEYED

    def test_map_like_destination_type(self) -> None:
        builder = new_specification()
        mapping = builder.new_class_mapping()
        mapping.source_type(Customer)
        mapping.destination_type(dict).map_get_method("get").map_set_method("__setitem__")
        mapping.new_field_mapping().source("a").end().destination("a")
        assert builder.build().class_mappings[0].rules[0].strategy is RuleStrategy.MAP_KEYED

    def test_type_declared_after_field_still_applies(self) -> None:
        builder = new_specification()
        mapping = builder.new_class_mapping()
        mapping.new_field_mapping().source("a").end().destination("a")
        mapping.source_type(dict).map_get_method("get")
        mapping.destination_type(CustomerDto)
        assert builder.build().class_mappings[0].rules[0].strategy is RuleStrategy.MAP_KEYED


class TestMethodNames:
    @pytest.mark.parametrize(
        "method",
        ["accessor_method", "mutator_method", "map_accessor_method", "map_mutator_method"],
    )
    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_field_method_names_rejected(self, method: str, blank: str) -> None:
        endpoint = _mapping(new_specification()).new_field_mapping().source("a")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            getattr(endpoint, method)(blank)
        assert exc_info.value.context["attribute"] == method

    @pytest.mark.parametrize("method", ["map_get_method", "map_set_method"])
    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_type_method_names_rejected(self, method: str, blank: str) -> None:
        definition = new_specification().new_class_mapping().source_type(dict)
        with pytest.raises(InvalidConfigurationError):
            getattr(definition, method)(blank)

    def test_rejected_names_leave_strategy_generic(self) -> None:
        builder = new_specification()
        mapping = builder.new_class_mapping()
        with pytest.raises(InvalidConfigurationError):
            mapping.source_type(dict).map_get_method("")
        mapping.destination_type(CustomerDto)
        field = mapping.new_field_mapping()
        with pytest.raises(InvalidConfigurationError):
            field.source("a").map_accessor_method("")
        field.destination("b")

        class_mapping = builder.build().class_mappings[0]
        assert class_mapping.source_map_like is False
        assert class_mapping.rules[0].source.is_map_keyed is False
        assert class_mapping.rules[0].strategy is RuleStrategy.GENERIC


class TestFieldMappingAttributes:
    def test_all_attributes_copied_to_rule(self) -> None:
        builder = new_specification()
        field = _mapping(builder).new_field_mapping()
        field.source("lines").end().destination("items")
        (
            field.direction(MappingDirection.ONE_WAY)
            .relationship_kind(RelationshipType.NON_CUMULATIVE)
            .remove_orphans()
            .source_hint("decimal.Decimal")
            .destination_hint("str, int")
            .source_deep_index_hint("datetime.date")
            .destination_deep_index_hint("datetime.datetime")
            .map_id("lines-only")
            .custom_converter(MoneyConverter)
            .custom_converter_id("money")
            .custom_converter_param("EUR")
        )

        rule = builder.build().class_mappings[0].rules[0]
        assert rule.direction is MappingDirection.ONE_WAY
        assert rule.relationship_kind is RelationshipType.NON_CUMULATIVE
        assert rule.remove_orphans is True
        assert rule.source_hint.names == ("decimal.Decimal",)
        assert rule.destination_hint.names == ("str", "int")
        assert rule.source_deep_index_hint.names == ("datetime.date",)
        assert rule.destination_deep_index_hint.names == ("datetime.datetime",)
        assert rule.map_id == "lines-only"
        assert rule.custom_converter.endswith(".MoneyConverter")
        assert rule.custom_converter_id == "money"
        assert rule.custom_converter_param == "EUR"

    def test_custom_converter_name_stored_without_loading(self) -> None:
        loader = DictTypeLoader({})
        builder = new_specification(loader)
        builder.new_class_mapping().new_field_mapping().source("a").end().custom_converter("myapp.Conv")

        rule = builder.build().class_mappings[0].rules[0]
        assert rule.custom_converter == "myapp.Conv"
        assert loader.requested == []

    def test_exclusion_direction(self) -> None:
        builder = new_specification()
        exclusion = _mapping(builder).new_field_exclusion()
        exclusion.source("secret")
        exclusion.direction(MappingDirection.REVERSE_ONE_WAY)

        rule = builder.build().class_mappings[0].rules[0]
        assert isinstance(rule, ExclusionRule)
        assert rule.destination is None
        assert rule.direction is MappingDirection.REVERSE_ONE_WAY


class TestCopyByReference:
    def _build_rule(self, configure) -> MappingRule:
        builder = new_specification()
        field = _mapping(builder).new_field_mapping()
        field.source("amount")
        configure(field)
        return builder.build().class_mappings[0].rules[0]

    def test_never_invoked_is_unset(self) -> None:
        rule = self._build_rule(lambda field: None)
        assert rule.copy_by_reference_set is False
        assert rule.copy_by_reference is None

    def test_explicit_false_is_set(self) -> None:
        rule = self._build_rule(lambda field: field.copy_by_reference(False))
        assert rule.copy_by_reference_set is True
        assert rule.copy_by_reference is False

    def test_explicit_true(self) -> None:
        rule = self._build_rule(lambda field: field.copy_by_reference())
        assert rule.copy_by_reference_set is True
        assert rule.copy_by_reference is True


class TestClassMappingDeclaration:
    def test_class_level_attributes(self) -> None:
        builder = new_specification()
        (
            _mapping(builder)
            .date_format("%d/%m/%Y")
            .map_null(False)
            .map_empty_string(False)
            .bean_factory("myapp.factories.CustomerFactory")
            .relationship_kind(RelationshipType.NON_CUMULATIVE)
            .wildcard(False)
            .trim_strings(True)
            .stop_on_errors(False)
            .map_id("customer-dto")
            .direction(MappingDirection.ONE_WAY)
        )

        cm = builder.build().class_mappings[0]
        assert cm.date_format == "%d/%m/%Y"
        assert cm.map_null is False
        assert cm.map_empty_string is False
        assert cm.bean_factory == "myapp.factories.CustomerFactory"
        assert cm.relationship_kind is RelationshipType.NON_CUMULATIVE
        assert cm.wildcard is False
        assert cm.trim_strings is True
        assert cm.stop_on_errors is False
        assert cm.map_id == "customer-dto"
        assert cm.direction is MappingDirection.ONE_WAY

    def test_type_definition_attributes(self) -> None:
        builder = new_specification()
        mapping = builder.new_class_mapping()
        (
            mapping.source_type(Customer)
            .bean_factory("myapp.Factory")
            .factory_bean_id("customer")
            .create_method("create")
            .map_null(True)
            .map_empty_string(False)
            .accessible(True)
            .end()
            .destination_type(CustomerDto)
        )

        cm = builder.build().class_mappings[0]
        source = cm.source_type
        assert source.cls is Customer
        assert source.name.endswith(".Customer")
        assert source.bean_factory == "myapp.Factory"
        assert source.factory_bean_id == "customer"
        assert source.create_method == "create"
        assert (source.map_null, source.map_empty_string, source.accessible) == (True, False, True)
        assert cm.destination_type.cls is CustomerDto

    def test_type_names_resolved_through_loader(self) -> None:
        loader = DictTypeLoader({"crm.Customer": Customer, "api.CustomerDto": CustomerDto})
        builder = new_specification(loader)
        mapping = builder.new_class_mapping()
        mapping.source_type("crm.Customer")
        mapping.destination_type("api.CustomerDto")

        cm = builder.build().class_mappings[0]
        assert cm.source_type.cls is Customer
        assert cm.destination_type.cls is CustomerDto
        assert loader.requested == ["crm.Customer", "api.CustomerDto"]

    def test_default_loader_resolves_dotted_names(self) -> None:
        builder = new_specification()
        mapping = builder.new_class_mapping()
        mapping.source_type("decimal.Decimal")
        mapping.destination_type("str")

        cm = builder.build().class_mappings[0]
        assert cm.source_type.cls is Decimal
        assert cm.source_type.name == "decimal.Decimal"
        assert cm.destination_type.name == "str"

    def test_unresolvable_type_fails_eagerly(self) -> None:
        mapping = new_specification(DictTypeLoader({})).new_class_mapping()
        with pytest.raises(TypeResolutionError) as exc_info:
            mapping.source_type("crm.Missing")
        assert exc_info.value.type_name == "crm.Missing"
        assert isinstance(exc_info.value.__cause__, TypeNotFoundError)

    def test_non_type_reference_rejected(self) -> None:
        mapping = new_specification().new_class_mapping()
        with pytest.raises(TypeResolutionError):
            mapping.destination_type(42)  # type: ignore[arg-type]

    @pytest.mark.parametrize("name", [".Foo", ":Foo", "..x.Foo", "decimal..Decimal"])
    def test_relative_or_empty_segment_names_fail_as_resolution_errors(self, name: str) -> None:
        mapping = new_specification().new_class_mapping()
        with pytest.raises(TypeResolutionError) as exc_info:
            mapping.source_type(name)
        assert exc_info.value.type_name == name
        assert isinstance(exc_info.value.__cause__, TypeNotFoundError)


class TestConfigurationBinding:
    def test_mapping_bound_to_configuration_current_at_creation(self) -> None:
        builder = new_specification()
        first_config = builder.configuration()
        before = _mapping(builder)
        builder.configuration().map_null(False)
        after = _mapping(builder, Order, OrderDto)
        first_config.map_null(True)

        spec = builder.build()
        assert before._class_mapping.configuration is not after._class_mapping.configuration
        assert spec.class_mappings[0].effective_map_null is True
        assert spec.class_mappings[1].effective_map_null is False
        assert spec.configuration is spec.class_mappings[1].configuration
        assert spec.class_mappings[0].configuration is not spec.configuration

    def test_mapping_without_configuration(self) -> None:
        builder = new_specification()
        _mapping(builder)

        spec = builder.build()
        assert spec.configuration is None
        assert spec.class_mappings[0].configuration is None
        assert spec.class_mappings[0].effective_map_null is True


class TestBuildSemantics:
    def test_build_is_idempotent(self) -> None:
        builder = new_specification()
        mapping = _mapping(builder)
        mapping.new_field_mapping().source("a")
        mapping.new_field_exclusion().source("b")

        first = builder.build()
        second = builder.build()
        assert len(second.class_mappings[0].rules) == 2
        assert first.class_mappings[0].rules == second.class_mappings[0].rules

    def test_rebuild_picks_up_new_declarations(self) -> None:
        builder = new_specification()
        mapping = _mapping(builder)
        mapping.new_field_mapping().source("a")
        builder.build()
        mapping.new_field_mapping().source("b")

        rules = builder.build().class_mappings[0].rules
        assert [r.source.name for r in rules] == ["a", "b"]

    def test_rebuild_leaves_earlier_specification_unchanged(self) -> None:
        builder = new_specification()
        builder.configuration().map_null(False)
        mapping = _mapping(builder)
        mapping.new_field_mapping().source("a")
        first = builder.build()

        mapping.new_field_mapping().source("b")
        mapping.map_id("renamed")
        second = builder.build()

        assert [r.source.name for r in first.class_mappings[0].rules] == ["a"]
        assert first.class_mappings[0].map_id is None
        assert [r.source.name for r in second.class_mappings[0].rules] == ["a", "b"]
        assert second.class_mappings[0].map_id == "renamed"
        assert first.class_mappings[0] is not second.class_mappings[0]

    def test_declarations_after_build_do_not_leak_into_specification(self) -> None:
        builder = new_specification()
        configuration = builder.configuration()
        mapping = _mapping(builder)
        spec = builder.build()

        configuration.copy_by_reference("decimal.*").map_null(False)
        mapping.date_format("%d/%m/%Y")

        assert spec.configuration.copy_by_references == []
        assert spec.configuration.map_null is None
        assert spec.class_mappings[0].date_format is None
        assert spec.class_mappings[0].configuration is spec.configuration

    def test_rule_builder_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            _FieldRuleBuilder()  # type: ignore[abstract]

    def test_builders_are_independent(self) -> None:
        one = new_specification()
        two = new_specification()
        _mapping(one).new_field_mapping().source("a")

        assert len(one.build()) == 1
        assert len(two.build()) == 0

    def test_class_mapping_without_types_is_accepted(self) -> None:
        builder = new_specification()
        builder.new_class_mapping().new_field_mapping().source("a")

        spec = builder.build()
        assert spec.class_mappings[0].is_complete is False
        assert len(spec.class_mappings[0].rules) == 1

    def test_strict_build_rejects_class_mapping_without_types(self) -> None:
        builder = new_specification()
        mapping = builder.new_class_mapping()
        mapping.source_type(Customer)
        mapping.new_field_mapping().source("a")

        with pytest.raises(IncompleteClassMappingError) as exc_info:
            builder.build(strict=True)
        assert [e.field for e in exc_info.value.errors] == ["class_mappings[0].destination_type"]
        assert mapping._class_mapping.rules == []

    def test_find_class_mapping(self) -> None:
        builder = new_specification()
        _mapping(builder)
        _mapping(builder, Order, OrderDto).map_id("orders")

        spec = builder.build()
        order_source = spec.class_mappings[1].source_type.name
        order_destination = spec.class_mappings[1].destination_type.name
        assert spec.find(order_source, order_destination, "orders") is spec.class_mappings[1]
        assert spec.find(order_source, order_destination) is None
