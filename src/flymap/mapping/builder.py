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
"""Specification builder — fluent DSL for programmatic mapping specifications.

Declarations are recorded in two ways.  Global configuration, class-level
attributes and type definitions are written straight onto their backing
objects.  Field rules are kept as drafts and only resolved, in declaration
order, by :meth:`SpecificationBuilder.build`.

Example::

    builder = new_specification()
    builder.configuration().map_null(False)

    mapping = builder.new_class_mapping()
    mapping.source_type("myapp.models.Customer")
    mapping.destination_type(CustomerDto)

    field = mapping.new_field_mapping()
    field.source("name")
    field.destination("full_name")

    mapping.new_field_exclusion().source("secret").end().destination("secret")

    spec = builder.build()

Builders are not thread-safe; use one builder per task.
"""

from __future__ import annotations

import copy
import dataclasses
from abc import ABC, abstractmethod
from typing import Any

from flymap.core.config import Config
from flymap.kernel.exceptions import (
    IncompleteClassMappingError,
    IncompleteFieldError,
    InvalidConfigurationError,
    TypeNotFoundError,
    TypeResolutionError,
)
from flymap.kernel.types import FieldError
from flymap.logging import configure_logging, get_logger
from flymap.mapping.class_mapping import ClassMapping, TypeDefinition
from flymap.mapping.configuration import (
    CopyByReference,
    CustomConverterDescription,
    GlobalConfiguration,
)
from flymap.mapping.field import FieldReference, HintContainer, parse_field_reference
from flymap.mapping.loader import DefaultTypeLoader, TypeLoader, type_name
from flymap.mapping.properties import MappingProperties
from flymap.mapping.rules import ExclusionRule, FieldRule, MappingRule, select_strategy
from flymap.mapping.specification import MappingSpecification
from flymap.mapping.types import (
    DEFAULT_RELATIONSHIP_TYPE_POLICY,
    MappingDirection,
    RelationshipType,
)
from flymap.mapping.validation import validate_specification

logger = get_logger("flymap.mapping.builder")

TypeRef = str | type


def _resolve_type(loader: TypeLoader, ref: TypeRef) -> type:
    """Return *ref* itself or the type the loader resolves it to."""
    if isinstance(ref, type):
        return ref
    if not isinstance(ref, str):
        raise TypeResolutionError(repr(ref), "expected a type or a type name")
    try:
        return loader.resolve(ref)
    except TypeNotFoundError as exc:
        raise TypeResolutionError(ref, str(exc)) from exc


def _method_name(attribute: str, name: str) -> str:
    """Return *name* unchanged; blank method names are rejected."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidConfigurationError(
            f"{attribute} must be a non-blank method name, got {name!r}",
            context={"attribute": attribute, "value": name},
        )
    return name


# =============================================================================
# Field-level builders
# =============================================================================


class FieldDefinitionBuilder:
    """Collects per-endpoint attributes on top of a parsed field reference."""

    def __init__(self, reference: FieldReference, parent: Any) -> None:
        self._reference = reference
        self._parent = parent
        self._attributes: dict[str, Any] = {}

    def date_format(self, fmt: str) -> FieldDefinitionBuilder:
        self._attributes["date_format"] = fmt
        return self

    def accessor_method(self, name: str) -> FieldDefinitionBuilder:
        """Use an explicit getter instead of conventional attribute access.

        Raises:
            InvalidConfigurationError: If *name* is blank.
        """
        self._attributes["accessor_method"] = _method_name("accessor_method", name)
        return self

    def mutator_method(self, name: str) -> FieldDefinitionBuilder:
        """Use an explicit setter instead of conventional attribute access."""
        self._attributes["mutator_method"] = _method_name("mutator_method", name)
        return self

    def map_accessor_method(self, name: str) -> FieldDefinitionBuilder:
        self._attributes["map_accessor_method"] = _method_name("map_accessor_method", name)
        return self

    def map_mutator_method(self, name: str) -> FieldDefinitionBuilder:
        self._attributes["map_mutator_method"] = _method_name("map_mutator_method", name)
        return self

    def key(self, key: str) -> FieldDefinitionBuilder:
        self._attributes["map_key"] = key
        return self

    def creation_method(self, name: str) -> FieldDefinitionBuilder:
        self._attributes["creation_method"] = name
        return self

    def accessible(self, value: bool | None) -> FieldDefinitionBuilder:
        self._attributes["accessible"] = value
        return self

    def iterate(self) -> FieldDefinitionBuilder:
        """Mark the field as iterated element by element."""
        self._attributes["iterate"] = True
        return self

    def end(self) -> Any:
        """Return the owning field builder for continued chaining."""
        return self._parent

    def _build_reference(self) -> FieldReference:
        return dataclasses.replace(self._reference, **self._attributes)


class _FieldRuleBuilder(ABC):
    """Shared endpoint handling for field mappings and field exclusions."""

    def __init__(self) -> None:
        self._source: FieldDefinitionBuilder | None = None
        self._destination: FieldDefinitionBuilder | None = None
        self._direction: MappingDirection | None = None

    def source(self, name: str, declared_type: str | None = None) -> FieldDefinitionBuilder:
        """Declare the source (A) field; a trailing ``[n]`` becomes its index.

        Raises:
            InvalidFieldNameError: If *name* is empty or blank.
        """
        self._source = FieldDefinitionBuilder(parse_field_reference(name, declared_type), self)
        return self._source

    def destination(self, name: str, declared_type: str | None = None) -> FieldDefinitionBuilder:
        """Declare the destination (B) field; a trailing ``[n]`` becomes its index.

        Raises:
            InvalidFieldNameError: If *name* is empty or blank.
        """
        self._destination = FieldDefinitionBuilder(parse_field_reference(name, declared_type), self)
        return self._destination

    def direction(self, direction: MappingDirection) -> _FieldRuleBuilder:
        self._direction = direction
        return self

    @property
    def is_incomplete(self) -> bool:
        return self._source is None and self._destination is None

    def _endpoints(self) -> tuple[FieldReference | None, FieldReference | None]:
        source = self._source._build_reference() if self._source is not None else None  # noqa: SLF001
        destination = self._destination._build_reference() if self._destination is not None else None  # noqa: SLF001
        return source, destination

    @abstractmethod
    def _resolve(self, class_mapping: ClassMapping) -> FieldRule:
        """Turn the draft into its rule for *class_mapping*."""


class FieldExclusionBuilder(_FieldRuleBuilder):
    """Draft of a field pair that must not be mapped."""

    def _resolve(self, class_mapping: ClassMapping) -> ExclusionRule:
        source, destination = self._endpoints()
        return ExclusionRule(source=source, destination=destination, direction=self._direction)


class FieldMappingBuilder(_FieldRuleBuilder):
    """Draft of a field mapping rule.

    The rule strategy is not chosen here; it is selected at build time from
    the resolved endpoints and the owning class mapping's types.
    """

    def __init__(self) -> None:
        super().__init__()
        self._relationship_kind: RelationshipType | None = None
        self._remove_orphans: bool = False
        self._source_hint: HintContainer | None = None
        self._destination_hint: HintContainer | None = None
        self._source_deep_index_hint: HintContainer | None = None
        self._destination_deep_index_hint: HintContainer | None = None
        self._copy_by_reference: bool = False
        self._copy_by_reference_set: bool = False
        self._map_id: str | None = None
        self._custom_converter: str | None = None
        self._custom_converter_id: str | None = None
        self._custom_converter_param: str | None = None

    def relationship_kind(self, kind: RelationshipType | None) -> FieldMappingBuilder:
        self._relationship_kind = kind
        return self

    def remove_orphans(self, value: bool = True) -> FieldMappingBuilder:
        self._remove_orphans = value
        return self

    def source_hint(self, hint: str) -> FieldMappingBuilder:
        """Comma-separated element type names for the source field."""
        self._source_hint = HintContainer.parse(hint)
        return self

    def destination_hint(self, hint: str) -> FieldMappingBuilder:
        """Comma-separated element type names for the destination field."""
        self._destination_hint = HintContainer.parse(hint)
        return self

    def source_deep_index_hint(self, hint: str) -> FieldMappingBuilder:
        self._source_deep_index_hint = HintContainer.parse(hint)
        return self

    def destination_deep_index_hint(self, hint: str) -> FieldMappingBuilder:
        self._destination_deep_index_hint = HintContainer.parse(hint)
        return self

    def copy_by_reference(self, value: bool = True) -> FieldMappingBuilder:
        """Lock in copy-by-reference; any call, even with ``False``, overrides the default."""
        self._copy_by_reference_set = True
        self._copy_by_reference = value
        return self

    def map_id(self, map_id: str) -> FieldMappingBuilder:
        self._map_id = map_id
        return self

    def custom_converter(self, converter: TypeRef) -> FieldMappingBuilder:
        """Convert this field with *converter*; a name is stored without loading it."""
        self._custom_converter = type_name(converter) if isinstance(converter, type) else converter
        return self

    def custom_converter_id(self, converter_id: str) -> FieldMappingBuilder:
        self._custom_converter_id = converter_id
        return self

    def custom_converter_param(self, param: str) -> FieldMappingBuilder:
        self._custom_converter_param = param
        return self

    def _resolve(self, class_mapping: ClassMapping) -> MappingRule:
        source, destination = self._endpoints()
        strategy = select_strategy(
            source,
            destination,
            class_mapping.source_map_like,
            class_mapping.destination_map_like,
        )
        return MappingRule(
            strategy=strategy,
            source=source,
            destination=destination,
            direction=self._direction,
            relationship_kind=self._relationship_kind,
            remove_orphans=self._remove_orphans,
            copy_by_reference=self._copy_by_reference if self._copy_by_reference_set else None,
            map_id=self._map_id,
            source_hint=self._source_hint,
            destination_hint=self._destination_hint,
            source_deep_index_hint=self._source_deep_index_hint,
            destination_deep_index_hint=self._destination_deep_index_hint,
            custom_converter=self._custom_converter,
            custom_converter_id=self._custom_converter_id,
            custom_converter_param=self._custom_converter_param,
        )


# =============================================================================
# Class-level builders
# =============================================================================


class TypeDefinitionBuilder:
    """Sets attributes of a class mapping's source or destination type."""

    def __init__(self, definition: TypeDefinition, parent: ClassMappingBuilder) -> None:
        self._definition = definition
        self._parent = parent

    def map_get_method(self, name: str) -> TypeDefinitionBuilder:
        """Access the type by key through *name*; makes the type map-like."""
        self._definition.map_get_method = _method_name("map_get_method", name)
        return self

    def map_set_method(self, name: str) -> TypeDefinitionBuilder:
        """Write to the type by key through *name*; makes the type map-like."""
        self._definition.map_set_method = _method_name("map_set_method", name)
        return self

    def bean_factory(self, name: str) -> TypeDefinitionBuilder:
        self._definition.bean_factory = name
        return self

    def factory_bean_id(self, bean_id: str) -> TypeDefinitionBuilder:
        self._definition.factory_bean_id = bean_id
        return self

    def create_method(self, name: str) -> TypeDefinitionBuilder:
        self._definition.create_method = name
        return self

    def map_null(self, value: bool | None) -> TypeDefinitionBuilder:
        self._definition.map_null = value
        return self

    def map_empty_string(self, value: bool | None) -> TypeDefinitionBuilder:
        self._definition.map_empty_string = value
        return self

    def accessible(self, value: bool | None) -> TypeDefinitionBuilder:
        self._definition.accessible = value
        return self

    def end(self) -> ClassMappingBuilder:
        return self._parent


class ClassMappingBuilder:
    """Declares one class mapping and the field rules that belong to it."""

    def __init__(self, class_mapping: ClassMapping, type_loader: TypeLoader) -> None:
        self._class_mapping = class_mapping
        self._type_loader = type_loader
        self._field_builders: list[_FieldRuleBuilder] = []

    # ── class-level attributes ─────────────────────────────────

    def date_format(self, fmt: str) -> ClassMappingBuilder:
        self._class_mapping.date_format = fmt
        return self

    def map_null(self, value: bool | None) -> ClassMappingBuilder:
        self._class_mapping.map_null = value
        return self

    def map_empty_string(self, value: bool | None) -> ClassMappingBuilder:
        self._class_mapping.map_empty_string = value
        return self

    def bean_factory(self, name: str) -> ClassMappingBuilder:
        self._class_mapping.bean_factory = name
        return self

    def relationship_kind(self, kind: RelationshipType | None) -> ClassMappingBuilder:
        self._class_mapping.relationship_kind = kind
        return self

    def wildcard(self, value: bool | None) -> ClassMappingBuilder:
        self._class_mapping.wildcard = value
        return self

    def trim_strings(self, value: bool | None) -> ClassMappingBuilder:
        self._class_mapping.trim_strings = value
        return self

    def stop_on_errors(self, value: bool | None) -> ClassMappingBuilder:
        self._class_mapping.stop_on_errors = value
        return self

    def map_id(self, map_id: str) -> ClassMappingBuilder:
        self._class_mapping.map_id = map_id
        return self

    def direction(self, direction: MappingDirection) -> ClassMappingBuilder:
        self._class_mapping.direction = direction
        return self

    # ── types ──────────────────────────────────────────────────

    def source_type(self, ref: TypeRef) -> TypeDefinitionBuilder:
        """Set the source (A) type from a type or a type name.

        Raises:
            TypeResolutionError: If a type name cannot be resolved.
        """
        definition = self._type_definition(ref)
        self._class_mapping.source_type = definition
        return TypeDefinitionBuilder(definition, self)

    def destination_type(self, ref: TypeRef) -> TypeDefinitionBuilder:
        """Set the destination (B) type from a type or a type name.

        Raises:
            TypeResolutionError: If a type name cannot be resolved.
        """
        definition = self._type_definition(ref)
        self._class_mapping.destination_type = definition
        return TypeDefinitionBuilder(definition, self)

    def _type_definition(self, ref: TypeRef) -> TypeDefinition:
        cls = _resolve_type(self._type_loader, ref)
        return TypeDefinition(name=type_name(cls), cls=cls)

    # ── field rules ────────────────────────────────────────────

    def new_field_mapping(self) -> FieldMappingBuilder:
        builder = FieldMappingBuilder()
        self._field_builders.append(builder)
        return builder

    def new_field_exclusion(self) -> FieldExclusionBuilder:
        builder = FieldExclusionBuilder()
        self._field_builders.append(builder)
        return builder

    def _resolve_rules(self, position: int) -> tuple[list[FieldRule], list[FieldError]]:
        """Resolve every field draft in declaration order, collecting incomplete ones."""
        rules: list[FieldRule] = []
        errors: list[FieldError] = []
        for index, builder in enumerate(self._field_builders):
            if builder.is_incomplete:
                kind = "field exclusion" if isinstance(builder, FieldExclusionBuilder) else "field mapping"
                errors.append(
                    FieldError(
                        field=f"class_mappings[{position}].rules[{index}]",
                        message=f"{kind} declares neither a source nor a destination field",
                    )
                )
                continue
            rules.append(builder._resolve(self._class_mapping))  # noqa: SLF001
        return rules, errors


# =============================================================================
# Configuration builders
# =============================================================================


class CustomConverterBuilder:
    """Narrows a custom converter to the type pair it converts."""

    def __init__(
        self,
        description: CustomConverterDescription,
        type_loader: TypeLoader,
        parent: ConfigurationBuilder,
    ) -> None:
        self._description = description
        self._type_loader = type_loader
        self._parent = parent

    def class_a(self, ref: TypeRef) -> CustomConverterBuilder:
        self._description.class_a = _resolve_type(self._type_loader, ref)
        return self

    def class_b(self, ref: TypeRef) -> CustomConverterBuilder:
        self._description.class_b = _resolve_type(self._type_loader, ref)
        return self

    def end(self) -> ConfigurationBuilder:
        return self._parent


class ConfigurationBuilder:
    """Sets the global defaults shared by class mappings."""

    def __init__(self, configuration: GlobalConfiguration, type_loader: TypeLoader) -> None:
        self._configuration = configuration
        self._type_loader = type_loader

    def stop_on_errors(self, value: bool | None) -> ConfigurationBuilder:
        self._configuration.stop_on_errors = value
        return self

    def date_format(self, fmt: str) -> ConfigurationBuilder:
        self._configuration.date_format = fmt
        return self

    def wildcard(self, value: bool | None) -> ConfigurationBuilder:
        self._configuration.wildcard = value
        return self

    def trim_strings(self, value: bool | None) -> ConfigurationBuilder:
        self._configuration.trim_strings = value
        return self

    def map_null(self, value: bool | None) -> ConfigurationBuilder:
        self._configuration.map_null = value
        return self

    def map_empty_string(self, value: bool | None) -> ConfigurationBuilder:
        self._configuration.map_empty_string = value
        return self

    def relationship_kind(self, kind: RelationshipType | None) -> ConfigurationBuilder:
        """Set the default relationship kind; ``None`` restores the default policy."""
        self._configuration.relationship_kind = kind if kind is not None else DEFAULT_RELATIONSHIP_TYPE_POLICY
        return self

    def bean_factory(self, name: str) -> ConfigurationBuilder:
        self._configuration.bean_factory = name
        return self

    def custom_converter(self, ref: TypeRef) -> CustomConverterBuilder:
        """Register a converter type, in declaration order.

        Raises:
            TypeResolutionError: If a type name cannot be resolved.
        """
        description = CustomConverterDescription(converter_type=_resolve_type(self._type_loader, ref))
        self._configuration.custom_converters.append(description)
        logger.debug("custom_converter_registered", converter=type_name(description.converter_type))
        return CustomConverterBuilder(description, self._type_loader, self)

    def copy_by_reference(self, type_mask: str) -> ConfigurationBuilder:
        """Copy values whose type name matches *type_mask* (``*`` wildcards) by reference."""
        self._configuration.copy_by_references.append(CopyByReference(type_mask))
        return self

    def allowed_exception(self, ref: TypeRef) -> ConfigurationBuilder:
        """Let the engine propagate *ref* instead of wrapping it.

        Raises:
            TypeResolutionError: If a type name cannot be resolved.
            InvalidConfigurationError: If the type is not an ``Exception`` subclass.
        """
        exception_type = _resolve_type(self._type_loader, ref)
        if not issubclass(exception_type, Exception):
            raise InvalidConfigurationError(
                f"Allowed exception type must extend Exception: {type_name(exception_type)}",
                context={"type_name": type_name(exception_type)},
            )
        if exception_type not in self._configuration.allowed_exceptions:
            self._configuration.allowed_exceptions.append(exception_type)
        return self

    def apply_properties(self, properties: MappingProperties) -> ConfigurationBuilder:
        """Apply every value set in *properties*; unset values are left alone."""
        for attr in (
            "stop_on_errors",
            "date_format",
            "wildcard",
            "trim_strings",
            "map_null",
            "map_empty_string",
            "bean_factory",
        ):
            value = getattr(properties, attr)
            if value is not None:
                setattr(self._configuration, attr, value)
        if properties.relationship_type is not None:
            self.relationship_kind(properties.relationship_type)
        for mask in properties.copy_by_reference:
            self.copy_by_reference(mask)
        for name in properties.allowed_exceptions:
            self.allowed_exception(name)
        for entry in properties.custom_converters:
            converter = self.custom_converter(entry.type)
            if entry.class_a:
                converter.class_a(entry.class_a)
            if entry.class_b:
                converter.class_b(entry.class_b)
        return self


# =============================================================================
# Specification builder
# =============================================================================


class SpecificationBuilder:
    """Entry point of the declare-then-build API.

    Use :meth:`configuration` and :meth:`new_class_mapping` to declare, then
    call :meth:`build` to resolve every field draft and produce the
    :class:`MappingSpecification`.
    """

    def __init__(self, type_loader: TypeLoader | None = None) -> None:
        self._type_loader: TypeLoader = type_loader or DefaultTypeLoader()
        self._configuration: GlobalConfiguration | None = None
        self._class_mappings: list[ClassMapping] = []
        self._mapping_builders: list[ClassMappingBuilder] = []

    def configuration(self) -> ConfigurationBuilder:
        """Start a new global configuration, replacing any previous one.

        Only class mappings created afterwards are bound to it.
        """
        self._configuration = GlobalConfiguration()
        return ConfigurationBuilder(self._configuration, self._type_loader)

    def configuration_from(self, config: Config) -> ConfigurationBuilder:
        """Start a new global configuration seeded from ``flymap.mapping.*`` in *config*.

        A ``flymap.logging`` section in *config* also configures flymap's
        log output (see :func:`flymap.logging.configure_logging`).
        """
        if config.get_section("flymap.logging"):
            configure_logging(config)
        properties = config.bind(MappingProperties)
        return self.configuration().apply_properties(properties)

    def new_class_mapping(self) -> ClassMappingBuilder:
        class_mapping = ClassMapping(configuration=self._configuration)
        self._class_mappings.append(class_mapping)
        builder = ClassMappingBuilder(class_mapping, self._type_loader)
        self._mapping_builders.append(builder)
        logger.debug("class_mapping_declared", position=len(self._class_mappings) - 1)
        return builder

    def build(self, strict: bool = False) -> MappingSpecification:
        """Resolve all field drafts and return the specification.

        Every class mapping is resolved before errors are reported, so one
        failure lists all incomplete field rules.  The returned specification
        holds copies of the declared configuration and class mappings, so
        later declarations and later builds never change it; calling
        ``build`` again re-resolves from the drafts.

        Args:
            strict: Also raise when a class mapping lacks a source or
                destination type, or is declared twice.

        Raises:
            IncompleteFieldError: If any field rule has neither endpoint.
            IncompleteClassMappingError: In strict mode, on structural issues.
        """
        resolved: list[list[FieldRule]] = []
        errors: list[FieldError] = []
        for position, builder in enumerate(self._mapping_builders):
            rules, rule_errors = builder._resolve_rules(position)  # noqa: SLF001
            resolved.append(rules)
            errors.extend(rule_errors)

        if errors:
            logger.error("specification_build_failed", error_count=len(errors))
            raise IncompleteFieldError(errors)

        # One deepcopy keeps mappings that share a configuration sharing its copy.
        configuration, class_mappings = copy.deepcopy((self._configuration, self._class_mappings))
        for class_mapping, rules in zip(class_mappings, resolved, strict=True):
            class_mapping.rules = rules

        specification = MappingSpecification(configuration=configuration, class_mappings=class_mappings)

        issues = validate_specification(specification)
        if issues and strict:
            raise IncompleteClassMappingError(issues)

        for issue in issues:
            logger.warning("specification_issue", location=issue.field, issue=issue.message)

        logger.info(
            "specification_built",
            class_mappings=len(specification.class_mappings),
            rules=sum(len(rules) for rules in resolved),
        )
        return specification


def new_specification(type_loader: TypeLoader | None = None) -> SpecificationBuilder:
    """Create a builder, optionally resolving type names with *type_loader*."""
    return SpecificationBuilder(type_loader)
