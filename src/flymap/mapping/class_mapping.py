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
"""Class mappings — one A<->B pairing and its ordered field rules."""

from __future__ import annotations

from dataclasses import dataclass, field

from flymap.mapping.configuration import GlobalConfiguration
from flymap.mapping.rules import FieldRule, MappingRule
from flymap.mapping.types import (
    DEFAULT_MAP_EMPTY_STRING_POLICY,
    DEFAULT_MAP_NULL_POLICY,
    DEFAULT_MAPPING_DIRECTION,
    DEFAULT_RELATIONSHIP_TYPE_POLICY,
    DEFAULT_STOP_ON_ERRORS_POLICY,
    DEFAULT_TRIM_STRINGS_POLICY,
    DEFAULT_WILDCARD_POLICY,
    MappingDirection,
    RelationshipType,
)


@dataclass
class TypeDefinition:
    """Descriptor for the source or destination type of a class mapping.

    Attributes:
        name: Dotted type name, e.g. ``"myapp.models.Order"``.
        cls: The resolved type, when the builder had one.
        map_get_method: Key-based getter; makes the type map-like.
        map_set_method: Key-based setter; makes the type map-like.
        bean_factory: Factory hook used to create instances of the type.
        factory_bean_id: Identifier passed to the bean factory.
        create_method: Static creation method used instead of the constructor.
        map_null: Per-type override of the null mapping policy.
        map_empty_string: Per-type override of the empty string policy.
        accessible: ``None`` when unset, otherwise direct attribute access on/off.
    """

    name: str
    cls: type | None = None
    map_get_method: str | None = None
    map_set_method: str | None = None
    bean_factory: str | None = None
    factory_bean_id: str | None = None
    create_method: str | None = None
    map_null: bool | None = None
    map_empty_string: bool | None = None
    accessible: bool | None = None

    @property
    def is_map_like(self) -> bool:
        return self.map_get_method is not None or self.map_set_method is not None


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


@dataclass
class ClassMapping:
    """Mutable aggregate for one A<->B pairing.

    Unset (``None``) policy attributes are inherited from ``configuration``
    and then from the fixed defaults; the ``effective_*`` helpers perform
    that lookup. ``rules`` order is significant and matches declaration order.
    """

    configuration: GlobalConfiguration | None = None
    source_type: TypeDefinition | None = None
    destination_type: TypeDefinition | None = None
    date_format: str | None = None
    map_null: bool | None = None
    map_empty_string: bool | None = None
    bean_factory: str | None = None
    relationship_kind: RelationshipType | None = None
    wildcard: bool | None = None
    trim_strings: bool | None = None
    stop_on_errors: bool | None = None
    map_id: str | None = None
    direction: MappingDirection | None = None
    rules: list[FieldRule] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.source_type is not None and self.destination_type is not None

    @property
    def source_map_like(self) -> bool:
        return self.source_type is not None and self.source_type.is_map_like

    @property
    def destination_map_like(self) -> bool:
        return self.destination_type is not None and self.destination_type.is_map_like

    # ── inherited policies ─────────────────────────────────────

    def _global(self, attr: str):
        return getattr(self.configuration, attr) if self.configuration is not None else None

    @property
    def effective_map_null(self) -> bool:
        return _first_set(self.map_null, self._global("map_null"), DEFAULT_MAP_NULL_POLICY)

    @property
    def effective_map_empty_string(self) -> bool:
        return _first_set(
            self.map_empty_string, self._global("map_empty_string"), DEFAULT_MAP_EMPTY_STRING_POLICY
        )

    @property
    def effective_wildcard(self) -> bool:
        return _first_set(self.wildcard, self._global("wildcard"), DEFAULT_WILDCARD_POLICY)

    @property
    def effective_trim_strings(self) -> bool:
        return _first_set(self.trim_strings, self._global("trim_strings"), DEFAULT_TRIM_STRINGS_POLICY)

    @property
    def effective_stop_on_errors(self) -> bool:
        return _first_set(self.stop_on_errors, self._global("stop_on_errors"), DEFAULT_STOP_ON_ERRORS_POLICY)

    @property
    def effective_relationship_kind(self) -> RelationshipType:
        return _first_set(
            self.relationship_kind, self._global("relationship_kind"), DEFAULT_RELATIONSHIP_TYPE_POLICY
        )

    @property
    def effective_date_format(self) -> str | None:
        return _first_set(self.date_format, self._global("date_format"))

    @property
    def effective_bean_factory(self) -> str | None:
        return _first_set(self.bean_factory, self._global("bean_factory"))

    @property
    def effective_direction(self) -> MappingDirection:
        return _first_set(self.direction, DEFAULT_MAPPING_DIRECTION)

    # ── rule-level inheritance ─────────────────────────────────

    def direction_of(self, rule: FieldRule) -> MappingDirection:
        return _first_set(rule.direction, self.effective_direction)

    def relationship_kind_of(self, rule: MappingRule) -> RelationshipType:
        return _first_set(rule.relationship_kind, self.effective_relationship_kind)

    def copy_by_reference_of(self, rule: MappingRule, destination_type_name: str) -> bool:
        """Explicit rule value, else whether a global mask matches the destination field type."""
        if rule.copy_by_reference is not None:
            return rule.copy_by_reference
        return self.configuration is not None and self.configuration.is_copy_by_reference(destination_type_name)

    def mapping_rules(self) -> list[MappingRule]:
        """The non-exclusion rules, in declaration order."""
        return [rule for rule in self.rules if isinstance(rule, MappingRule)]
