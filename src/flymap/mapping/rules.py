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
"""Resolved field-level rules and the strategy selector.

A :class:`MappingRule` is tagged with exactly one :class:`RuleStrategy`.
The tag is chosen by :func:`select_strategy` from the two field endpoints
and the map-like flags of the owning class mapping's types; nothing else
is consulted.
"""

from __future__ import annotations

from dataclasses import dataclass

from flymap.mapping.field import FieldReference, HintContainer
from flymap.mapping.types import MappingDirection, RelationshipType, RuleStrategy


def select_strategy(
    source: FieldReference | None,
    destination: FieldReference | None,
    source_map_like: bool = False,
    destination_map_like: bool = False,
) -> RuleStrategy:
    """Choose the strategy for a field pair.

    Map-keyed access wins over custom accessors: a map-like field with
    custom accessors still needs key-based access. A missing side
    contributes no traits.
    """
    fields = [f for f in (source, destination) if f is not None]
    if source_map_like or destination_map_like or any(f.is_map_keyed for f in fields):
        return RuleStrategy.MAP_KEYED
    if any(f.is_custom_accessor for f in fields):
        return RuleStrategy.CUSTOM_ACCESSOR
    return RuleStrategy.GENERIC


@dataclass(frozen=True)
class MappingRule:
    """One declared correspondence between a source and a destination field.

    ``None`` for ``direction``, ``relationship_kind`` and
    ``copy_by_reference`` means the value is inherited when the engine
    applies the rule (see :class:`~flymap.mapping.class_mapping.ClassMapping`).
    """

    strategy: RuleStrategy
    source: FieldReference | None = None
    destination: FieldReference | None = None
    direction: MappingDirection | None = None
    relationship_kind: RelationshipType | None = None
    remove_orphans: bool = False
    copy_by_reference: bool | None = None
    map_id: str | None = None
    source_hint: HintContainer | None = None
    destination_hint: HintContainer | None = None
    source_deep_index_hint: HintContainer | None = None
    destination_deep_index_hint: HintContainer | None = None
    custom_converter: str | None = None
    custom_converter_id: str | None = None
    custom_converter_param: str | None = None

    @property
    def copy_by_reference_set(self) -> bool:
        """Whether copy-by-reference was explicitly chosen, even if ``False``."""
        return self.copy_by_reference is not None

    @property
    def is_excluded(self) -> bool:
        return False


@dataclass(frozen=True)
class ExclusionRule:
    """Marks a field pair as explicitly not mapped."""

    source: FieldReference | None = None
    destination: FieldReference | None = None
    direction: MappingDirection | None = None

    @property
    def is_excluded(self) -> bool:
        return True


FieldRule = MappingRule | ExclusionRule
