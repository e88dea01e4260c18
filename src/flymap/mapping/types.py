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
"""Enumerations and fixed policy defaults for mapping specifications."""

from __future__ import annotations

from enum import Enum


class MappingDirection(Enum):
    """Which way a class or field mapping may be applied."""

    BI_DIRECTIONAL = "bi-directional"
    ONE_WAY = "one-way"
    """Source (A) to destination (B) only."""
    REVERSE_ONE_WAY = "reverse-one-way"
    """Destination (B) to source (A) only."""


class RelationshipType(Enum):
    """How repeated-element fields are combined with existing destination values."""

    CUMULATIVE = "cumulative"
    NON_CUMULATIVE = "non-cumulative"


class RuleStrategy(Enum):
    """Closed set of field-mapping strategies a resolved rule can carry."""

    GENERIC = "generic"
    CUSTOM_ACCESSOR = "custom-accessor"
    MAP_KEYED = "map-keyed"


# Policy defaults applied when neither a class mapping nor the global
# configuration sets a value.
DEFAULT_MAP_NULL_POLICY = True
DEFAULT_MAP_EMPTY_STRING_POLICY = True
DEFAULT_WILDCARD_POLICY = True
DEFAULT_TRIM_STRINGS_POLICY = False
DEFAULT_STOP_ON_ERRORS_POLICY = True
DEFAULT_RELATIONSHIP_TYPE_POLICY = RelationshipType.CUMULATIVE
DEFAULT_MAPPING_DIRECTION = MappingDirection.BI_DIRECTIONAL
