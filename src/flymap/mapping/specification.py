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
"""MappingSpecification — the artifact handed to the mapping engine."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from flymap.mapping.class_mapping import ClassMapping
from flymap.mapping.configuration import GlobalConfiguration


@dataclass
class MappingSpecification:
    """The global configuration plus every class mapping, in declaration order."""

    configuration: GlobalConfiguration | None = None
    class_mappings: list[ClassMapping] = field(default_factory=list)

    def __iter__(self) -> Iterator[ClassMapping]:
        return iter(self.class_mappings)

    def __len__(self) -> int:
        return len(self.class_mappings)

    def find(self, source: str, destination: str, map_id: str | None = None) -> ClassMapping | None:
        """Return the first class mapping between two type names, matching *map_id* exactly."""
        for class_mapping in self.class_mappings:
            if (
                class_mapping.source_type is not None
                and class_mapping.destination_type is not None
                and class_mapping.source_type.name == source
                and class_mapping.destination_type.name == destination
                and class_mapping.map_id == map_id
            ):
                return class_mapping
        return None
