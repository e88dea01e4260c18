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
"""Structural validation of a mapping specification.

The builder does not fail fast on class mappings without types; this pass
reports them (and duplicate declarations) so callers can decide.  Strict
builds turn the findings into :class:`IncompleteClassMappingError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flymap.kernel.types import FieldError

if TYPE_CHECKING:
    from flymap.mapping.specification import MappingSpecification


def validate_specification(specification: MappingSpecification) -> list[FieldError]:
    """Return every structural issue in *specification*, in declaration order."""
    issues: list[FieldError] = []
    seen: dict[tuple[str, str, str | None], int] = {}

    for position, class_mapping in enumerate(specification.class_mappings):
        location = f"class_mappings[{position}]"
        if class_mapping.source_type is None:
            issues.append(FieldError(field=f"{location}.source_type", message="source type is not set"))
        if class_mapping.destination_type is None:
            issues.append(FieldError(field=f"{location}.destination_type", message="destination type is not set"))
        if not class_mapping.is_complete:
            continue

        key = (class_mapping.source_type.name, class_mapping.destination_type.name, class_mapping.map_id)
        if key in seen:
            issues.append(
                FieldError(
                    field=location,
                    message=f"duplicate of class_mappings[{seen[key]}]",
                    rejected_value=key,
                )
            )
        else:
            seen[key] = position

    return issues
