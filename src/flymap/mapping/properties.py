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
"""Mapping configuration properties (flymap.mapping.*)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from flymap.core.config import config_properties
from flymap.mapping.types import RelationshipType


class CustomConverterProperties(BaseModel):
    """One entry of ``flymap.mapping.custom_converters``."""

    type: str
    class_a: str | None = None
    class_b: str | None = None


@config_properties(prefix="flymap.mapping")
class MappingProperties(BaseModel):
    """Global mapping defaults loaded from configuration.

    Example ``mapping.yaml``::

        flymap:
          mapping:
            map_null: false
            date_format: "%Y-%m-%d"
            relationship_type: non-cumulative
            copy_by_reference: ["decimal.*"]
            allowed_exceptions: [ValueError]
            custom_converters:
              - type: myapp.converters.MoneyConverter
                class_a: myapp.models.Money
                class_b: decimal.Decimal
    """

    stop_on_errors: bool | None = None
    date_format: str | None = None
    wildcard: bool | None = None
    trim_strings: bool | None = None
    map_null: bool | None = None
    map_empty_string: bool | None = None
    relationship_type: RelationshipType | None = None
    bean_factory: str | None = None
    copy_by_reference: list[str] = Field(default_factory=list)
    allowed_exceptions: list[str] = Field(default_factory=list)
    custom_converters: list[CustomConverterProperties] = Field(default_factory=list)
