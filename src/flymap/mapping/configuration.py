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
"""Global configuration — cross-cutting defaults inherited by class mappings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from flymap.mapping.types import RelationshipType


@dataclass
class CustomConverterDescription:
    """A converter type, optionally narrowed to the type pair it converts.

    When ``class_a``/``class_b`` are absent the converter applies only where
    a field rule references it explicitly.
    """

    converter_type: type
    class_a: type | None = None
    class_b: type | None = None


class CopyByReference:
    """Type-name mask selecting types copied by reference.

    ``*`` matches any run of characters; everything else matches literally.
    """

    def __init__(self, mask: str) -> None:
        self.mask = mask
        self._pattern = re.compile(".*".join(re.escape(part) for part in mask.split("*")))

    def matches(self, type_name: str) -> bool:
        return self._pattern.fullmatch(type_name) is not None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CopyByReference) and other.mask == self.mask

    def __hash__(self) -> int:
        return hash(self.mask)

    def __repr__(self) -> str:
        return f"CopyByReference({self.mask!r})"


@dataclass
class GlobalConfiguration:
    """Process-scoped defaults for one specification.

    Tri-state flags are ``None`` until set; class mappings fall back to the
    fixed policy defaults in :mod:`flymap.mapping.types` in that case.
    """

    stop_on_errors: bool | None = None
    date_format: str | None = None
    wildcard: bool | None = None
    trim_strings: bool | None = None
    map_null: bool | None = None
    map_empty_string: bool | None = None
    relationship_kind: RelationshipType | None = None
    bean_factory: str | None = None
    custom_converters: list[CustomConverterDescription] = field(default_factory=list)
    copy_by_references: list[CopyByReference] = field(default_factory=list)
    allowed_exceptions: list[type[Exception]] = field(default_factory=list)

    def is_copy_by_reference(self, type_name: str) -> bool:
        """Whether any copy-by-reference mask matches *type_name*."""
        return any(mask.matches(type_name) for mask in self.copy_by_references)

    def converters_for(self, class_a: type, class_b: type) -> list[CustomConverterDescription]:
        """Converters narrowed to the given pair, in declaration order (either orientation)."""
        return [
            c
            for c in self.custom_converters
            if (c.class_a, c.class_b) in ((class_a, class_b), (class_b, class_a))
        ]
