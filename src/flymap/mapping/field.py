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
"""Field references — one endpoint of a field mapping rule.

A raw field name such as ``"items[3]"`` is normalized into a
:class:`FieldReference` whose ``name`` never contains index syntax::

    ref = parse_field_reference("items[3]")
    assert (ref.name, ref.indexed, ref.index) == ("items", True, 3)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from flymap.kernel.exceptions import InvalidConfigurationError, InvalidFieldNameError

_INDEXED_RE = re.compile(r"^(?P<base>.+)\[(?P<index>[0-9]+)\]$")


@dataclass(frozen=True)
class FieldReference:
    """Immutable descriptor for a source or destination field.

    Attributes:
        name: Field name, stripped of any trailing ``[n]`` index.
        declared_type: Optional type name declared for the field.
        indexed: Whether the raw name carried an index suffix.
        index: The parsed index; ``None`` unless ``indexed``.
        date_format: Field-level date format override.
        accessor_method: Explicit getter method name.
        mutator_method: Explicit setter method name.
        map_accessor_method: Key-based getter on a map-like field.
        map_mutator_method: Key-based setter on a map-like field.
        map_key: Key used with the map accessor/mutator.
        creation_method: Factory method used to instantiate the field value.
        accessible: ``None`` when unset, otherwise direct attribute access on/off.
        iterate: Marks "iterate over collection" semantics.
    """

    name: str
    declared_type: str | None = None
    indexed: bool = False
    index: int | None = None
    date_format: str | None = None
    accessor_method: str | None = None
    mutator_method: str | None = None
    map_accessor_method: str | None = None
    map_mutator_method: str | None = None
    map_key: str | None = None
    creation_method: str | None = None
    accessible: bool | None = None
    iterate: bool = False

    @property
    def is_custom_accessor(self) -> bool:
        """True when an explicit getter or setter method is declared."""
        return self.accessor_method is not None or self.mutator_method is not None

    @property
    def is_map_keyed(self) -> bool:
        """True when key-based map access methods are declared."""
        return self.map_accessor_method is not None or self.map_mutator_method is not None


def parse_field_reference(raw_name: str | None, type_name: str | None = None) -> FieldReference:
    """Normalize a raw field name and optional type name into a FieldReference.

    Only a single trailing index is recognized: ``"a[0][1]"`` yields
    ``name="a[0]"`` and ``index=1``.

    Raises:
        InvalidFieldNameError: If *raw_name* is ``None``, empty or blank.
    """
    if raw_name is None or not raw_name.strip():
        raise InvalidFieldNameError(raw_name)

    name = raw_name.strip()
    declared_type = type_name.strip() if type_name and type_name.strip() else None

    match = _INDEXED_RE.match(name)
    if match is None:
        return FieldReference(name=name, declared_type=declared_type)
    return FieldReference(
        name=match.group("base"),
        declared_type=declared_type,
        indexed=True,
        index=int(match.group("index")),
    )


@dataclass(frozen=True)
class HintContainer:
    """Element type hints for a generic or collection field.

    ``raw`` keeps the hint exactly as declared; ``names`` holds the ordered,
    comma-separated type names it lists.
    """

    raw: str
    names: tuple[str, ...]

    @classmethod
    def parse(cls, hint: str) -> HintContainer:
        names = tuple(part.strip() for part in hint.split(",") if part.strip())
        if not names:
            raise InvalidConfigurationError(
                "Hint must name at least one type",
                context={"hint": hint},
            )
        return cls(raw=hint, names=names)

    @property
    def has_more_than_one(self) -> bool:
        return len(self.names) > 1
