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
"""Structured error records shared by the builder and the validator.

Uses only the Python standard library.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldError:
    """Describes one defect found while resolving or validating a specification.

    Attributes:
        field: Location of the defect, e.g. ``"class_mappings[0].rules[2]"``.
        message: Human-readable description.
        rejected_value: The offending value, when there is one.
    """

    field: str
    message: str
    rejected_value: Any = None
