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
"""Type loading — resolves type names to types for the builder.

The builder only depends on the :class:`TypeLoader` protocol, so tests and
hosts with their own registries can inject any object with a ``resolve``
method.
"""

from __future__ import annotations

import builtins
import importlib
from typing import Protocol, runtime_checkable

from flymap.kernel.exceptions import TypeNotFoundError


@runtime_checkable
class TypeLoader(Protocol):
    """Resolves a type name to a type, raising TypeNotFoundError when it cannot."""

    def resolve(self, type_name: str) -> type: ...


def type_name(cls: type) -> str:
    """Canonical dotted name of *cls*; builtins are named bare (``"str"``)."""
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


class DefaultTypeLoader:
    """Resolve names with :mod:`importlib`.

    Accepted forms:
    - ``"package.module.Outer.Inner"`` (longest importable module prefix wins)
    - ``"package.module:Outer.Inner"``
    - ``"str"``, ``"ValueError"`` and other builtins
    """

    def resolve(self, type_name: str) -> type:
        name = type_name.strip()
        if not name:
            raise TypeNotFoundError(type_name, "empty type name")

        if ":" in name:
            module_name, _, qualname = name.partition(":")
            obj = self._lookup(type_name, self._import(type_name, module_name), qualname)
        elif "." not in name:
            obj = getattr(builtins, name, None)
            if obj is None:
                raise TypeNotFoundError(type_name, "not a builtin and no module given")
        else:
            obj = self._resolve_dotted(type_name, name)

        if not isinstance(obj, type):
            raise TypeNotFoundError(type_name, f"resolved to a {type(obj).__name__}, not a type")
        return obj

    def _resolve_dotted(self, type_name: str, name: str) -> object:
        parts = name.split(".")
        self._check_segments(type_name, parts)
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                module = importlib.import_module(module_name)
            except ModuleNotFoundError:
                continue
            except (ImportError, ValueError, TypeError) as exc:
                raise TypeNotFoundError(type_name, str(exc)) from exc
            return self._lookup(type_name, module, ".".join(parts[split:]))
        raise TypeNotFoundError(type_name, "no importable module prefix")

    @classmethod
    def _import(cls, type_name: str, module_name: str) -> object:
        cls._check_segments(type_name, module_name.split("."))
        try:
            return importlib.import_module(module_name)
        except (ImportError, ValueError, TypeError) as exc:
            raise TypeNotFoundError(type_name, str(exc)) from exc

    @staticmethod
    def _check_segments(type_name: str, segments: list[str]) -> None:
        """Relative or empty module segments are not resolvable names."""
        if any(not segment.strip() for segment in segments):
            raise TypeNotFoundError(type_name, "empty name segment")

    @staticmethod
    def _lookup(type_name: str, module: object, qualname: str) -> object:
        obj = module
        for attr in qualname.split("."):
            if not attr or not hasattr(obj, attr):
                raise TypeNotFoundError(type_name, f"'{attr}' not found")
            obj = getattr(obj, attr)
        return obj
