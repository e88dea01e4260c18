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
"""StructlogAdapter — structlog output for the ``flymap`` logger namespace.

flymap modules log through :func:`get_logger`, which wraps a stdlib logger
and leaves structlog's global configuration to the host application.  Until a
handler is installed, records follow the stdlib defaults: warnings and above
reach stderr and nothing is written to stdout.
"""

from __future__ import annotations

import logging
import sys

import structlog

from flymap.core.config import Config

ROOT_LOGGER = "flymap"
_HANDLER_NAME = "flymap.structlog"


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger that emits through ``logging.getLogger(name)``."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.render_to_log_kwargs,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )


class StructlogAdapter:
    """Installs a structlog-rendering stderr handler on the ``flymap`` logger.

    Reads the ``flymap.logging`` section::

        flymap:
          logging:
            format: json
            level:
              root: INFO
              flymap.mapping.builder: DEBUG

    ``root`` is the level of the ``flymap`` logger itself; other keys name
    individual loggers.  The global root logger is never touched.
    """

    def __init__(self) -> None:
        self._root_level: str = "WARNING"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Install the handler and levels described by the logging section of config."""
        level_section = dict(config.get_section("flymap.logging.level"))
        self._root_level = str(level_section.pop("root", "WARNING")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(config.get("flymap.logging.format", "console")).lower()

        self._install_handler()
        self._apply_levels()

    def set_level(self, name: str, level: str) -> None:
        """Set the log level for a specific stdlib logger."""
        log_level = getattr(logging, level.upper(), logging.INFO)
        logging.getLogger(name).setLevel(log_level)

    def _install_handler(self) -> None:
        if self._format == "json":
            renderer = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=False)

        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.ExtraAdder(),
                structlog.processors.TimeStamper(fmt="iso"),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(formatter)

        # Reconfiguring replaces the handler installed by an earlier call.
        root = logging.getLogger(ROOT_LOGGER)
        for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
            root.removeHandler(existing)
            existing.close()
        root.addHandler(handler)
        root.propagate = False
        self.set_level(ROOT_LOGGER, self._root_level)

    def _apply_levels(self) -> None:
        for module, level in self._module_levels.items():
            self.set_level(module, level)


def configure_logging(config: Config | None = None) -> StructlogAdapter:
    """Configure flymap logging from *config* and return the adapter used."""
    adapter = StructlogAdapter()
    adapter.configure(config or Config())
    return adapter
