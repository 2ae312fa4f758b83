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
"""Logging setup driven by ``hybridaop.logging.*``.

The interception core logs through module-level structlog loggers
(``structlog.get_logger("hybridaop.aop.dispatcher")`` and friends).
:func:`configure_logging` routes them through stdlib logging with the
configured renderer and levels.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

import structlog

from hybridaop.core.config import Config, config_properties

_FORMATS = ("console", "json")


@config_properties(prefix="hybridaop.logging")
@dataclass
class LoggingProperties:
    """Logging settings bound from ``hybridaop.logging``.

    Attributes:
        level: Root log level name.
        format: ``console`` for a human-readable renderer, ``json`` for
            one JSON object per line.
        modules: Per-logger level overrides, e.g.
            ``{"hybridaop.aop.dispatcher": "DEBUG"}``.
    """

    level: str = "INFO"
    format: str = "console"
    modules: dict[str, str] = field(default_factory=dict)


def _level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{name}'")
    return level


def configure_logging(config: Config) -> LoggingProperties:
    """Configure structlog and stdlib logging from *config*.

    Returns the bound :class:`LoggingProperties`.  Raises ``ValueError``
    for an unknown format or level name.
    """
    properties = config.bind(LoggingProperties)
    renderer_format = properties.format.lower()
    if renderer_format not in _FORMATS:
        raise ValueError(f"Unknown log format '{properties.format}', expected one of {_FORMATS}")

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if renderer_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_level(properties.level),
        force=True,
    )
    for name, level in properties.modules.items():
        logging.getLogger(name).setLevel(_level(level))

    return properties
