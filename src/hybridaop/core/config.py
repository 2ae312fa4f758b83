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
"""Configuration for the dispatcher: framework defaults, one YAML/TOML file,
``HYBRIDAOP_*`` environment overrides and dataclass binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_CONFIG_PROPERTIES_ATTR = "__hybridaop_config_prefix__"

_ENV_PREFIX = "HYBRIDAOP_"

_DEFAULTS_RESOURCE = "hybridaop-defaults.yaml"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="hybridaop.dispatch")
        @dataclass
        class DispatchProperties:
            check_results: bool = True
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Nested configuration read with dot-notation keys.

    Priority (highest wins):
    1. Environment variables (``HYBRIDAOP_DISPATCH_TRACE`` for
       ``hybridaop.dispatch.trace``)
    2. The configuration file / dict
    3. Framework defaults, when loaded
    4. Dataclass field defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load *path* (``.yaml``/``.yml`` or ``.toml``) over the framework defaults.

        A missing file leaves only the defaults.
        """
        path = Path(path)
        data = cls._load_defaults() if load_defaults else {}
        if path.exists():
            data = cls._deep_merge(data, cls._read(path))
        return cls(data)

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the framework defaults."""
        return cls(cls._load_defaults())

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        resource = importlib.resources.files("hybridaop.resources").joinpath(_DEFAULTS_RESOURCE)
        return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key; an environment variable wins."""
        env_key = _ENV_PREFIX + key.removeprefix("hybridaop.").upper().replace(".", "_").replace("-", "_")
        env_val = os.environ.get(env_key)
        if env_val is not None:
            return env_val

        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or current.get(part) is None:
                return default
            current = current[part]
        return current

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass.

        Field ``check_results`` is looked up as ``check_results`` and as
        ``check-results``.  String values (from the environment) are
        converted for ``int``, ``float`` and ``bool`` fields.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = None
            for key in (field.name, field.name.replace("_", "-")):
                value = self.get(f"{prefix}.{key}")
                if value is not None:
                    break
            if value is None:
                continue

            expected_type = hints.get(field.name)
            if isinstance(value, str):
                if expected_type is bool:
                    value = value.lower() in ("true", "1", "yes")
                elif expected_type in (int, float):
                    value = expected_type(value)
            kwargs[field.name] = value

        return config_cls(**kwargs)
