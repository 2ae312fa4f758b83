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
"""ShapeClassifier — memoised classification of declared return types."""

from __future__ import annotations

import asyncio
import collections.abc
import threading
import typing
from typing import Any

import structlog

from hybridaop.aop.types import ResultShape, ShapeClassification, unalias

logger = structlog.get_logger("hybridaop.aop.classifier")

_DEFERRED_ORIGINS: tuple[type, ...] = (
    collections.abc.Awaitable,
    collections.abc.Coroutine,
    asyncio.Future,
    asyncio.Task,
)

_SYNC = ShapeClassification(ResultShape.SYNC)
_DEFERRED_VOID = ShapeClassification(ResultShape.DEFERRED_VOID)


class ShapeClassifier:
    """Classifies declared return types into :class:`ResultShape` values.

    Each distinct return type is resolved once; later lookups read the
    cache without locking.  Insertion happens under a lock so concurrent
    first lookups of the same type resolve it a single time and all
    observe the same classification.

    Usage::

        classifier = ShapeClassifier()
        classifier.classify(Coroutine[Any, Any, int])
        # ShapeClassification(shape=ResultShape.DEFERRED_VALUE, carried_type=int)
    """

    def __init__(self) -> None:
        self._cache: dict[Any, ShapeClassification] = {}
        self._lock = threading.Lock()

    def classify(self, return_type: Any) -> ShapeClassification:
        """Return the shape of *return_type*, resolving it on first sight."""
        try:
            cached = self._cache.get(return_type)
        except TypeError:
            # Unhashable annotation: nothing to key the cache on.
            return self._resolve(return_type)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(return_type)
            if cached is None:
                cached = self._resolve(return_type)
                self._cache[return_type] = cached
                logger.debug(
                    "shape_classified",
                    return_type=repr(return_type),
                    shape=cached.shape.value,
                )
        return cached

    def cached_types(self) -> list[Any]:
        """Snapshot of the return types classified so far."""
        return list(self._cache)

    def _resolve(self, return_type: Any) -> ShapeClassification:
        return_type = unalias(return_type)
        origin = typing.get_origin(return_type)

        if origin is typing.Annotated:
            return self._resolve(typing.get_args(return_type)[0])

        if origin is None:
            # Bare deferred classes carry an unknown value.
            if isinstance(return_type, type) and return_type in _DEFERRED_ORIGINS:
                return ShapeClassification(ResultShape.DEFERRED_VALUE, Any)
            return _SYNC

        if origin not in _DEFERRED_ORIGINS:
            return _SYNC

        args = typing.get_args(return_type)
        carried = unalias(args[-1]) if args else Any
        if carried is None or carried is type(None):
            return _DEFERRED_VOID
        return ShapeClassification(ResultShape.DEFERRED_VALUE, carried)
