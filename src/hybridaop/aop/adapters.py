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
"""AdapterCache — value adapters specialised per carried type.

A method declared as returning ``Awaitable[T]`` is dispatched through a
:class:`ValueAdapter` bound to ``T``.  The adapter awaits the real call,
runs the after hook on the resolved value and checks the hook's result
against ``T``.  The check for each ``T`` is synthesised once and the
adapter is kept for the lifetime of the cache.
"""

from __future__ import annotations

import inspect
import threading
import types
import typing
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import structlog

from hybridaop.aop.types import HookState, InvocationInfo, type_name, unalias
from hybridaop.kernel.exceptions import AdapterSynthesisException, ShapeMismatchException

if TYPE_CHECKING:
    from hybridaop.aop.interceptor import HybridInterceptor

logger = structlog.get_logger("hybridaop.aop.adapters")

T = TypeVar("T")

ResultCheck = Callable[[Any], bool]

_UNCHECKED: tuple[Any, ...] = (
    Any,
    object,
    typing.NoReturn,
    typing.Never,
    typing.Self,
    typing.LiteralString,
)

# int is acceptable where float is declared, as in the numeric tower.
_WIDENED: dict[type, tuple[type, ...]] = {
    float: (float, int),
    complex: (complex, float, int),
}


def require_awaitable(invocation: InvocationInfo, value: Any) -> Any:
    """Return *value* if it can be awaited, else raise ShapeMismatchException."""
    if inspect.isawaitable(value):
        return value
    raise ShapeMismatchException(
        f"before_invoke for '{invocation.method.qualified_name}' must return an awaitable, "
        f"got {type(value).__name__}",
        code="SHAPE_NOT_AWAITABLE",
        context={
            "method": invocation.method.qualified_name,
            "expected": type_name(invocation.return_type),
            "actual": type(value).__name__,
        },
    )


def build_result_check(carried_type: Any) -> ResultCheck | None:
    """Synthesise the result check for *carried_type*.

    Returns ``None`` when values of *carried_type* cannot be checked at
    runtime (``Any``, type variables, forward references, non-runtime
    protocols).  Raises AdapterSynthesisException for annotations that are
    not types at all.  Aliases declared with a ``type`` statement are
    checked as the type they name.
    """
    carried_type = unalias(carried_type)
    if any(carried_type is u for u in _UNCHECKED):
        return None
    if isinstance(carried_type, (TypeVar, str, typing.ForwardRef)):
        return None
    if carried_type is None or carried_type is type(None):
        return lambda value: value is None
    if isinstance(carried_type, typing.NewType):
        return build_result_check(carried_type.__supertype__)

    origin = typing.get_origin(carried_type)
    if origin is typing.Annotated:
        return build_result_check(typing.get_args(carried_type)[0])
    if origin is typing.Union or origin is types.UnionType:
        checks = [build_result_check(arg) for arg in typing.get_args(carried_type)]
        if any(check is None for check in checks):
            return None
        return lambda value: any(check(value) for check in checks)  # type: ignore[misc]
    if origin is typing.Literal:
        allowed = typing.get_args(carried_type)
        return lambda value: value in allowed
    if origin is not None:
        if isinstance(origin, type):
            return build_result_check(origin)
        raise AdapterSynthesisException(
            f"Cannot build a value adapter for {carried_type!r}",
            code="ADAPTER_SYNTHESIS",
            context={"carried_type": repr(carried_type)},
        )

    if isinstance(carried_type, type):
        accepted = _WIDENED.get(carried_type, (carried_type,))
        try:
            isinstance(None, accepted)
        except TypeError:
            # Protocols without @runtime_checkable reject isinstance().
            return None
        return lambda value: isinstance(value, accepted)

    raise AdapterSynthesisException(
        f"Cannot build a value adapter for {carried_type!r}: not a type",
        code="ADAPTER_SYNTHESIS",
        context={"carried_type": repr(carried_type)},
    )


class ValueAdapter(Generic[T]):
    """Awaits a value-carrying call and threads it through the hooks.

    Calling the adapter returns a coroutine that resolves to the after
    hook's result.  The before hook completes (including the awaited real
    call) before the after hook starts; if the awaited work fails the
    after hook is not called and the failure propagates.
    """

    __slots__ = ("carried_type", "_check")

    def __init__(self, carried_type: Any, check: ResultCheck | None) -> None:
        self.carried_type = carried_type
        self._check = check

    @property
    def checked(self) -> bool:
        return self._check is not None

    async def __call__(self, interceptor: HybridInterceptor, invocation: InvocationInfo) -> T:
        state: HookState = {}
        pending = require_awaitable(invocation, interceptor.before_invoke(invocation, state))
        response = await pending
        result = interceptor.after_invoke(invocation, response, state)
        if self._check is not None and not self._check(result):
            raise ShapeMismatchException(
                f"after_invoke for '{invocation.method.qualified_name}' returned "
                f"{type(result).__name__}, expected {type_name(self.carried_type)}",
                code="SHAPE_RESULT_TYPE",
                context={
                    "method": invocation.method.qualified_name,
                    "expected": type_name(self.carried_type),
                    "actual": type(result).__name__,
                },
            )
        return typing.cast(T, result)

    def __repr__(self) -> str:
        return f"ValueAdapter[{type_name(self.carried_type)}]"


class AdapterCache:
    """Get-or-add cache of :class:`ValueAdapter` instances keyed by carried type.

    Concurrent first requests for the same type may each synthesise an
    adapter, but only the first one inserted is kept and handed out.

    Args:
        check_results: When ``False`` adapters pass after-hook results
            through without checking them against the carried type.
    """

    def __init__(self, check_results: bool = True) -> None:
        self._adapters: dict[Any, ValueAdapter[Any]] = {}
        self._lock = threading.Lock()
        self._check_results = check_results
        self.synthesis_count = 0

    def get_adapter(self, carried_type: Any) -> ValueAdapter[Any]:
        """Return the adapter for *carried_type*, synthesising it on first use."""
        try:
            adapter = self._adapters.get(carried_type)
        except TypeError:
            return self._synthesize(carried_type)
        if adapter is not None:
            return adapter

        created = self._synthesize(carried_type)
        with self._lock:
            adapter = self._adapters.setdefault(carried_type, created)
        if adapter is created:
            logger.debug(
                "adapter_synthesized",
                carried_type=type_name(carried_type),
                checked=adapter.checked,
            )
        return adapter

    def cached_types(self) -> list[Any]:
        """Snapshot of the carried types with a retained adapter."""
        return list(self._adapters)

    def _synthesize(self, carried_type: Any) -> ValueAdapter[Any]:
        check = build_result_check(carried_type) if self._check_results else None
        with self._lock:
            self.synthesis_count += 1
        return ValueAdapter(carried_type, check)
