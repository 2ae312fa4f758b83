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
"""Interception core types — InvocationInfo, method identity and result shapes."""

from __future__ import annotations

import collections.abc
import inspect
import typing
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from types import SimpleNamespace
from typing import Any

HookState = dict[str, Any]
"""Call-scoped storage shared by the before and after hook of one invocation."""

_EMPTY = inspect.Parameter.empty


class ResultShape(Enum):
    """How a method delivers its result."""

    SYNC = "SYNC"
    DEFERRED_VOID = "DEFERRED_VOID"
    DEFERRED_VALUE = "DEFERRED_VALUE"


@dataclass(frozen=True)
class ShapeClassification:
    """Result shape of a declared return type.

    Attributes:
        shape: The classified shape.
        carried_type: The type a ``DEFERRED_VALUE`` awaitable resolves to;
            ``None`` for the other shapes.
    """

    shape: ResultShape
    carried_type: Any = None


def type_name(tp: Any) -> str:
    """Render a type annotation for human-readable signatures."""
    if tp is None or tp is type(None):
        return "None"
    if isinstance(tp, str):
        return tp
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        return tp.__qualname__
    return repr(tp)


def unalias(tp: Any) -> Any:
    """Replace a ``type`` statement alias by the annotation it names.

    Parameterised aliases (``Box[int]`` for ``type Box[T] = Awaitable[T]``)
    are expanded with their arguments substituted.
    """
    while True:
        if isinstance(tp, typing.TypeAliasType):
            tp = tp.__value__
            continue
        origin = typing.get_origin(tp)
        if not isinstance(origin, typing.TypeAliasType):
            return tp
        value = origin.__value__
        if getattr(value, "__parameters__", ()):
            value = value[typing.get_args(tp)]
        tp = value


def _resolve_hints(fn: Callable[..., Any]) -> dict[str, Any]:
    # One annotation at a time, so an unresolvable name only affects itself.
    annotations = dict(getattr(fn, "__annotations__", None) or {})
    globalns = getattr(inspect.unwrap(fn), "__globals__", None)
    hints: dict[str, Any] = {}
    for name, annotation in annotations.items():
        holder = SimpleNamespace(__annotations__={name: annotation})
        try:
            hints[name] = typing.get_type_hints(holder, globalns=globalns)[name]
        except (NameError, TypeError):
            hints[name] = annotation
    return hints


@dataclass(frozen=True)
class ParameterInfo:
    """One declared parameter of an intercepted method."""

    name: str
    annotation: Any = Any
    kind: inspect._ParameterKind = inspect.Parameter.POSITIONAL_OR_KEYWORD
    default: Any = _EMPTY

    @property
    def has_default(self) -> bool:
        return self.default is not _EMPTY


@dataclass(frozen=True)
class MethodIdentity:
    """Identity of an intercepted method.

    Attributes:
        name: Method name, e.g. ``"get_time"``.
        qualified_name: ``module.Class.method`` style name.
        parameters: Declared parameters, without ``self``/``cls``.
        return_type: Declared return type.  Coroutine functions are
            normalised to ``Coroutine[Any, Any, R]``.
        is_coroutine: Whether the method is declared with ``async def``.
    """

    name: str
    qualified_name: str
    parameters: tuple[ParameterInfo, ...] = ()
    return_type: Any = Any
    is_coroutine: bool = False

    @property
    def display_return_type(self) -> str:
        """Return type as written on the method, e.g. ``Coroutine[datetime]``."""
        if not self.is_coroutine:
            return type_name(self.return_type)
        args = typing.get_args(self.return_type)
        return f"Coroutine[{type_name(args[-1] if args else Any)}]"

    @classmethod
    def of(cls, fn: Callable[..., Any]) -> MethodIdentity:
        """Build the identity of *fn* from its signature and type hints."""
        sig = inspect.signature(fn)
        hints = _resolve_hints(fn)

        parameters = tuple(
            ParameterInfo(
                name=p.name,
                annotation=hints.get(p.name, Any),
                kind=p.kind,
                default=p.default,
            )
            for p in sig.parameters.values()
        )

        declared = hints.get("return", Any) if sig.return_annotation is not _EMPTY else Any
        is_coroutine = inspect.iscoroutinefunction(fn)
        if is_coroutine:
            declared = collections.abc.Coroutine[Any, Any, declared]

        name = getattr(fn, "__name__", type(fn).__name__)
        qualname = getattr(fn, "__qualname__", name)
        module = getattr(fn, "__module__", None)
        return cls(
            name=name,
            qualified_name=f"{module}.{qualname}" if module else qualname,
            parameters=parameters,
            return_type=declared,
            is_coroutine=is_coroutine,
        )


@dataclass(frozen=True)
class InvocationInfo:
    """One intercepted call, as handed to an interceptor.

    Attributes:
        method: Identity of the intercepted method.
        proceed_fn: Zero-argument callable performing the real call.
        args: Positional arguments passed to the method.
        kwargs: Keyword arguments passed to the method.
        target: The object whose method is being intercepted, if any.
    """

    method: MethodIdentity
    proceed_fn: Callable[[], Any]
    args: tuple = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    target: Any = None

    @classmethod
    def capture(cls, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> InvocationInfo:
        """Describe the call ``fn(*args, **kwargs)`` without performing it."""

        def proceed() -> Any:
            return fn(*args, **kwargs)

        return cls(
            method=MethodIdentity.of(fn),
            proceed_fn=proceed,
            args=args,
            kwargs=dict(kwargs),
            target=getattr(fn, "__self__", None),
        )

    @property
    def return_type(self) -> Any:
        return self.method.return_type

    def proceed(self) -> Any:
        """Invoke the real method and return its raw result.

        For deferred methods the raw result is the awaitable itself.  Every
        call runs the real method again.
        """
        return self.proceed_fn()

    def signature(self) -> str:
        """Human-readable signature with the actual argument values.

        Example: ``"None design(int layers = 3)"``; async methods show
        their awaited type as ``Coroutine[R]``.
        """
        pieces: list[str] = []
        positional = list(self.args)
        remaining = dict(self.kwargs)

        for param in self.method.parameters:
            label = f"{type_name(param.annotation)} {param.name}"
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                pieces.append(f"{type_name(param.annotation)} *{param.name} = {tuple(positional)!r}")
                positional = []
                continue
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                pieces.append(f"{type_name(param.annotation)} **{param.name} = {remaining!r}")
                remaining = {}
                continue

            if positional and param.kind is not inspect.Parameter.KEYWORD_ONLY:
                pieces.append(f"{label} = {positional.pop(0)!r}")
            elif param.name in remaining:
                pieces.append(f"{label} = {remaining.pop(param.name)!r}")
            elif param.has_default:
                pieces.append(f"{label} = {param.default!r}")
            else:
                pieces.append(label)

        arguments = ", ".join(pieces)
        return f"{self.method.display_return_type} {self.method.name}({arguments})"
