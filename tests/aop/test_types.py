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
"""Tests for InvocationInfo, MethodIdentity and signature formatting."""

from __future__ import annotations

import asyncio
import collections.abc
import inspect
from collections.abc import Awaitable
from datetime import datetime
from typing import Any

import pytest

from hybridaop.aop.classifier import ShapeClassifier
from hybridaop.aop.interceptor import HybridInterceptor
from hybridaop.aop.types import (
    InvocationInfo,
    MethodIdentity,
    ParameterInfo,
    ResultShape,
    ShapeClassification,
    type_name,
)


class InnerService:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def design(self, layers: int = 3) -> str:
        self.calls.append(f"design:{layers}")
        return f"designed {layers} layers"

    async def log(self) -> None:
        self.calls.append("log")

    async def get_time(self) -> datetime:
        return datetime(2026, 10, 19, 12, 0)

    async def untyped(self):
        return 1


def transfer(source: str, *, amount: float = 0.0) -> bool:
    return True


def gather(*items: int, **tags: str) -> None:
    return None


class LegacyService:
    """Parameter annotations naming a type that is only imported for type checkers."""

    async def log(self, entry: Undefined) -> None:  # noqa: F821
        return None

    def pending(self, entry: Undefined) -> Awaitable[int]:  # noqa: F821
        return asyncio.sleep(0, 7)

    def stamp(self, entry: Undefined, when: datetime) -> int:  # noqa: F821
        return 1


class TestMethodIdentity:
    def test_sync_method_identity(self) -> None:
        identity = MethodIdentity.of(InnerService().design)

        assert identity.name == "design"
        assert identity.qualified_name == f"{__name__}.InnerService.design"
        assert identity.return_type is str
        assert identity.parameters == (
            ParameterInfo(
                name="layers",
                annotation=int,
                kind=inspect.Parameter.POSITIONAL_OR_KEYWORD,
                default=3,
            ),
        )

    def test_coroutine_return_type_is_normalised(self) -> None:
        identity = MethodIdentity.of(InnerService().get_time)
        assert identity.return_type == collections.abc.Coroutine[Any, Any, datetime]

    def test_coroutine_returning_none(self) -> None:
        identity = MethodIdentity.of(InnerService().log)
        assert identity.return_type == collections.abc.Coroutine[Any, Any, type(None)]

    def test_missing_annotation_becomes_any(self) -> None:
        identity = MethodIdentity.of(InnerService().untyped)
        assert identity.return_type == collections.abc.Coroutine[Any, Any, Any]

    def test_unresolvable_parameter_keeps_return_type(self) -> None:
        identity = MethodIdentity.of(LegacyService().log)
        assert identity.return_type == collections.abc.Coroutine[Any, Any, type(None)]
        assert identity.parameters[0].annotation == "Undefined"
        assert ShapeClassifier().classify(identity.return_type).shape is ResultShape.DEFERRED_VOID

    def test_unresolvable_parameter_keeps_awaitable_return(self) -> None:
        identity = MethodIdentity.of(LegacyService().pending)
        assert ShapeClassifier().classify(identity.return_type) == ShapeClassification(
            ResultShape.DEFERRED_VALUE, int
        )

    def test_resolvable_parameters_still_resolve(self) -> None:
        identity = MethodIdentity.of(LegacyService().stamp)
        assert [p.annotation for p in identity.parameters] == ["Undefined", datetime]
        assert identity.return_type is int

    @pytest.mark.asyncio
    async def test_unresolvable_parameter_dispatches_by_return_type(self) -> None:
        class Recording(HybridInterceptor):
            def after_invoke(self, invocation, response, state):
                seen.append(response)
                return response

        seen: list[Any] = []
        assert await Recording().call(LegacyService().pending, "job") == 7
        assert seen == [7]

    def test_lambda_without_hints(self) -> None:
        identity = MethodIdentity.of(lambda x: x)
        assert identity.name == "<lambda>"
        assert identity.return_type is Any
        assert identity.parameters[0].annotation is Any
        assert not identity.parameters[0].has_default


class TestInvocationInfo:
    def test_capture_does_not_call(self) -> None:
        svc = InnerService()
        InvocationInfo.capture(svc.design, 5)
        assert svc.calls == []

    def test_proceed_calls_real_method(self) -> None:
        svc = InnerService()
        invocation = InvocationInfo.capture(svc.design, 5)

        assert invocation.proceed() == "designed 5 layers"
        assert svc.calls == ["design:5"]

    def test_proceed_runs_again_each_time(self) -> None:
        svc = InnerService()
        invocation = InvocationInfo.capture(svc.design)
        invocation.proceed()
        invocation.proceed()
        assert svc.calls == ["design:3", "design:3"]

    def test_capture_records_target_and_arguments(self) -> None:
        svc = InnerService()
        invocation = InvocationInfo.capture(svc.design, layers=7)

        assert invocation.target is svc
        assert invocation.args == ()
        assert invocation.kwargs == {"layers": 7}

    def test_capture_plain_function_has_no_target(self) -> None:
        invocation = InvocationInfo.capture(transfer, "a")
        assert invocation.target is None

    @pytest.mark.asyncio
    async def test_proceed_returns_awaitable_for_async(self) -> None:
        svc = InnerService()
        invocation = InvocationInfo.capture(svc.get_time)

        pending = invocation.proceed()
        assert inspect.isawaitable(pending)
        assert await pending == datetime(2026, 10, 19, 12, 0)


class TestSignature:
    def test_positional_argument(self) -> None:
        invocation = InvocationInfo.capture(InnerService().design, 5)
        assert invocation.signature() == "str design(int layers = 5)"

    def test_default_argument_is_shown(self) -> None:
        invocation = InvocationInfo.capture(InnerService().design)
        assert invocation.signature() == "str design(int layers = 3)"

    def test_keyword_only_argument(self) -> None:
        invocation = InvocationInfo.capture(transfer, "acct-1", amount=2.5)
        assert invocation.signature() == "bool transfer(str source = 'acct-1', float amount = 2.5)"

    def test_missing_argument_has_no_value(self) -> None:
        identity = MethodIdentity.of(transfer)
        invocation = InvocationInfo(method=identity, proceed_fn=lambda: True)
        assert invocation.signature() == "bool transfer(str source, float amount = 0.0)"

    def test_var_arguments(self) -> None:
        invocation = InvocationInfo.capture(gather, 1, 2, colour="red")
        assert invocation.signature() == "None gather(int *items = (1, 2), str **tags = {'colour': 'red'})"

    def test_async_signature_shows_awaited_type(self) -> None:
        signature = InvocationInfo.capture(InnerService().get_time).signature()
        assert signature == "Coroutine[datetime] get_time()"

    def test_async_void_signature(self) -> None:
        assert InvocationInfo.capture(InnerService().log).signature() == "Coroutine[None] log()"

    def test_sync_awaitable_signature_is_unchanged(self) -> None:
        signature = InvocationInfo.capture(LegacyService().pending, "job").signature()
        assert signature == "collections.abc.Awaitable[int] pending(Undefined entry = 'job')"

    def test_display_return_type_without_arguments(self) -> None:
        identity = MethodIdentity(name="run", qualified_name="run", is_coroutine=True)
        assert identity.display_return_type == "Coroutine[typing.Any]"


class TestTypeName:
    def test_plain_class(self) -> None:
        assert type_name(datetime) == "datetime"

    def test_none(self) -> None:
        assert type_name(None) == "None"
        assert type_name(type(None)) == "None"

    def test_generic_alias(self) -> None:
        assert type_name(list[int]) == "list[int]"
