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
"""HybridInterceptor — before/after hooks applied to sync and async methods."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from hybridaop.aop.adapters import require_awaitable
from hybridaop.aop.dispatcher import Dispatcher
from hybridaop.aop.types import HookState, InvocationInfo


class HybridInterceptor:
    """Base class for interceptors with a before hook and an after hook.

    Subclasses override :meth:`before_invoke` and/or :meth:`after_invoke`.
    The same hooks run for every result shape:

    * sync methods: ``after_invoke(before_invoke(...))``, no suspension;
    * methods returning an awaitable of ``None``: the awaitable returned by
      ``before_invoke`` is awaited, then ``after_invoke`` runs with
      ``response=None`` and its return value is discarded;
    * methods returning an awaitable of ``T``: the awaitable is awaited and
      the resolved value passes through ``after_invoke``, whose result is
      what the caller's awaitable resolves to.

    A ``state`` dict is created for each call and shared by both hooks of
    that call only.

    Skipping the real call is supported: a ``before_invoke`` that returns a
    value without calling ``super().before_invoke(...)`` (or
    ``invocation.proceed()``) suppresses the real method.  For async methods
    the substitute must itself be awaitable.

    Args:
        dispatcher: Dispatcher owning the shape and adapter caches.  A new
            one is created when omitted; pass a shared instance to share
            caches between interceptors.
    """

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher()

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def invoke(self, invocation: InvocationInfo) -> Any:
        """Run the hooks around *invocation*.

        Returns the result directly for sync methods and a coroutine for
        async methods; the caller decides when to await it.
        """
        return self._dispatcher.dispatch(self, invocation)

    def call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Shorthand for ``invoke(InvocationInfo.capture(fn, *args, **kwargs))``."""
        return self.invoke(InvocationInfo.capture(fn, *args, **kwargs))

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def before_invoke(self, invocation: InvocationInfo, state: HookState) -> Any:
        """Perform the real call and return its raw result.

        Overrides must return ``super().before_invoke(...)`` (possibly
        transformed) for the real method to run.
        """
        return invocation.proceed()

    def after_invoke(self, invocation: InvocationInfo, response: Any, state: HookState) -> Any:
        """Return *response* unchanged.

        Overrides may inspect or replace the result; calling this base
        implementation is not required.
        """
        return response

    # ------------------------------------------------------------------
    # Shape-specific sequencing
    # ------------------------------------------------------------------

    def invoke_sync(self, invocation: InvocationInfo) -> Any:
        state: HookState = {}
        response = self.before_invoke(invocation, state)
        return self.after_invoke(invocation, response, state)

    async def invoke_deferred_void(self, invocation: InvocationInfo) -> None:
        state: HookState = {}
        await require_awaitable(invocation, self.before_invoke(invocation, state))
        self.after_invoke(invocation, None, state)
