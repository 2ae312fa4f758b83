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
"""PerformanceInterceptor — measures the wall-clock time of each call."""

from __future__ import annotations

import time
from typing import Any

import structlog

from hybridaop.aop.dispatcher import Dispatcher
from hybridaop.aop.interceptor import HybridInterceptor
from hybridaop.aop.types import HookState, InvocationInfo

STOPWATCH_KEY = "stopwatch"
ELAPSED_KEY = "elapsed_ms"


class PerformanceInterceptor(HybridInterceptor):
    """Logs ``CALL => <signature> => TOOK => <ms> ms`` after each call.

    The start mark is kept in the call's hook state under ``"stopwatch"``
    and the measured milliseconds under ``"elapsed_ms"``.  For async
    methods the measurement covers the awaited work.
    """

    def __init__(self, dispatcher: Dispatcher | None = None, logger: Any = None) -> None:
        super().__init__(dispatcher)
        self._logger = logger if logger is not None else structlog.get_logger("hybridaop.interceptors.performance")

    def before_invoke(self, invocation: InvocationInfo, state: HookState) -> Any:
        state[STOPWATCH_KEY] = time.perf_counter()
        return super().before_invoke(invocation, state)

    def after_invoke(self, invocation: InvocationInfo, response: Any, state: HookState) -> Any:
        elapsed_ms = (time.perf_counter() - state[STOPWATCH_KEY]) * 1000
        state[ELAPSED_KEY] = elapsed_ms
        self._logger.info(
            f"CALL => {invocation.signature()} => TOOK => {elapsed_ms:.0f} ms",
            method=invocation.method.qualified_name,
            elapsed_ms=round(elapsed_ms, 3),
        )
        return super().after_invoke(invocation, response, state)
