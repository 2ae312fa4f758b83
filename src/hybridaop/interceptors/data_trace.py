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
"""DataTraceInterceptor — logs each call's signature, arguments and result."""

from __future__ import annotations

from typing import Any

import structlog

from hybridaop.aop.dispatcher import Dispatcher
from hybridaop.aop.interceptor import HybridInterceptor
from hybridaop.aop.types import HookState, InvocationInfo


class DataTraceInterceptor(HybridInterceptor):
    """Logs ``CALL => <signature> => RETURN => <result>`` after each call.

    Async methods without a value log ``None`` as their result.
    """

    def __init__(self, dispatcher: Dispatcher | None = None, logger: Any = None) -> None:
        super().__init__(dispatcher)
        self._logger = logger if logger is not None else structlog.get_logger("hybridaop.interceptors.trace")

    def after_invoke(self, invocation: InvocationInfo, response: Any, state: HookState) -> Any:
        self._logger.info(
            f"CALL => {invocation.signature()} => RETURN => {response!r}",
            method=invocation.method.qualified_name,
        )
        return response
