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
"""Dispatcher — routes an intercepted call to the path matching its result shape."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from hybridaop.aop.adapters import AdapterCache
from hybridaop.aop.classifier import ShapeClassifier
from hybridaop.aop.types import InvocationInfo, ResultShape
from hybridaop.core.config import Config, config_properties
from hybridaop.logging import configure_logging

if TYPE_CHECKING:
    from hybridaop.aop.interceptor import HybridInterceptor

logger = structlog.get_logger("hybridaop.aop.dispatcher")


@config_properties(prefix="hybridaop.dispatch")
@dataclass
class DispatchProperties:
    """Dispatch settings bound from ``hybridaop.dispatch``.

    Attributes:
        check_results: Check after-hook results of value-carrying async
            methods against the declared carried type.
        trace: Debug-log every dispatch with the method and its shape.
    """

    check_results: bool = True
    trace: bool = False


class Dispatcher:
    """Per-call entry point of the interception core.

    Owns the shape classifier and the adapter cache; both are created
    empty when not supplied.  The dispatcher keeps no other state between
    calls.
    """

    def __init__(
        self,
        classifier: ShapeClassifier | None = None,
        adapters: AdapterCache | None = None,
        properties: DispatchProperties | None = None,
    ) -> None:
        self.properties = properties if properties is not None else DispatchProperties()
        self.classifier = classifier if classifier is not None else ShapeClassifier()
        self.adapters = (
            adapters if adapters is not None else AdapterCache(check_results=self.properties.check_results)
        )

    @classmethod
    def from_config(cls, config: Config, setup_logging: bool = True) -> Dispatcher:
        """Create a dispatcher with properties bound from *config*.

        Unless *setup_logging* is ``False``, structlog and stdlib logging are
        configured from ``hybridaop.logging`` first.
        """
        if setup_logging:
            configure_logging(config)
        return cls(properties=config.bind(DispatchProperties))

    def dispatch(self, interceptor: HybridInterceptor, invocation: InvocationInfo) -> Any:
        """Run *interceptor*'s hooks around *invocation*.

        Sync methods return their (possibly replaced) result.  Async methods
        return a coroutine that completes after the after hook has run.
        """
        classification = self.classifier.classify(invocation.return_type)
        if self.properties.trace:
            logger.debug(
                "dispatch",
                method=invocation.method.qualified_name,
                shape=classification.shape.value,
                interceptor=type(interceptor).__name__,
            )

        if classification.shape is ResultShape.SYNC:
            return interceptor.invoke_sync(invocation)
        if classification.shape is ResultShape.DEFERRED_VOID:
            return interceptor.invoke_deferred_void(invocation)

        adapter = self.adapters.get_adapter(classification.carried_type)
        return adapter(interceptor, invocation)
