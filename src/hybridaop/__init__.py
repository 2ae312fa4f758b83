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
"""hybridaop — before/after interception for sync and async methods."""

from hybridaop.aop import (
    AdapterCache,
    Dispatcher,
    DispatchProperties,
    HookState,
    HybridInterceptor,
    InvocationInfo,
    MethodIdentity,
    ParameterInfo,
    ResultShape,
    ShapeClassification,
    ShapeClassifier,
    ValueAdapter,
)
from hybridaop.core.config import Config, config_properties
from hybridaop.kernel.exceptions import (
    AdapterSynthesisException,
    HybridAopException,
    ShapeMismatchException,
)
from hybridaop.logging import LoggingProperties, configure_logging

__version__ = "0.1.0"

__all__ = [
    "AdapterCache",
    "AdapterSynthesisException",
    "Config",
    "DispatchProperties",
    "Dispatcher",
    "HookState",
    "HybridAopException",
    "HybridInterceptor",
    "InvocationInfo",
    "LoggingProperties",
    "MethodIdentity",
    "ParameterInfo",
    "ResultShape",
    "ShapeClassification",
    "ShapeClassifier",
    "ShapeMismatchException",
    "ValueAdapter",
    "config_properties",
    "configure_logging",
    "__version__",
]
