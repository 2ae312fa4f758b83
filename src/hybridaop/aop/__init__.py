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
"""Method interception core — shape classification, value adapters and hooks."""

from hybridaop.aop.adapters import AdapterCache, ValueAdapter
from hybridaop.aop.classifier import ShapeClassifier
from hybridaop.aop.dispatcher import DispatchProperties, Dispatcher
from hybridaop.aop.interceptor import HybridInterceptor
from hybridaop.aop.types import (
    HookState,
    InvocationInfo,
    MethodIdentity,
    ParameterInfo,
    ResultShape,
    ShapeClassification,
)

__all__ = [
    "AdapterCache",
    "DispatchProperties",
    "Dispatcher",
    "HookState",
    "HybridInterceptor",
    "InvocationInfo",
    "MethodIdentity",
    "ParameterInfo",
    "ResultShape",
    "ShapeClassification",
    "ShapeClassifier",
    "ValueAdapter",
]
