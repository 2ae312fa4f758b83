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
"""Exception hierarchy for hybridaop.

All errors raised by the dispatch core inherit from HybridAopException.
The contract errors also inherit from TypeError, so callers that treat a
malformed hook as a type error keep working.

Categories:
- ShapeMismatchException: a hook returned a value of the wrong shape
- AdapterSynthesisException: a carried type could not be specialised
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class HybridAopException(Exception):
    """Base exception for all hybridaop errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "SHAPE_NOT_AWAITABLE").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Contract Exceptions
# =============================================================================


class ShapeMismatchException(HybridAopException, TypeError):
    """A hook returned a value incompatible with the dispatch path taken."""


class AdapterSynthesisException(HybridAopException, TypeError):
    """A carried value type cannot be turned into a value adapter."""
