"""Tests for the hybridaop exception hierarchy."""

from hybridaop.kernel.exceptions import (
    AdapterSynthesisException,
    HybridAopException,
    ShapeMismatchException,
)


class TestHybridAopException:
    def test_basic_creation(self):
        exc = HybridAopException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = HybridAopException("bad shape", code="SHAPE_NOT_AWAITABLE", context={"method": "m"})
        assert exc.code == "SHAPE_NOT_AWAITABLE"
        assert exc.context["method"] == "m"

    def test_context_not_shared_between_instances(self):
        first = HybridAopException("a")
        second = HybridAopException("b")
        first.context["key"] = "value"
        assert second.context == {}


class TestContractExceptions:
    def test_shape_mismatch_is_type_error(self):
        exc = ShapeMismatchException("not awaitable")
        assert isinstance(exc, HybridAopException)
        assert isinstance(exc, TypeError)

    def test_adapter_synthesis_is_type_error(self):
        exc = AdapterSynthesisException("bad carried type", code="ADAPTER_SYNTHESIS")
        assert isinstance(exc, HybridAopException)
        assert isinstance(exc, TypeError)
        assert exc.code == "ADAPTER_SYNTHESIS"
