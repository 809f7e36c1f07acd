"""Tests for custom exception hierarchy."""

from coa_engine.exceptions import (
    ApiError,
    CoaEngineError,
    ConfigurationError,
    ConflictError,
    InvalidAccountStateError,
    InvalidTreeError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from coa_engine.tree.invariants import TreeViolation


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_coa_engine_error_is_exception(self) -> None:
        assert isinstance(CoaEngineError("test"), Exception)

    def test_configuration_error_is_coa_engine_error(self) -> None:
        assert isinstance(ConfigurationError("test"), CoaEngineError)

    def test_invalid_account_state_is_coa_engine_error(self) -> None:
        assert isinstance(InvalidAccountStateError("test"), CoaEngineError)

    def test_api_errors_share_base(self) -> None:
        for cls in (ValidationError, ConflictError, NotFoundError, NetworkError, ServerError):
            err = cls("boom", 500)
            assert isinstance(err, ApiError)
            assert isinstance(err, CoaEngineError)

    def test_api_error_keeps_server_message(self) -> None:
        err = ConflictError("Akun tidak dapat dihapus karena memiliki sub-akun", 409)
        assert err.message == "Akun tidak dapat dihapus karena memiliki sub-akun"
        assert err.status_code == 409
        assert str(err) == "Akun tidak dapat dihapus karena memiliki sub-akun"

    def test_api_error_without_message(self) -> None:
        err = ServerError(None, 502)
        assert err.message is None
        assert str(err) == "HTTP 502"

    def test_api_error_without_anything(self) -> None:
        assert str(ApiError(None)) == "API error"

    def test_validation_error_field(self) -> None:
        err = ValidationError("Kode akun wajib diisi", 400, field="code")
        assert err.field == "code"
        assert ValidationError("x").field is None


class TestInvalidTreeError:
    """Tests for InvalidTreeError summaries."""

    def test_lists_violations(self) -> None:
        violations = [TreeViolation("duplicate_code", "a1", "1", "code already used by a0")]
        err = InvalidTreeError(violations)

        assert err.violations == violations
        assert "duplicate_code at 1 (a1)" in str(err)

    def test_truncates_long_lists(self) -> None:
        violations = [TreeViolation("leaf_with_children", f"a{i}", str(i), "x") for i in range(8)]
        err = InvalidTreeError(violations)

        assert "(+3 more)" in str(err)
        assert isinstance(err, CoaEngineError)
