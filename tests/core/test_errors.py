"""Tests for error types and codes."""

import pytest

from lcovbridge.core.errors import (
    ConfigError,
    CoverageParseError,
    ErrorCode,
    InternalError,
    LcovBridgeError,
    NoCoverageFilesError,
    SessionBusyError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.COVERAGE_FILE_NOT_FOUND, 7000),
            (ErrorCode.COVERAGE_PARSE_ERROR, 7000),
            (ErrorCode.SESSION_BUSY, 7000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestLcovBridgeError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = LcovBridgeError(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 7002,
            "error": "COVERAGE_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = LcovBridgeError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        # When
        result = str(error)

        # Then
        assert result == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        """Errors are ordinary exceptions."""
        with pytest.raises(LcovBridgeError):
            raise CoverageParseError.not_found("/x/lcov.info")


class TestConfigError:
    """ConfigError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "kwargs", "expected_code"),
        [
            (
                "parse_error",
                {"path": "/foo", "reason": "bad yaml"},
                ErrorCode.CONFIG_PARSE_ERROR,
            ),
            (
                "invalid_value",
                {"field": "coverage.source_dirs", "value": "/abs", "reason": "absolute"},
                ErrorCode.CONFIG_INVALID_VALUE,
            ),
        ],
    )
    def test_given_factory_when_called_then_correct_code(
        self, factory: str, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        """Factory methods produce errors with correct error codes."""
        # Given
        factory_method = getattr(ConfigError, factory)

        # When
        error = factory_method(**kwargs)

        # Then
        assert error.code == expected_code

    def test_given_parse_error_when_created_then_path_in_details(self) -> None:
        """Parse error includes file path in details."""
        # Given
        path = "/config.yaml"
        reason = "invalid syntax"

        # When
        error = ConfigError.parse_error(path, reason)

        # Then
        assert error.details["path"] == path
        assert reason in error.message


class TestCoverageErrors:
    """Coverage error factory tests."""

    def test_not_found_message(self) -> None:
        error = CoverageParseError.not_found("/ws/lcov.info")
        assert error.message == "LCOV file not found: /ws/lcov.info"
        assert error.code == ErrorCode.COVERAGE_FILE_NOT_FOUND

    def test_malformed_message(self) -> None:
        error = CoverageParseError.malformed("/ws/lcov.info", "no SF records found")
        assert error.message == "Error parsing LCOV file /ws/lcov.info: no SF records found"
        assert error.details["reason"] == "no SF records found"

    def test_no_files_message(self) -> None:
        error = NoCoverageFilesError.for_pattern("**/lcov.info", "/ws")
        assert error.message == "No LCOV files found matching pattern: **/lcov.info"
        assert error.details == {"pattern": "**/lcov.info", "root": "/ws"}

    def test_session_busy_is_retryable(self) -> None:
        error = SessionBusyError.load_in_progress()
        assert error.retryable is True
        assert error.error_name == "SESSION_BUSY"


class TestInternalError:
    """InternalError tests."""

    def test_given_unexpected_error_when_created_then_includes_extras(self) -> None:
        """Unexpected error captures arbitrary extra details."""
        # Given
        message = "boom"
        extras = {"foo": "bar", "count": 42}

        # When
        error = InternalError.unexpected(message, **extras)

        # Then
        assert error.details == extras
        assert error.code == ErrorCode.INTERNAL_ERROR
