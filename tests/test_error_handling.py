"""Tests for the exception hierarchy and ErrorContext."""

import pytest

from followback.error_handling import (
    ConfigurationError,
    ErrorContext,
    FollowbackError,
    InputTooLargeError,
    MalformedInputError,
    UnsupportedSourceKindError,
)


class TestExceptions:
    """Test exception attributes."""

    def test_hierarchy(self):
        for error in (
            MalformedInputError("x"),
            UnsupportedSourceKindError("csv"),
            InputTooLargeError("x", size_bytes=2, limit_bytes=1),
            ConfigurationError("x"),
        ):
            assert isinstance(error, FollowbackError)

    def test_malformed_input(self):
        error = MalformedInputError("Invalid JSON format for followers: x", side="followers", source_kind="json")
        assert error.error_code == "malformed_input"
        assert error.side == "followers"
        assert error.source_kind == "json"
        assert error.context == {}

    def test_unsupported_kind_message(self):
        error = UnsupportedSourceKindError("csv")
        assert "csv" in str(error)
        assert error.error_code == "unsupported_source_kind"


class TestErrorContext:
    """Test ErrorContext."""

    def test_enhances_followback_errors(self):
        with pytest.raises(MalformedInputError) as exc_info:
            with ErrorContext("extract", side="followers"):
                raise MalformedInputError("bad", side="followers")

        assert exc_info.value.context == {"operation": "extract", "side": "followers"}

    def test_converts_other_errors(self):
        with pytest.raises(MalformedInputError) as exc_info:
            with ErrorContext("extract", convert_to=MalformedInputError, side="following"):
                raise KeyError("missing")

        error = exc_info.value
        assert "Error during extract" in str(error)
        assert error.context["original_error"] == "KeyError"
        assert isinstance(error.__cause__, KeyError)

    def test_no_error(self):
        with ErrorContext("noop"):
            value = 1
        assert value == 1
