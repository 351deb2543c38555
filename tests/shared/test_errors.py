"""Tests for the MovieFetch error hierarchy."""

from enum import Enum
from pathlib import Path

import pytest

from moviefetch.shared.errors import (
    ApplicationError,
    DomainError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    MovieFetchError,
    NetworkError,
    NetworkErrorKind,
    create_bad_resource_path_error,
    create_cache_serialization_error,
    create_config_error,
    create_invalid_parameter_error,
)


class Color(Enum):
    RED = "red"


class TestErrorContext:
    """Test cases for ErrorContext."""

    def test_primitives_are_coerced(self):
        context = ErrorContext(
            operation="op",
            additional_data={"path": Path("/tmp/x"), "color": Color.RED, "count": 3},
        )

        assert context.additional_data == {"path": "/tmp/x", "color": "red", "count": 3}

    def test_non_primitive_is_rejected(self):
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"items": [1, 2]})

    def test_safe_dict_masks_api_key(self):
        context = ErrorContext(
            operation="search",
            url="http://www.omdbapi.com/",
            additional_data={"api_key": "secret", "page": 2},
        )

        assert context.safe_dict() == {
            "operation": "search",
            "url": "http://www.omdbapi.com/",
            "additional_data": {"api_key": "****", "page": 2},
        }


class TestNetworkError:
    """Test cases for NetworkError and its kinds."""

    @pytest.mark.parametrize(
        ("kind", "message"),
        [
            (NetworkErrorKind.INVALID_PARAMETER, "Please check the title!"),
            (NetworkErrorKind.NETWORK_FAILURE, "Please check your network connection."),
            (NetworkErrorKind.REMOTE_FAILURE, "Please try again later!"),
            (NetworkErrorKind.MISSING_DATA, "Please try again later!"),
            (NetworkErrorKind.DECODING_FAILURE, "Please try again later!"),
            (NetworkErrorKind.BAD_RESOURCE_PATH, None),
        ],
    )
    def test_user_messages(self, kind, message):
        assert NetworkError(kind, "detail").user_message == message

    def test_is_infrastructure_error(self):
        error = NetworkError(NetworkErrorKind.REMOTE_FAILURE, "status 500", status_code=500)

        assert isinstance(error, InfrastructureError)
        assert isinstance(error, MovieFetchError)
        assert error.code == ErrorCode.REMOTE_FAILURE
        assert str(error) == "REMOTE_FAILURE: status 500"

    def test_to_dict(self):
        original = ValueError("bad json")
        error = NetworkError(
            NetworkErrorKind.DECODING_FAILURE,
            "could not decode",
            ErrorContext(operation="network_request"),
            original_error=original,
            status_code=200,
        )

        assert error.to_dict() == {
            "code": "DECODING_FAILURE",
            "message": "could not decode",
            "context": {"operation": "network_request", "additional_data": {}},
            "original_error": "bad json",
            "status_code": 200,
        }


class TestFactories:
    """Test cases for error factory functions."""

    def test_invalid_parameter(self):
        error = create_invalid_parameter_error("empty", field="s", operation="build")

        assert error.kind is NetworkErrorKind.INVALID_PARAMETER
        assert error.context.additional_data == {"field": "s"}

    def test_bad_resource_path(self):
        error = create_bad_resource_path_error("nope", operation="build_get_poster")

        assert error.kind is NetworkErrorKind.BAD_RESOURCE_PATH
        assert error.context.additional_data == {"path": "nope"}

    def test_cache_serialization(self):
        error = create_cache_serialization_error("broken", key="tt1")

        assert isinstance(error, DomainError)
        assert error.code == ErrorCode.CACHE_SERIALIZATION_ERROR

    def test_config_error_default_code(self):
        error = create_config_error("bad", config_key="omdb.timeout")

        assert isinstance(error, ApplicationError)
        assert error.code == ErrorCode.CONFIG_INVALID

    def test_config_error_missing(self):
        error = create_config_error("absent", code=ErrorCode.CONFIG_MISSING)

        assert error.code == ErrorCode.CONFIG_MISSING
