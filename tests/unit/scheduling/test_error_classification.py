from __future__ import annotations

import httpx
import pytest

from src.bulkpost.scheduling.errors import (
    ErrorKind,
    classify_error,
    is_network_error,
    is_rate_limit_error,
)

_REQUEST = httpx.Request("POST", "https://getlate.dev/api/v1/posts")


def _status_error(status_code: int) -> httpx.HTTPStatusError:
    response = httpx.Response(status_code, request=_REQUEST)
    return httpx.HTTPStatusError(
        f"Server returned {status_code}", request=_REQUEST, response=response
    )


def test_http_429_is_rate_limited() -> None:
    error = _status_error(429)

    assert is_rate_limit_error(error)
    assert classify_error(error) is ErrorKind.RATE_LIMITED


def test_message_mentioning_429_is_rate_limited() -> None:
    error = RuntimeError("Late API error: 429 Too Many Requests")

    assert is_rate_limit_error(error)
    assert classify_error(error) is ErrorKind.RATE_LIMITED


@pytest.mark.parametrize(
    "error",
    [
        httpx.ConnectError("connection refused", request=_REQUEST),
        httpx.ReadTimeout("timed out", request=_REQUEST),
    ],
)
def test_transport_failures_are_network_errors(error: Exception) -> None:
    assert is_network_error(error)
    assert not is_rate_limit_error(error)
    assert classify_error(error) is ErrorKind.NETWORK


def test_client_errors_are_fatal() -> None:
    assert classify_error(_status_error(404)) is ErrorKind.FATAL
    assert classify_error(_status_error(400)) is ErrorKind.FATAL


def test_request_timeout_status_is_transient() -> None:
    assert classify_error(_status_error(408)) is ErrorKind.TRANSIENT


def test_server_errors_are_transient() -> None:
    error = _status_error(500)

    assert not is_network_error(error)
    assert classify_error(error) is ErrorKind.TRANSIENT


def test_unknown_errors_default_to_transient() -> None:
    error = ValueError("malformed payload")

    assert not is_network_error(error)
    assert not is_rate_limit_error(error)
    assert classify_error(error) is ErrorKind.TRANSIENT
