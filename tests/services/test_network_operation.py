"""Unit tests for NetworkOperation."""

import threading
from concurrent.futures import CancelledError
from unittest.mock import Mock

import pytest
import requests

from moviefetch.services.operation import (
    NetworkOperation,
    NetworkOutcome,
    OperationState,
    decode_bytes,
    json_decoder,
    redact_url,
)
from moviefetch.shared.errors import NetworkError, NetworkErrorKind
from moviefetch.shared.models import DetailRecord

URL = "http://www.omdbapi.com/?apikey=KEY&i=tt0372784&plot=full"


class CancelAfterReleaseLock:
    """Lock that cancels an operation right after its n-th release."""

    def __init__(self, operation, releases):
        self._lock = threading.Lock()
        self._operation = operation
        self._remaining = releases

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info):
        self._lock.release()
        self._remaining -= 1
        if self._remaining == 0:
            self._operation.cancel()


def run(fake_session, decode=decode_bytes):
    completion = Mock()
    operation = NetworkOperation(URL, decode, completion=completion, session=fake_session)
    operation.start()
    return operation, completion


class TestNetworkOutcome:
    """Test cases for NetworkOutcome."""

    def test_success(self):
        outcome = NetworkOutcome.success(42)

        assert outcome.succeeded
        assert outcome.unwrap() == 42

    def test_failure_unwrap_raises(self):
        error = NetworkError(NetworkErrorKind.MISSING_DATA, "empty")
        outcome = NetworkOutcome.failure(error)

        assert not outcome.succeeded
        with pytest.raises(NetworkError):
            outcome.unwrap()


class TestNetworkOperation:
    """Test cases for the operation lifecycle and outcome classification."""

    def test_initial_state(self, fake_session):
        operation = NetworkOperation(URL, decode_bytes, session=fake_session)

        assert operation.state is OperationState.IDLE
        assert not operation.is_cancelled
        assert not operation.is_finished

    def test_success_delivers_decoded_value_once(self, fake_session, detail_payload):
        fake_session.respond(URL, detail_payload)

        operation, completion = run(fake_session, json_decoder(DetailRecord))

        assert operation.state is OperationState.FINISHED
        completion.assert_called_once()
        outcome = completion.call_args.args[0]
        assert outcome.succeeded
        assert outcome.value.title == "Batman Begins"
        assert outcome.value.dvd is None
        assert operation.outcome(timeout=1) is outcome

    def test_transport_failure(self, fake_session):
        fake_session.respond(URL, error=requests.ConnectionError("connection refused"))

        _, completion = run(fake_session)

        error = completion.call_args.args[0].error
        assert error.kind is NetworkErrorKind.NETWORK_FAILURE
        assert error.user_message == "Please check your network connection."
        assert isinstance(error.original_error, requests.ConnectionError)

    def test_timeout_is_transport_failure(self, fake_session):
        fake_session.respond(URL, error=requests.Timeout("timed out"))

        _, completion = run(fake_session)

        assert completion.call_args.args[0].error.kind is NetworkErrorKind.NETWORK_FAILURE

    @pytest.mark.parametrize("status", [301, 404, 500, 503])
    def test_non_success_status_is_remote_failure(self, fake_session, status):
        fake_session.respond(URL, {"Response": "True"}, status=status)

        _, completion = run(fake_session)

        error = completion.call_args.args[0].error
        assert error.kind is NetworkErrorKind.REMOTE_FAILURE
        assert error.status_code == status
        assert error.user_message == "Please try again later!"

    def test_status_takes_priority_over_empty_body(self, fake_session):
        fake_session.respond(URL, status=500)

        _, completion = run(fake_session)

        assert completion.call_args.args[0].error.kind is NetworkErrorKind.REMOTE_FAILURE

    def test_empty_body_is_missing_data(self, fake_session):
        fake_session.respond(URL, content=b"")

        _, completion = run(fake_session)

        assert completion.call_args.args[0].error.kind is NetworkErrorKind.MISSING_DATA

    def test_malformed_json_is_decoding_failure(self, fake_session):
        fake_session.respond(URL, content=b"<html>oops</html>")

        _, completion = run(fake_session, json_decoder(DetailRecord))

        assert completion.call_args.args[0].error.kind is NetworkErrorKind.DECODING_FAILURE

    def test_schema_mismatch_is_decoding_failure(self, fake_session):
        fake_session.respond(URL, {"Year": "2005"})

        _, completion = run(fake_session, json_decoder(DetailRecord))

        assert completion.call_args.args[0].error.kind is NetworkErrorKind.DECODING_FAILURE

    def test_second_start_is_noop(self, fake_session):
        fake_session.respond(URL, content=b"image")

        operation, completion = run(fake_session)
        operation.start()

        completion.assert_called_once()
        assert fake_session.request_count(URL) == 1

    def test_cancel_before_start_prevents_execution(self, fake_session):
        completion = Mock()
        operation = NetworkOperation(URL, decode_bytes, completion=completion, session=fake_session)

        operation.cancel()
        operation.start()

        assert operation.is_cancelled
        assert operation.state is OperationState.IDLE
        assert fake_session.request_count() == 0
        completion.assert_not_called()
        with pytest.raises(CancelledError):
            operation.outcome(timeout=1)

    def test_cancel_during_execution_discards_result(self, fake_session):
        completion = Mock()
        operation = NetworkOperation(URL, decode_bytes, completion=completion, session=fake_session)

        def decode_then_cancel(data):
            operation.cancel()
            return data

        fake_session.respond(URL, content=b"image")
        operation._decode = decode_then_cancel
        operation.start()

        assert operation.state is OperationState.FINISHED
        completion.assert_not_called()
        with pytest.raises(CancelledError):
            operation.outcome(timeout=1)

    def test_cancel_after_delivery_is_decided_is_ignored(self, fake_session):
        completion = Mock()
        operation = NetworkOperation(URL, decode_bytes, completion=completion, session=fake_session)
        fake_session.respond(URL, content=b"image")
        # Second release ends the critical section that picks deliver or discard
        operation._lock = CancelAfterReleaseLock(operation, releases=2)

        operation.start()

        assert not operation.is_cancelled
        completion.assert_called_once()
        assert completion.call_args.args[0].value == b"image"
        assert operation.outcome(timeout=1).value == b"image"

    def test_cancel_after_finish_has_no_effect(self, fake_session):
        fake_session.respond(URL, content=b"image")

        operation, _ = run(fake_session)
        operation.cancel()

        assert not operation.is_cancelled
        assert operation.outcome(timeout=1).value == b"image"

    def test_done_callback_runs_on_finish(self, fake_session):
        fake_session.respond(URL, content=b"image")
        done = Mock()
        operation = NetworkOperation(URL, decode_bytes, session=fake_session)
        operation.add_done_callback(done)

        operation.start()

        done.assert_called_once()


class TestRedactUrl:
    """Test cases for URL redaction in logs."""

    def test_query_is_removed(self):
        assert redact_url(URL) == "http://www.omdbapi.com/"

    def test_url_without_query(self):
        assert redact_url("http://img.example.com/a.jpg") == "http://img.example.com/a.jpg"
