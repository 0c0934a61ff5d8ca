"""Tests for single Lambda invocations and their outcomes."""

import io

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from lambdabased.errors import FunctionError, TransportError
from lambdabased.invocation import (
    FunctionFailure,
    InvocationSucceeded,
    TransportFailure,
    invoke_function,
    raise_for_outcome,
)
from lambdabased.models import InvocationTarget
from tests.conftest import lambda_response


def _target(**kwargs) -> InvocationTarget:
    values = {"function_name": "f1", "qualifier": "$LATEST", "input": '{"param":"v1"}'}
    values.update(kwargs)
    return InvocationTarget(**values)


def _throttled() -> ClientError:
    return ClientError(
        {"Error": {"Code": "TooManyRequestsException", "Message": "Rate exceeded"}},
        "Invoke",
    )


def test_invoke_sends_request_response_call(lambda_client):
    outcome = invoke_function(lambda_client, _target(qualifier="live"))

    lambda_client.invoke.assert_called_once_with(
        FunctionName="f1",
        InvocationType="RequestResponse",
        Payload=b'{"param":"v1"}',
        Qualifier="live",
    )
    assert outcome == InvocationSucceeded(payload=b"result-val")


def test_invoke_reads_plain_bytes_payload(lambda_client):
    lambda_client.invoke.side_effect = None
    lambda_client.invoke.return_value = {"StatusCode": 200, "Payload": b"raw"}

    assert invoke_function(lambda_client, _target()) == InvocationSucceeded(b"raw")


def test_invoke_without_payload(lambda_client):
    lambda_client.invoke.side_effect = None
    lambda_client.invoke.return_value = {"StatusCode": 202}

    assert invoke_function(lambda_client, _target()) == InvocationSucceeded(b"")


def test_client_error_is_transport_failure(lambda_client):
    error = _throttled()
    lambda_client.invoke.side_effect = error

    outcome = invoke_function(lambda_client, _target())

    assert isinstance(outcome, TransportFailure)
    assert outcome.function_name == "f1"
    assert outcome.error is error


def test_connection_error_is_transport_failure(lambda_client):
    lambda_client.invoke.side_effect = EndpointConnectionError(
        endpoint_url="https://lambda.us-east-1.amazonaws.com"
    )

    assert isinstance(invoke_function(lambda_client, _target()), TransportFailure)


def test_function_error_is_function_failure(lambda_client):
    lambda_client.invoke.side_effect = None
    lambda_client.invoke.return_value = lambda_response(
        b'{"errorMessage":"boom"}', function_error="Unhandled"
    )

    outcome = invoke_function(lambda_client, _target())

    assert outcome == FunctionFailure(
        function_name="f1",
        function_error="Unhandled",
        payload=b'{"errorMessage":"boom"}',
    )


def test_raise_for_outcome_returns_payload():
    assert raise_for_outcome(InvocationSucceeded(b"ok")) == b"ok"


def test_raise_for_outcome_transport_failure():
    error = _throttled()

    with pytest.raises(TransportError, match="Rate exceeded") as exc_info:
        raise_for_outcome(TransportFailure("f1", error), "resource-1")

    assert "resource-1" in str(exc_info.value)
    assert exc_info.value.function_name == "f1"
    assert exc_info.value.__cause__ is error


def test_raise_for_outcome_function_failure_includes_output():
    outcome = FunctionFailure("f1", "Handled", b"result-val")

    with pytest.raises(FunctionError, match=r"\(result-val\)") as exc_info:
        raise_for_outcome(outcome)

    assert exc_info.value.function_error == "Handled"
    assert exc_info.value.payload == b"result-val"
    assert "f1" in str(exc_info.value)


def test_streaming_payload_is_consumed(lambda_client):
    body = io.BytesIO(b"streamed")
    lambda_client.invoke.side_effect = None
    lambda_client.invoke.return_value = {"StatusCode": 200, "Payload": body}

    assert invoke_function(lambda_client, _target()).payload == b"streamed"
