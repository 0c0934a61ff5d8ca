"""
Synchronous Lambda invocation.

A call produces one of three outcomes: the function returned a response,
the call could not be completed (transport failure), or the function ran and
reported an error (function failure). Callers that only care about success
use ``raise_for_outcome`` to turn the failure variants into exceptions.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Union

from botocore.exceptions import BotoCoreError, ClientError

from .errors import FunctionError, TransportError
from .models import InvocationTarget

logger = logging.getLogger(__name__)


class LambdaClient(Protocol):
    """The subset of the boto3 Lambda client used here."""

    def invoke(self, **kwargs: Any) -> dict[str, Any]: ...


@dataclass(frozen=True)
class InvocationSucceeded:
    payload: bytes


@dataclass(frozen=True)
class TransportFailure:
    function_name: str
    error: Exception


@dataclass(frozen=True)
class FunctionFailure:
    function_name: str
    function_error: str
    payload: bytes


InvocationOutcome = Union[InvocationSucceeded, TransportFailure, FunctionFailure]


def _read_payload(response: dict[str, Any]) -> bytes:
    payload = response.get("Payload", b"")
    # boto3 returns a StreamingBody
    if hasattr(payload, "read"):
        payload = payload.read()
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return payload or b""


def invoke_function(client: LambdaClient, target: InvocationTarget) -> InvocationOutcome:
    """
    Invoke a function once and wait for its response.

    Args:
        client: Lambda client
        target: Function, qualifier and payload to send

    Returns:
        The tagged outcome of the call
    """
    logger.info(f"Invoking {target.function_name}:{target.qualifier}")

    try:
        response = client.invoke(
            FunctionName=target.function_name,
            InvocationType="RequestResponse",
            Payload=target.input.encode("utf-8"),
            Qualifier=target.qualifier,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Invocation of {target.function_name} failed: {e}")
        return TransportFailure(function_name=target.function_name, error=e)

    payload = _read_payload(response)
    function_error = response.get("FunctionError")
    if function_error:
        logger.error(
            f"Function {target.function_name} returned error: {function_error}"
        )
        return FunctionFailure(
            function_name=target.function_name,
            function_error=function_error,
            payload=payload,
        )

    return InvocationSucceeded(payload=payload)


def raise_for_outcome(outcome: InvocationOutcome, resource_id: str = "") -> bytes:
    """
    Return the response payload or raise the matching invocation error.

    Args:
        outcome: Result of invoke_function
        resource_id: ID of the resource the call was made for (may be empty)

    Returns:
        Response payload of a successful invocation

    Raises:
        TransportError: If the call could not be completed
        FunctionError: If the function reported an error; the message carries its output
    """
    if isinstance(outcome, TransportFailure):
        raise TransportError(
            f"Lambda invocation ({resource_id}) failed: {outcome.error}",
            outcome.function_name,
        ) from outcome.error

    if isinstance(outcome, FunctionFailure):
        output = outcome.payload.decode("utf-8", errors="replace")
        raise FunctionError(
            f"Lambda function ({outcome.function_name}) returned error: ({output})",
            outcome.function_name,
            outcome.function_error,
            outcome.payload,
        )

    return outcome.payload
