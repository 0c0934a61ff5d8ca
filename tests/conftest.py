"""
Pytest configuration and fixtures for lambdabased tests.
"""

import io
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lambdabased.settings import reload_settings


def lambda_response(payload: bytes = b"result-val", function_error: str | None = None) -> dict:
    """Build a response shaped like boto3's Lambda invoke() result."""
    response = {
        "StatusCode": 200,
        "ExecutedVersion": "$LATEST",
        "Payload": io.BytesIO(payload),
    }
    if function_error is not None:
        response["FunctionError"] = function_error
    return response


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def lambda_client():
    """Mock Lambda client answering every invocation with "result-val"."""
    client = MagicMock()
    client.invoke.side_effect = lambda **kwargs: lambda_response()
    return client


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Start every test from default settings."""
    for var in (
        "LB_AWS_PROFILE",
        "LB_AWS_REGION",
        "LB_ASSUME_ROLE_ARN",
        "LB_STACK_NAME",
        "LB_PULUMI_STATE_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    reload_settings()
    yield
    reload_settings()
