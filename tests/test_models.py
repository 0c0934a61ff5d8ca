"""Tests for configuration and state models."""

import pytest
from pydantic import ValidationError

from lambdabased.errors import ConfigurationError
from lambdabased.models import (
    LATEST_QUALIFIER,
    FinalizerConfig,
    InvocationConfig,
    InvocationRecord,
)


def test_config_defaults():
    """Only function_name and input are required."""
    config = InvocationConfig(function_name="f1", input='{"param":"v1"}')

    assert config.qualifier == LATEST_QUALIFIER
    assert config.triggers == {}
    assert config.conceal_input is False
    assert config.conceal_result is False
    assert config.finalizer is None


@pytest.mark.parametrize("payload", ['{"param":"v1"}', "[]", '"text"', "42", "null"])
def test_config_accepts_any_json_document(payload):
    config = InvocationConfig(function_name="f1", input=payload)
    assert config.input == payload


@pytest.mark.parametrize("payload", ["", "{", "not json", "{'single': 'quotes'}"])
def test_config_rejects_invalid_json(payload):
    with pytest.raises(ValidationError, match="not valid JSON"):
        InvocationConfig(function_name="f1", input=payload)


def test_finalizer_input_must_be_json():
    with pytest.raises(ValidationError, match="not valid JSON"):
        InvocationConfig(
            function_name="f1",
            input="{}",
            finalizer={"function_name": "f2", "input": "nope"},
        )


def test_finalizer_defaults_to_latest():
    finalizer = FinalizerConfig(function_name="f2", input="{}")
    assert finalizer.qualifier == LATEST_QUALIFIER


def test_empty_function_name_rejected():
    with pytest.raises(ValidationError):
        InvocationConfig(function_name="", input="{}")


def test_from_props_wraps_validation_errors():
    """Invalid properties surface as a ConfigurationError."""
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        InvocationConfig.from_props({"function_name": "f1", "input": "{"})


def test_from_props_ignores_host_keys():
    """Extra keys added by the host (and null triggers) are tolerated."""
    config = InvocationConfig.from_props(
        {
            "function_name": "f1",
            "input": "{}",
            "triggers": None,
            "result": None,
            "__provider": "serialized",
        }
    )
    assert config.triggers == {}


def test_record_outputs_exclude_id():
    record = InvocationRecord(
        id="abc",
        function_name="f1",
        input='{"param":"v1"}',
        result="result-val",
        finalizer=FinalizerConfig(function_name="f2", input="{}"),
    )

    outputs = record.to_outputs()

    assert "id" not in outputs
    assert outputs["result"] == "result-val"
    assert outputs["finalizer"] == {
        "function_name": "f2",
        "qualifier": LATEST_QUALIFIER,
        "input": "{}",
    }


def test_record_from_outputs_restores_state():
    outputs = {
        "function_name": "f1",
        "qualifier": "live",
        "triggers": {"k": "v"},
        "input": "",
        "conceal_input": True,
        "conceal_result": False,
        "finalizer": None,
        "result": None,
    }

    record = InvocationRecord.from_outputs("abc", outputs)

    assert record.id == "abc"
    assert record.exists
    assert record.qualifier == "live"
    assert record.input == ""
    assert record.result == ""
    assert record.triggers == {"k": "v"}


def test_record_accepts_concealed_input():
    """A recorded input may be blank even though configured inputs may not."""
    record = InvocationRecord(function_name="f1", input="")
    assert record.input == ""
    assert not record.exists


def test_trigger_values_coerced_to_strings():
    """Trigger maps hold strings; numbers and booleans are converted."""
    config = InvocationConfig.from_props(
        {
            "function_name": "f1",
            "input": "{}",
            "triggers": {"rev": 3, "ratio": 0.5, "enabled": False, "tag": "a"},
        }
    )

    assert config.triggers == {"rev": "3", "ratio": "0.5", "enabled": "false", "tag": "a"}


def test_record_trigger_values_coerced_to_strings():
    record = InvocationRecord.from_outputs("abc", {"function_name": "f1", "triggers": {"rev": 3}})
    assert record.triggers == {"rev": "3"}


def test_non_mapping_triggers_rejected():
    with pytest.raises(ConfigurationError):
        InvocationConfig.from_props({"function_name": "f1", "input": "{}", "triggers": ["a"]})
