"""
Configuration and state models for Lambda-backed resources.

The declared configuration (what the user wants sent) and the recorded state
(what was persisted after the last successful invocation) are kept as separate
models. A concealed payload is blank in the record but always present in the
configuration handed to the next invocation.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

LATEST_QUALIFIER = "$LATEST"


def coerce_triggers(value: Any) -> Any:
    """Trigger maps hold strings; scalars are converted the way HCL converts them."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        return value
    coerced = {}
    for key, item in value.items():
        if isinstance(item, bool):
            item = "true" if item else "false"
        elif isinstance(item, (int, float)):
            item = str(item)
        coerced[key] = item
    return coerced


class InvocationTarget(BaseModel):
    """A function to call and the JSON payload to send it."""

    model_config = ConfigDict(extra="ignore")

    function_name: str = Field(
        ...,
        min_length=1,
        description="Name or ARN of the Lambda function",
        examples=["my-function", "arn:aws:lambda:us-east-1:123456789012:function:my-function"],
    )
    qualifier: str = Field(
        LATEST_QUALIFIER,
        description="Version or alias to invoke",
        examples=["$LATEST", "3", "live"],
    )
    input: str = Field(
        ...,
        description="JSON document sent as the invocation payload",
    )

    @field_validator("input")
    @classmethod
    def validate_input_is_json(cls, value: str) -> str:
        """Payloads must be valid JSON text."""
        try:
            json.loads(value)
        except ValueError as e:
            raise ValueError(f"input is not valid JSON: {e}") from e
        return value


class FinalizerConfig(InvocationTarget):
    """Function invoked once when the resource is destroyed."""


class InvocationConfig(InvocationTarget):
    """Declared configuration of a Lambda-backed resource."""

    triggers: dict[str, str] = Field(
        default_factory=dict,
        description="Arbitrary values whose change alone forces a new invocation",
    )
    conceal_input: bool = Field(
        False,
        description="Do not keep the input in state after the invocation",
    )
    conceal_result: bool = Field(
        False,
        description="Do not keep the function response in state",
    )
    finalizer: FinalizerConfig | None = None

    @field_validator("triggers", mode="before")
    @classmethod
    def stringify_triggers(cls, value: Any) -> Any:
        return coerce_triggers(value)

    @classmethod
    def from_props(cls, props: dict[str, Any]) -> "InvocationConfig":
        """Build a configuration from raw resource properties.

        Args:
            props: Property dict as handed over by the orchestration host

        Returns:
            Validated InvocationConfig

        Raises:
            ConfigurationError: If any property is missing or invalid
        """
        try:
            return cls.model_validate(props)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Lambda invocation configuration: {e}") from e


class InvocationRecord(BaseModel):
    """State recorded for a Lambda-backed resource after a successful apply.

    ``input`` and ``result`` hold the values after concealment, so either can
    be empty even though the function was called with a real payload.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    function_name: str
    qualifier: str = LATEST_QUALIFIER
    triggers: dict[str, str] = Field(default_factory=dict)
    input: str = ""
    conceal_input: bool = False
    conceal_result: bool = False
    finalizer: FinalizerConfig | None = None
    result: str = ""

    @field_validator("triggers", mode="before")
    @classmethod
    def stringify_triggers(cls, value: Any) -> Any:
        return coerce_triggers(value)

    @field_validator("input", "result", mode="before")
    @classmethod
    def default_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def exists(self) -> bool:
        return bool(self.id)

    def to_outputs(self) -> dict[str, Any]:
        """Render the record as resource outputs (everything but the ID)."""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_outputs(cls, id: str, outputs: dict[str, Any]) -> "InvocationRecord":
        """Rebuild a record from persisted resource outputs.

        Args:
            id: Resource ID assigned on create
            outputs: Outputs recorded by the last successful apply

        Returns:
            InvocationRecord
        """
        return cls.model_validate({**outputs, "id": id})
