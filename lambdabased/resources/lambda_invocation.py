"""Lambda invocation resource - state is the response of a function call."""

import json
from typing import Any

from pydantic import Field, field_validator

from ..client import AwsProviderConfig
from ..models import (
    LATEST_QUALIFIER,
    FinalizerConfig,
    InvocationConfig,
    coerce_triggers,
)
from .base import Resource


def _to_json(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return value


class LambdaInvocationResource(Resource):
    """Invokes a Lambda function on create and whenever its configuration changes.

    Basic usage:
        LambdaInvocationResource(
            name="seed-users",
            function_name="seed-users",
            input={"table": "users"},
        )

    With a finalizer run on destroy:
        LambdaInvocationResource(
            name="register-tenant",
            function_name="tenant-register",
            input={"tenant": "acme"},
            triggers={"release": "2024-06"},
            conceal_input=True,
            finalizer=FinalizerConfig(
                function_name="tenant-unregister",
                input='{"tenant": "acme"}',
            ),
        )
    """

    function_name: str = Field(
        ...,
        min_length=1,
        description="Name or ARN of the function invoked on create/update",
    )
    qualifier: str = Field(
        LATEST_QUALIFIER,
        description="Version or alias to invoke",
    )
    input: str = Field(
        ...,
        description="JSON payload - a dict or list is serialized for you",
    )
    triggers: dict[str, str] = Field(
        default_factory=dict,
        description="Values whose change alone forces a new invocation",
    )
    conceal_input: bool = False
    conceal_result: bool = False
    finalizer: FinalizerConfig | None = None
    aws: AwsProviderConfig | None = Field(
        None,
        description="Credentials and region, overriding settings",
    )

    @field_validator("input", mode="before")
    @classmethod
    def serialize_input(cls, value: Any) -> Any:
        return _to_json(value)

    @field_validator("triggers", mode="before")
    @classmethod
    def stringify_triggers(cls, value: Any) -> Any:
        return coerce_triggers(value)

    @field_validator("finalizer", mode="before")
    @classmethod
    def serialize_finalizer_input(cls, value: Any) -> Any:
        if isinstance(value, dict) and "input" in value:
            return {**value, "input": _to_json(value["input"])}
        return value

    def to_config(self) -> InvocationConfig:
        """Validated configuration handed to the provider.

        Raises:
            ConfigurationError: If the input is not valid JSON
        """
        return InvocationConfig.from_props(
            self.model_dump(exclude={"name", "description", "aws"})
        )

    def to_pulumi(self):
        """Create Pulumi LambdaInvocation resource using the dynamic provider.

        Returns:
            Pulumi LambdaInvocation resource
        """
        from lambdabased.pulumi_providers import (
            LambdaInvocation,
            LambdaInvocationInputs,
        )

        config = self.to_config()

        inputs = LambdaInvocationInputs(
            function_name=config.function_name,
            input=config.input,
            qualifier=config.qualifier,
            triggers=config.triggers,
            conceal_input=config.conceal_input,
            conceal_result=config.conceal_result,
            finalizer=config.finalizer.model_dump() if config.finalizer else None,
        )

        invocation = LambdaInvocation(
            self.name,
            inputs,
            aws_config=self.aws,
            opts=self._build_dependency_options(),
        )

        # Store for dependency tracking
        self._pulumi_resource = invocation

        return invocation
