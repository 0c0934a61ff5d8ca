"""Pulumi dynamic provider for Lambda-backed resources.

This module provides a Pulumi dynamic provider whose resources are the side
effect of invoking a Lambda function: the function is called on create and
whenever the declared configuration changes, and an optional finalizer
function is called on delete.
"""

import logging
from typing import Any

import pulumi
from pulumi import Input, Output
from pulumi.dynamic import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    ResourceProvider,
    UpdateResult,
)
from pydantic import ValidationError

from ..client import AwsProviderConfig, create_lambda_client
from ..handler import LifecycleHandler
from ..invocation import LambdaClient
from ..models import LATEST_QUALIFIER, InvocationConfig, InvocationRecord

logger = logging.getLogger(__name__)

# Fields whose change re-invokes the function. ``input`` is handled apart
# because its recorded copy is blank while concealed.
TRACKED_FIELDS = (
    "function_name",
    "qualifier",
    "triggers",
    "conceal_input",
    "conceal_result",
    "finalizer",
)

_DEFAULTS: dict[str, Any] = {
    "qualifier": LATEST_QUALIFIER,
    "triggers": {},
    "conceal_input": False,
    "conceal_result": False,
    "finalizer": None,
    "input": "",
}


def _prop(props: dict[str, Any], field: str) -> Any:
    value = props.get(field)
    if value is None:
        return _DEFAULTS.get(field)
    return value


class LambdaInvocationInputs:
    """Input properties for LambdaInvocation resource.

    Attributes:
        function_name: Name or ARN of the function invoked on create/update
        input: JSON payload sent to the function
        qualifier: Version or alias of the function
        triggers: Values whose change alone forces a new invocation
        conceal_input: Blank the recorded input after invoking
        conceal_result: Blank the recorded result after invoking
        finalizer: Function, qualifier and input invoked on delete
    """

    def __init__(
        self,
        function_name: Input[str],
        input: Input[str],
        qualifier: Input[str] = LATEST_QUALIFIER,
        triggers: Input[dict[str, str]] | None = None,
        conceal_input: Input[bool] = False,
        conceal_result: Input[bool] = False,
        finalizer: Input[dict[str, Any]] | None = None,
    ):
        """Initialize LambdaInvocationInputs.

        Args:
            function_name: Function invoked on create/update
            input: JSON payload
            qualifier: Version or alias (default: "$LATEST")
            triggers: Re-invocation triggers (optional)
            conceal_input: Blank the recorded input (default: False)
            conceal_result: Blank the recorded result (default: False)
            finalizer: Finalizer function_name/qualifier/input (optional)
        """
        self.function_name = function_name
        self.input = input
        self.qualifier = qualifier
        self.triggers = triggers or {}
        self.conceal_input = conceal_input
        self.conceal_result = conceal_result
        self.finalizer = finalizer


class LambdaInvocationProvider(ResourceProvider):
    """Pulumi dynamic provider for Lambda-backed resources.

    The provider owns the comparison between declared and recorded state;
    the lifecycle handler it delegates to always invokes when called.
    """

    def __init__(
        self,
        aws_config: AwsProviderConfig | None = None,
        client: LambdaClient | None = None,
    ):
        """Initialize the provider.

        Args:
            aws_config: Credentials and region (from settings if None)
            client: Lambda client to use instead of building one
        """
        super().__init__()
        self.aws_config = aws_config
        self._client = client

    def _handler(self) -> LifecycleHandler:
        if self._client is None:
            self._client = create_lambda_client(
                self.aws_config or AwsProviderConfig.from_settings()
            )
        return LifecycleHandler(self._client)

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        """Validate the declared configuration before anything is invoked.

        Args:
            _olds: Previous inputs
            news: New inputs

        Returns:
            CheckResult with normalized inputs or per-property failures
        """
        try:
            config = InvocationConfig.model_validate(news)
        except ValidationError as e:
            failures = [
                CheckFailure(
                    ".".join(str(part) for part in error["loc"]), error["msg"]
                )
                for error in e.errors()
            ]
            return CheckResult(news, failures)

        return CheckResult({**news, **config.model_dump()}, [])

    def diff(
        self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]
    ) -> DiffResult:
        """Compare declared configuration with recorded state.

        Args:
            _id: Resource ID
            _olds: Recorded outputs of the last successful apply
            _news: Declared inputs

        Returns:
            DiffResult; changes are applied in place, never by replacement
        """
        changes = [
            field
            for field in TRACKED_FIELDS
            if _prop(_olds, field) != _prop(_news, field)
        ]

        # A concealed input is recorded as "" so it cannot be compared
        if not _prop(_news, "conceal_input") and _prop(_olds, "input") != _prop(
            _news, "input"
        ):
            changes.append("input")

        if changes:
            logger.debug(f"{_id} changed: {', '.join(changes)}")

        return DiffResult(
            changes=len(changes) > 0,
            replaces=[],
            stables=[],
            delete_before_replace=False,
        )

    def create(self, props: dict[str, Any]) -> CreateResult:
        """Invoke the function for a new resource.

        Args:
            props: Declared inputs

        Returns:
            CreateResult with a fresh ID and the recorded state as outputs

        Raises:
            ConfigurationError: If the inputs are invalid
            InvocationError: If the invocation fails
        """
        config = InvocationConfig.from_props(props)
        record = self._handler().create_or_update(config)
        return CreateResult(id_=record.id, outs=record.to_outputs())

    def update(
        self, _id: str, _olds: dict[str, Any], _news: dict[str, Any]
    ) -> UpdateResult:
        """Invoke the function again with the new configuration.

        Args:
            _id: Resource ID
            _olds: Recorded outputs
            _news: Declared inputs

        Returns:
            UpdateResult with the new recorded state
        """
        config = InvocationConfig.from_props(_news)
        record = InvocationRecord.from_outputs(_id, _olds)
        updated = self._handler().create_or_update(config, record)
        return UpdateResult(outs=updated.to_outputs())

    def read(self, id_: str, props: dict[str, Any]) -> ReadResult:
        """Return recorded state unchanged.

        Args:
            id_: Resource ID
            props: Recorded outputs

        Returns:
            ReadResult with the same ID and outputs
        """
        record = self._handler().read(InvocationRecord.from_outputs(id_, props))
        return ReadResult(id_=record.id, outs=record.to_outputs())

    def delete(self, _id: str, _props: dict[str, Any]) -> None:
        """Invoke the recorded finalizer, if any.

        An exception leaves the resource in state so the next run retries.

        Args:
            _id: Resource ID
            _props: Recorded outputs
        """
        record = InvocationRecord.from_outputs(_id, _props)
        self._handler().delete(record)


class LambdaInvocation(pulumi.dynamic.Resource):
    """Pulumi resource whose state is the response of a Lambda invocation.

    Attributes:
        function_name: Function invoked on create/update
        qualifier: Version or alias of the function
        triggers: Re-invocation triggers
        input: Recorded input (empty when concealed)
        conceal_input: Whether the input is concealed
        conceal_result: Whether the result is concealed
        finalizer: Finalizer invoked on delete
        result: Recorded function response (empty when concealed)
    """

    function_name: Output[str]
    qualifier: Output[str]
    triggers: Output[dict[str, str]]
    input: Output[str]
    conceal_input: Output[bool]
    conceal_result: Output[bool]
    finalizer: Output[dict[str, Any]]
    result: Output[str]

    def __init__(
        self,
        resource_name: str,
        inputs: LambdaInvocationInputs,
        aws_config: AwsProviderConfig | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ):
        """Initialize LambdaInvocation resource.

        Args:
            resource_name: Pulumi resource name
            inputs: Declared configuration
            aws_config: Credentials and region (from settings if None)
            opts: Pulumi resource options
        """
        # The engine keeps checked inputs in its checkpoint; a concealed
        # payload is stored there as a secret
        payload = inputs.input
        if inputs.conceal_input is True:
            payload = pulumi.Output.secret(payload)

        props = {
            "function_name": inputs.function_name,
            "qualifier": inputs.qualifier,
            "triggers": inputs.triggers,
            "input": payload,
            "conceal_input": inputs.conceal_input,
            "conceal_result": inputs.conceal_result,
            "finalizer": inputs.finalizer,
            "result": None,  # Computed on create/update
        }

        super().__init__(
            LambdaInvocationProvider(aws_config),
            resource_name,
            props,
            opts,
        )
