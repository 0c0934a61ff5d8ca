"""
Lifecycle handler for Lambda-backed resources.

Each lifecycle event performs at most one invocation. Deciding whether an
event should happen at all (diffing desired against recorded state) is the
job of the orchestration host, see ``lambdabased.pulumi_providers``.
"""

import logging
import uuid

from .invocation import LambdaClient, invoke_function, raise_for_outcome
from .models import InvocationConfig, InvocationRecord

logger = logging.getLogger(__name__)


class LifecycleHandler:
    """Create, update, read and delete Lambda-backed resources."""

    def __init__(self, client: LambdaClient):
        """
        Initialize the handler.

        Args:
            client: Lambda client used for every invocation
        """
        self.client = client

    def create_or_update(
        self, config: InvocationConfig, record: InvocationRecord | None = None
    ) -> InvocationRecord:
        """
        Invoke the configured function and record its response.

        The function is always invoked with ``config.input``, the payload
        supplied by the caller, even when the recorded input is concealed.
        Nothing is recorded unless the invocation succeeds.

        Args:
            config: Declared configuration to apply
            record: Currently recorded state (None on first create)

        Returns:
            New record, with input and result blanked per the conceal flags

        Raises:
            TransportError: If the invocation could not be completed
            FunctionError: If the function reported an error
        """
        resource_id = record.id if record is not None else ""

        payload = raise_for_outcome(invoke_function(self.client, config), resource_id)
        result = payload.decode("utf-8", errors="replace")

        if not resource_id:
            resource_id = str(uuid.uuid4())
            logger.info(f"Created Lambda-backed resource {resource_id}")
        else:
            logger.info(f"Updated Lambda-backed resource {resource_id}")

        if not config.conceal_result:
            logger.debug(f"{resource_id} received response: {result}")

        return InvocationRecord(
            id=resource_id,
            function_name=config.function_name,
            qualifier=config.qualifier,
            triggers=dict(config.triggers),
            input="" if config.conceal_input else config.input,
            conceal_input=config.conceal_input,
            conceal_result=config.conceal_result,
            finalizer=config.finalizer,
            result="" if config.conceal_result else result,
        )

    def read(self, record: InvocationRecord) -> InvocationRecord:
        """Report recorded state; a function call has nothing to read back."""
        return record

    def delete(self, record: InvocationRecord) -> InvocationRecord:
        """
        Run the finalizer, if any, and forget the resource.

        Args:
            record: Recorded state, including the finalizer from the last apply

        Returns:
            The record with its ID cleared

        Raises:
            TransportError: If the finalizer invocation could not be completed
            FunctionError: If the finalizer reported an error
        """
        if record.finalizer is not None:
            payload = raise_for_outcome(
                invoke_function(self.client, record.finalizer), record.id
            )
            if not record.conceal_result:
                logger.info(
                    f"{record.id} received finalizer response: "
                    f"{payload.decode('utf-8', errors='replace')}"
                )
        else:
            logger.debug(f"{record.id} has no finalizer, nothing to invoke")

        return record.model_copy(update={"id": ""})
