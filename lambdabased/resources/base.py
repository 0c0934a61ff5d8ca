"""Base resource classes for lambdabased."""

import logging
from typing import Any, Self

import pulumi
from pydantic import BaseModel, PrivateAttr

logger = logging.getLogger(__name__)


class Resource(BaseModel):
    """Base resource class - all resources inherit from this.

    Resources are declared in a project's main.py and compiled to Pulumi
    resources by ``to_pulumi()``.

    Resource Connections:
    Resources can declare that they must be applied after other resources via
    the .connect() method. Connections become Pulumi ``depends_on`` options and
    decide the order in which resources are compiled.

    Attributes:
        name: Unique identifier, also used as the Pulumi resource name
        description: Optional human-readable description
        _connection_resources: Private list of resources this one depends on
        _pulumi_resource: Private reference to the compiled Pulumi resource
    """

    name: str
    description: str | None = None

    _connection_resources: list["Resource"] = PrivateAttr(default_factory=list)
    _pulumi_resource: Any = PrivateAttr(default=None)

    def connect(self, *resources: "Resource") -> Self:
        """Declare that this resource depends on other resources.

        Args:
            *resources: Resources that must be applied first

        Returns:
            self, for chaining

        Raises:
            ValueError: If a resource is connected to itself

        Example:
            >>> schema = LambdaInvocationResource(name="schema", ...)
            >>> seed = LambdaInvocationResource(name="seed", ...).connect(schema)
        """
        for resource in resources:
            if resource is self:
                raise ValueError(f"Resource {self.name} cannot depend on itself")
            # Compare by identity
            if all(existing is not resource for existing in self._connection_resources):
                self._connection_resources.append(resource)
                logger.debug(f"Connected {self.name} → {resource.name}")
        return self

    @property
    def connections(self) -> list["Resource"]:
        """Resources this resource depends on."""
        return list(self._connection_resources)

    def _build_dependency_options(self) -> pulumi.ResourceOptions | None:
        """Build Pulumi ResourceOptions from connections.

        Only connected resources that were already compiled are included,
        which is why resources are compiled in dependency order.

        Returns:
            pulumi.ResourceOptions with depends_on set if connections exist,
            None otherwise
        """
        depends_on = [
            resource._pulumi_resource
            for resource in self._connection_resources
            if resource._pulumi_resource is not None
        ]

        if depends_on:
            return pulumi.ResourceOptions(depends_on=depends_on)
        return None

    def to_pulumi(self):
        """Create the Pulumi resource(s) for this resource.

        Subclasses must implement this method.
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement to_pulumi()"
        )
