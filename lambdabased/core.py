"""
Lambdabased Core - Lambda-backed resources managed with Pulumi.

Apply Pipeline: Load resources → Order by connections → Deploy with Pulumi
Plan Pipeline: Load resources → Order by connections → Preview with Pulumi
Destroy Pipeline: Destroy recorded resources (running finalizers) with Pulumi
Invoke: Call a single function once, outside of any stack
"""

import importlib.util
import logging
from pathlib import Path
from typing import Any, Dict, List

from .client import AwsProviderConfig, create_lambda_client
from .errors import ConfigurationError
from .invocation import invoke_function, raise_for_outcome
from .models import LATEST_QUALIFIER, InvocationTarget
from .pulumi_compiler import PulumiCompiler

logger = logging.getLogger(__name__)


class LambdaBasedCore:
    """Main coordinator for the lambdabased pipeline."""

    def __init__(self, aws_config: AwsProviderConfig | None = None):
        """
        Initialize LambdaBasedCore.

        Args:
            aws_config: Credentials and region for direct invocations
                (overrides settings/.env)
        """
        self.aws_config = aws_config or AwsProviderConfig.from_settings()
        self.pulumi_compiler = PulumiCompiler()

        logger.info("LambdaBasedCore initialized")

    async def apply(self, main_file: Path, dry_run: bool = False) -> Dict[str, Any]:
        """
        Full pipeline: load → order → deploy with Pulumi.

        Args:
            main_file: Path to main.py file with resource definitions
            dry_run: If True, only preview without invoking anything

        Returns:
            Dict with execution results
        """
        logger.info(f"Starting lambdabased pipeline for: {main_file}")

        resources = self._load_resources(main_file)
        logger.info(f"Loaded {len(resources)} resources")

        resources = self._resolve_dependency_order(resources)
        logger.info("Resolved resource dependencies in deployment order")

        project_name = main_file.parent.name

        if dry_run:
            logger.info("Dry run - running preview only")
            result = await self.pulumi_compiler.preview(resources, project_name)
            return {
                "dry_run": True,
                "resources": len(resources),
                "preview": result,
            }

        result = await self.pulumi_compiler.apply(resources, project_name)
        logger.info("lambdabased pipeline complete")

        return result

    async def plan(self, main_file: Path) -> Dict[str, Any]:
        """
        Plan mode: preview Pulumi changes without invoking anything.

        Args:
            main_file: Path to main.py file

        Returns:
            Dict with planning information
        """
        return await self.apply(main_file, dry_run=True)

    async def destroy(self, main_file: Path) -> Dict[str, Any]:
        """
        Destroy pipeline: remove every recorded resource, running finalizers.

        Args:
            main_file: Path to main.py file (used to determine project name)

        Returns:
            Dict with execution results
        """
        logger.info(f"Starting lambdabased destroy pipeline for: {main_file}")
        return await self.pulumi_compiler.destroy(main_file.parent.name)

    def invoke(
        self, function_name: str, input: str, qualifier: str = LATEST_QUALIFIER
    ) -> Dict[str, Any]:
        """
        Invoke a function once and return its response.

        Args:
            function_name: Name or ARN of the function
            input: JSON payload
            qualifier: Version or alias (default: "$LATEST")

        Returns:
            Dict with the function, qualifier and decoded response

        Raises:
            ConfigurationError: If the payload is not valid JSON
            TransportError: If the call could not be completed
            FunctionError: If the function reported an error
        """
        try:
            target = InvocationTarget(
                function_name=function_name, qualifier=qualifier, input=input
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid invocation: {e}") from e

        client = create_lambda_client(self.aws_config)
        payload = raise_for_outcome(invoke_function(client, target))

        return {
            "function_name": function_name,
            "qualifier": qualifier,
            "result": payload.decode("utf-8", errors="replace"),
        }

    def _load_resources(self, main_file: Path) -> List[Any]:
        """
        Load resources from main.py by executing it.

        Args:
            main_file: Path to main.py

        Returns:
            List of Resource objects
        """
        if not main_file.exists():
            raise FileNotFoundError(f"File not found: {main_file}")

        spec = importlib.util.spec_from_file_location("user_main", main_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Could not load {main_file}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        # Collect all Resource instances from module globals
        from .resources.base import Resource

        resources = []
        for name, obj in vars(module).items():
            if isinstance(obj, Resource):
                resources.append(obj)
                logger.debug(f"Found resource: {name} ({type(obj).__name__})")

        if not resources:
            raise ValueError(f"No resources found in {main_file}")

        names = [resource.name for resource in resources]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate resource names: {', '.join(duplicates)}")

        return resources

    def _resolve_dependency_order(self, resources: List[Any]) -> List[Any]:
        """Return resources ordered so that connected resources come first.

        Resources that are only reachable through connections (not declared
        at module level) are included as well.

        Args:
            resources: List of Resource objects

        Returns:
            List of Resource objects in dependency order (dependencies first)

        Raises:
            ValueError: If a dependency cycle is detected

        Example:
            # Given: A depends on B, B depends on C
            # Returns: [C, B, A]
        """
        visited = set()
        rec_stack = set()
        result = []

        def visit(resource: Any, path: List[str]) -> None:
            """DFS that detects cycles and emits resources in post-order."""
            visited.add(id(resource))
            rec_stack.add(id(resource))
            path.append(resource.name)

            for connected in resource._connection_resources:
                if id(connected) in rec_stack:
                    cycle_path = path + [connected.name]
                    raise ValueError(
                        f"Dependency cycle detected: {' → '.join(cycle_path)}"
                    )
                if id(connected) not in visited:
                    visit(connected, path)

            rec_stack.remove(id(resource))
            path.pop()
            result.append(resource)

        for resource in resources:
            if id(resource) not in visited:
                visit(resource, [])

        logger.debug(f"Topological sort complete: {[r.name for r in result]}")

        return result
