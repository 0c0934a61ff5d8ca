"""
Pulumi Compiler - runs Lambda-backed resources through the Automation API.

Every operation works on one stack in a local file backend, so state lives
next to the project (``LB_PULUMI_STATE_DIR``) and no Pulumi account is needed.
Functions are only ever invoked by the dynamic provider during ``up`` and
``destroy``; ``preview`` reports what would be invoked.
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pulumi import automation as auto

from .settings import get_settings

logger = logging.getLogger(__name__)

# Preview operations that cause an invocation (finalizers run on delete)
INVOKING_OPS = ("create", "update", "delete")


def _log_output(message: str) -> None:
    logger.debug(message.rstrip())


class PulumiCompiler:
    """Runs up/preview/destroy for a list of resources against a local stack."""

    def __init__(self, project_dir: Path | None = None):
        settings = get_settings()
        self.project_dir = project_dir or Path.cwd()
        self.stack_name = settings.stack_name
        self.state_dir = Path(settings.pulumi_state_dir)
        if not self.state_dir.is_absolute():
            self.state_dir = self.project_dir / self.state_dir

        # The local backend encrypts secrets (concealed inputs) with this
        if "PULUMI_CONFIG_PASSPHRASE" not in os.environ:
            os.environ["PULUMI_CONFIG_PASSPHRASE"] = settings.pulumi_config_passphrase

        logger.debug(f"Pulumi state for stack {self.stack_name} in {self.state_dir}")

    def create_program(self, resources: list[Any]) -> Callable[[], None]:
        """
        Build the inline program that declares ``resources``.

        Resources are declared in list order, so dependencies must come first;
        ``depends_on`` only sees resources that were already declared.
        """

        def program() -> None:
            for resource in resources:
                try:
                    resource.to_pulumi()
                except Exception as e:
                    logger.error(f"Could not declare {resource.name}: {e}")
                    raise

        return program

    def _stack(
        self, project_name: str, program: Callable[[], None], existing: bool = False
    ) -> auto.Stack:
        self.state_dir.mkdir(parents=True, exist_ok=True)
        opts = auto.LocalWorkspaceOptions(
            work_dir=str(self.project_dir),
            project_settings=auto.ProjectSettings(
                name=project_name,
                runtime="python",
                backend=auto.ProjectBackend(url=self.state_dir.as_uri()),
            ),
        )
        select = auto.select_stack if existing else auto.create_or_select_stack
        return select(
            stack_name=self.stack_name,
            project_name=project_name,
            program=program,
            opts=opts,
        )

    async def apply(
        self, resources: list[Any], project_name: str = "lambdabased"
    ) -> dict[str, Any]:
        """
        Run ``pulumi up``: invoke new and changed resources, record responses.

        Returns:
            ``{"success", "summary", "outputs"}``, or ``{"success": False,
            "error", ...}`` when the stack or any invocation fails
        """
        logger.info(f"Applying {len(resources)} resources to {project_name}/{self.stack_name}")
        try:
            stack = self._stack(project_name, self.create_program(resources))
            up_result = stack.up(on_output=_log_output)
        except Exception as e:
            logger.error(f"Apply failed: {e}")
            return {"success": False, "error": str(e), "summary": None, "outputs": {}}

        changes = up_result.summary.resource_changes or {}
        logger.info(
            f"Apply {up_result.summary.result}: "
            f"+{changes.get('create', 0)} ~{changes.get('update', 0)} "
            f"-{changes.get('delete', 0)}"
        )
        return {
            "success": True,
            "summary": {"result": up_result.summary.result, "resource_changes": changes},
            "outputs": {key: output.value for key, output in up_result.outputs.items()},
        }

    async def preview(
        self, resources: list[Any], project_name: str = "lambdabased"
    ) -> dict[str, Any]:
        """Run ``pulumi preview``; nothing is invoked."""
        try:
            stack = self._stack(project_name, self.create_program(resources))
            change_summary = stack.preview(on_output=_log_output).change_summary
        except Exception as e:
            logger.error(f"Preview failed: {e}")
            return {"success": False, "error": str(e), "summary": None}

        total_changes = sum(change_summary.get(op, 0) for op in INVOKING_OPS)
        logger.info(f"Preview: {total_changes} resources would invoke a function")
        return {
            "success": True,
            "summary": {"change_summary": change_summary, "total_changes": total_changes},
        }

    async def destroy(self, project_name: str = "lambdabased") -> dict[str, Any]:
        """
        Run ``pulumi destroy`` on the existing stack.

        Each recorded finalizer runs once. A resource whose finalizer fails
        stays in the stack and is retried by the next destroy.
        """
        logger.info(f"Destroying {project_name}/{self.stack_name}")
        try:
            # Only recorded state is needed
            stack = self._stack(project_name, lambda: None, existing=True)
            summary = stack.destroy(on_output=_log_output).summary
        except Exception as e:
            logger.error(f"Destroy failed: {e}")
            return {"success": False, "error": str(e), "summary": None}

        logger.info(f"Destroy {summary.result}")
        return {
            "success": True,
            "summary": {
                "result": summary.result,
                "resource_changes": summary.resource_changes or {},
            },
        }
