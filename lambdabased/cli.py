"""
Lambdabased CLI - Lambda-backed resources managed with Pulumi.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from .client import AwsProviderConfig
from .core import LambdaBasedCore
from .errors import FunctionError
from .models import LATEST_QUALIFIER
from .settings import get_settings

# Setup
app = typer.Typer(
    name="lambdabased",
    help="Manage resources whose state is the result of a Lambda invocation",
    add_completion=False,
)
console = Console()


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging on module import
configure_logging()


def _get_main_file() -> Path:
    """Check for main.py in current directory and return Path.

    Returns:
        Path to main.py

    Raises:
        SystemExit: If main.py is not found
    """
    main_file = Path.cwd() / "main.py"
    if not main_file.exists():
        console.print(
            "[bold red]✗ Error:[/bold red] No main.py found in current directory"
        )
        console.print(
            "[dim]Hint: cd into your project directory that contains main.py[/dim]"
        )
        raise typer.Exit(code=1)
    return main_file


def _create_command_panel(title: str, color: str) -> Panel:
    """Create a Rich Panel for command display.

    Args:
        title: Command title (e.g., "Lambdabased Apply")
        color: Border color (e.g., "blue", "cyan", "red")

    Returns:
        Formatted Rich Panel
    """
    settings = get_settings()
    return Panel.fit(
        f"[bold {color}]{title}[/bold {color}]\n"
        f"Directory: {Path.cwd().name}\n"
        f"Stack: {settings.stack_name}",
        border_style=color,
    )


def _initialize_core(
    profile: str | None = None, region: str | None = None
) -> LambdaBasedCore:
    """Initialize LambdaBasedCore with optional AWS overrides.

    Args:
        profile: Optional AWS profile override
        region: Optional AWS region override

    Returns:
        Configured LambdaBasedCore instance
    """
    aws_config = AwsProviderConfig.from_settings()
    if profile:
        aws_config.profile = profile
    if region:
        aws_config.region = region
    return LambdaBasedCore(aws_config=aws_config)


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Handle command errors with appropriate formatting.

    Args:
        e: Exception that occurred
        command_type: Type of command (for error message context)

    Raises:
        SystemExit: Always exits with code 1
    """
    if isinstance(e, FunctionError):
        console.print(
            f"\n[bold red]✗ Function {e.function_name} failed "
            f"({e.function_error})[/bold red]"
        )
        console.print(f"[dim]{e}[/dim]")
    else:
        console.print(
            f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {e}"
        )

    raise typer.Exit(code=1)


def _run_command(
    command_name: str,
    panel_title: str,
    panel_color: str,
    core_method: str,
    success_handler,
    **kwargs,
):
    """Execute a lambdabased command with common setup and error handling.

    Args:
        command_name: Command name for error messages (e.g., "apply", "plan")
        panel_title: Title for the command panel (e.g., "Lambdabased Apply")
        panel_color: Border color for the panel (e.g., "blue", "cyan")
        core_method: Name of the LambdaBasedCore method to call (e.g., "apply")
        success_handler: Callable that takes result dict and prints success output
        **kwargs: Additional keyword arguments to pass to the core method
    """
    main_file = _get_main_file()
    console.print(_create_command_panel(panel_title, panel_color))

    try:
        core = _initialize_core()
        method = getattr(core, core_method)
        result = asyncio.run(method(main_file, **kwargs))
    except Exception as e:
        _handle_command_error(e, command_name)

    success_handler(result)
    if result.get("success") is False:
        raise typer.Exit(code=1)


@app.command()
def apply():
    """Apply resources: invoke functions for new or changed resources."""

    def _handle_success(result):
        if result.get("success"):
            console.print("\n[bold green]✓ Deployment successful![/bold green]")

            if result.get("summary"):
                summary = result["summary"]
                console.print(
                    f"\n[dim]Result: {summary.get('result', 'unknown')}[/dim]"
                )

                changes = summary.get("resource_changes", {})
                if changes:
                    console.print(
                        f"[dim]Resources: +{changes.get('create', 0)} ~{changes.get('update', 0)} -{changes.get('delete', 0)}[/dim]"
                    )

            if result.get("outputs"):
                console.print("\n[dim]Outputs:[/dim]")
                for key, value in result["outputs"].items():
                    console.print(f"  {key}: {value}")
        else:
            console.print(
                f"\n[bold red]✗ Deployment failed:[/bold red] {result.get('error', 'Unknown error')}"
            )

    _run_command(
        command_name="deployment",
        panel_title="Lambdabased Apply",
        panel_color="blue",
        core_method="apply",
        success_handler=_handle_success,
    )


@app.command()
def plan():
    """Preview which functions would be invoked, without invoking them."""

    def _handle_success(result):
        console.print("\n[bold]Plan Summary:[/bold]")
        console.print(f"  Resources: {result['resources']}")

        preview = result.get("preview", {})
        if preview.get("success"):
            summary = preview.get("summary", {})
            change_summary = summary.get("change_summary", {})

            console.print("\n[bold]Planned Changes (preview only):[/bold]")
            console.print(f"  Would create: {change_summary.get('create', 0)}")
            console.print(f"  Would update: {change_summary.get('update', 0)}")
            console.print(f"  Would delete: {change_summary.get('delete', 0)}")
        elif preview.get("error"):
            console.print(
                f"\n[yellow]⚠ Preview error:[/yellow] {preview['error']}"
            )

        console.print(
            "\n[dim]Run 'lambdabased apply' to invoke these resources.[/dim]"
        )

    _run_command(
        command_name="plan",
        panel_title="Lambdabased Plan",
        panel_color="cyan",
        core_method="plan",
        success_handler=_handle_success,
    )


@app.command()
def destroy():
    """Destroy resources: run finalizers and drop recorded state."""

    def _handle_success(result):
        if result.get("success"):
            console.print(
                "\n[bold green]✓ Resources destroyed successfully![/bold green]"
            )

            if result.get("summary"):
                summary = result["summary"]
                console.print(
                    f"\n[dim]Result: {summary.get('result', 'unknown')}[/dim]"
                )
        else:
            console.print(
                f"\n[bold red]✗ Destroy failed:[/bold red] {result.get('error', 'Unknown error')}"
            )

    _run_command(
        command_name="destroy",
        panel_title="Lambdabased Destroy",
        panel_color="red",
        core_method="destroy",
        success_handler=_handle_success,
    )


@app.command()
def invoke(
    function_name: str = typer.Argument(..., help="Name or ARN of the function"),
    input: str = typer.Option("{}", "--input", "-i", help="JSON payload"),
    qualifier: str = typer.Option(
        LATEST_QUALIFIER, "--qualifier", "-q", help="Version or alias"
    ),
    profile: str = typer.Option(
        None, "--profile", help="AWS profile (overrides .env)"
    ),
    region: str = typer.Option(None, "--region", help="AWS region (overrides .env)"),
):
    """Invoke a function once and print its response."""
    try:
        core = _initialize_core(profile, region)
        result = core.invoke(function_name, input, qualifier)
    except Exception as e:
        _handle_command_error(e, "invoke")

    console.print(
        f"[bold green]✓ {result['function_name']}:{result['qualifier']}[/bold green]"
    )
    console.print(result["result"], markup=False, highlight=False)


@app.command()
def version():
    """Show lambdabased version."""
    from . import __version__

    console.print(f"lambdabased version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
