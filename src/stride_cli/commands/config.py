"""Configuration management commands."""

import typer

from stride_cli.services.config_service import get_config_service
from stride_cli.utils.logger import log_file_path
from stride_cli.utils.ui.console import get_console
from stride_cli.utils.ui.formatters import format_error, format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands", no_args_is_help=True)
console = get_console()


def _parse_value(value: str) -> str | int | bool | None:
    """Convert a command-line string to the most likely config type."""
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null"):
        return None
    if value.isdigit():
        return int(value)
    return value


@app.command("show")
@command_wrapper
def show_config(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format (pretty, json, yaml)"),
) -> None:
    """Show the current configuration."""
    config_service = get_config_service()
    config = config_service.config.model_dump()
    if output == "pretty":
        flat = {
            f"{section}.{key}": value
            for section, values in config.items()
            for key, value in values.items()
        }
        flat["config_file"] = str(config_service.config_path)
        flat["data_dir"] = str(config_service.get_data_dir())
        flat["log_file"] = str(log_file_path())
        format_output(flat, output)
    else:
        format_output(config, output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., sync.rollback)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found") from e
    console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., sync.rollback)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value = _parse_value(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError as e:
        raise AppError(f"Configuration key '{key}' not found") from e
    except ValueError as e:
        raise AppError(str(e)) from e
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes and not typer.confirm("Are you sure you want to reset the configuration?"):
        format_error("Cancelled")
        raise typer.Exit(0)
    get_config_service().reset_config()
    format_success("Configuration reset to defaults")
