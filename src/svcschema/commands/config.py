"""Config commands -- view and modify global configuration.

Provides the ``svcschema config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~svcschema.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from svcschema.exit_codes import EXIT_INVALID_USAGE
from svcschema.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        False, "--resolved", help="Show the effective config after env/project overrides."
    ),
) -> None:
    """Show current configuration.

    Example::

        svcschema config show
        svcschema config show --resolved --json
    """
    from svcschema.config import get_config_dir, load_global_config, resolve_config

    config = resolve_config() if resolved else load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'build.workers')."
    ),
    value: str = typer.Argument(help="Value to set (parsed as JSON when possible)."),
) -> None:
    """Set a configuration value.

    Example::

        svcschema config set build.workers 8
        svcschema config set source.spec_template 'https://example.com/{service}.json'
    """
    from svcschema.config import load_global_config, save_global_config, set_config_value
    from svcschema.exceptions import ConfigError

    try:
        new_config = set_config_value(load_global_config(), key, value)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults."""
    from svcschema.config import save_global_config
    from svcschema.models import GlobalConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
