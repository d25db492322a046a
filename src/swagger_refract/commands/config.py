"""Config commands -- view and modify the user configuration.

Provides the ``swagger-refract config`` sub-command group for reading,
updating, and resetting the global configuration file
(:class:`~swagger_refract.models.GlobalConfig`).  ``show`` prints the
*resolved* configuration, with project config and environment variables
applied on top of the stored file.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from swagger_refract.exit_codes import EXIT_INVALID_USAGE
from swagger_refract.output import error, info, print_result, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Example::

        swagger-refract config show
    """
    from swagger_refract.config import get_config_dir, resolve_config

    config = resolve_config()
    info(f"Config directory: {get_config_dir()}")
    print_result(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys.  Boolean fields accept
    ``true``/``false``, ``1``/``0`` and ``yes``/``no``.

    Raises:
        typer.Exit: With code 2 if the key is unknown or the value is
            rejected by validation.

    Example::

        swagger-refract config set generate_source_map true
        swagger-refract config set output.format json
    """
    from swagger_refract.config import load_global_config, save_global_config
    from swagger_refract.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=EXIT_INVALID_USAGE)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    if isinstance(target[final_key], bool):
        target[final_key] = value.lower() in ("true", "1", "yes")
    else:
        target[final_key] = value

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(new_config)
    success(f"Set {key} = {target[final_key]}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the stored configuration to defaults.

    Example::

        swagger-refract config reset --force
    """
    from swagger_refract.config import save_global_config
    from swagger_refract.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
