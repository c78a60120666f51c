"""Configuration commands for the glassfrog CLI."""

from cyclopts import App

from glassfrog.config import get_config

config_app = App(name="config", help="Manage configuration")


def _scope(global_: bool) -> str:
    return "global" if global_ else "local"


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Set a configuration setting.

    Args:
        key: Configuration key (api_key, base_url, caching, cache_dir)
        value: Configuration value
        global_: Write to the global config instead of the local one.
    """
    get_config(use_global=global_).set(key, value)
    shown = "********" if key == "api_key" else value
    print(f"Set {key} = {shown} ({_scope(global_)})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Unset a configuration setting."""
    get_config(use_global=global_).unset(key)
    print(f"Unset {key} ({_scope(global_)})")


@config_app.command
def get(key: str, global_: bool = False) -> None:
    """Print the value of a configuration setting."""
    value = get_config(use_global=global_).get(key)
    if value is None:
        print(f"{key} is not set")
    else:
        print(f"{key} = {value}")


@config_app.command(name="list")
def list_config(global_: bool = False) -> None:
    """List all configuration settings."""
    settings = get_config(use_global=global_).list()
    if not settings:
        print(f"No {_scope(global_)} configuration settings")
        return
    for key, value in settings.items():
        print(f"{key} = {'********' if key == 'api_key' else value}")
