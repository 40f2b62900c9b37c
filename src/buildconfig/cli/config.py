import click

from buildconfig.cli._configuration import (
    get_nested_value,
    load_config,
    save_config,
    set_nested_value,
)

_KNOWN_KEYS = (
    "cluster.api_url",
    "cluster.token",
    "cluster.namespace",
    "cluster.api_version",
    "cluster.insecure",
)


@click.group()
def config():
    """Manage buildconfig configuration."""
    pass


@config.command()
@click.argument("key")
@click.argument("value")
def set(key: str, value: str):
    """Set a configuration value."""
    if key not in _KNOWN_KEYS:
        raise click.BadParameter(
            f"unknown key '{key}'. Valid keys: {', '.join(_KNOWN_KEYS)}",
            param_hint="KEY",
        )
    config_data = load_config()
    set_nested_value(config_data, key, value)
    save_config(config_data)
    if key == "cluster.token":
        click.echo(f"Set {key}")
    else:
        click.echo(f"Set {key} = {value}")


@config.command()
@click.argument("key")
def get(key: str):
    """Get a configuration value."""
    value = get_nested_value(load_config(), key)
    if value is None:
        raise click.ClickException(f"{key} is not set")
    click.echo(value)
