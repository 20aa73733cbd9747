#!/usr/bin/env python3
"""
Main CLI entry point for object-configure.

Provides commands for:
- Showing the parameters configure() resolves for a class
- Checking a configuration file
- Naming the environment variable behind a setting
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import click
import yaml

from object_configure.config.logging_config import get_logger, setup_logging
from object_configure.config.settings import get_settings
from object_configure.config.source import ConfigSource
from object_configure.core.configurator import configure, env_var_name
from object_configure.core.exceptions import ObjectConfigureError
from object_configure.core.log_handle import LogHandle


logger = get_logger(__name__)


def get_version() -> str:
    """Get package version."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("object-configure")
    except PackageNotFoundError:
        from object_configure import __version__

        return __version__


def _parse_pairs(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Turn ``key=value`` strings into a dict; dotted keys nest."""
    from object_configure.config.merge import set_path

    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--param")
        set_path(params, key.split("."), value)
    return params


def _printable(value: Any) -> Any:
    """Replace objects YAML cannot represent with their repr."""
    if isinstance(value, dict):
        return {key: _printable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_printable(item) for item in value]
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    return repr(value)


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version and exit")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, version: bool, debug: bool) -> None:
    """object-configure - runtime configuration for Python classes."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    settings = get_settings()
    setup_logging(
        level="DEBUG" if debug else settings.logging.level,
        log_file=settings.logging.file,
        json_format=settings.logging.json_format,
        use_colors=settings.logging.color,
    )

    if version:
        click.echo(f"object-configure, version {get_version()}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("class_name")
@click.option("-f", "--config-file", help="Configuration file name or path")
@click.option("-d", "--config-dir", "config_dirs", multiple=True, help="Directory to search (repeatable)")
@click.option("-p", "--param", "pairs", multiple=True, help="Default parameter KEY=VALUE (repeatable)")
@click.pass_context
def show(
    ctx: click.Context,
    class_name: str,
    config_file: Optional[str],
    config_dirs: Tuple[str, ...],
    pairs: Tuple[str, ...],
) -> None:
    """Show the parameters configure() resolves for CLASS_NAME."""
    params = _parse_pairs(pairs)
    if config_file:
        params["config_file"] = config_file
    if config_dirs:
        params["config_dirs"] = list(config_dirs)

    try:
        resolved = configure(class_name, params)
    except ObjectConfigureError as e:
        logger.debug(f"configure() failed: {e.to_dict()}")
        click.echo(click.style(f"Configuration failed: {e}", fg="red"), err=True)
        ctx.exit(1)

    click.echo(yaml.safe_dump(_printable(resolved), default_flow_style=False, sort_keys=True))


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-s", "--section", help="Print only this section")
@click.pass_context
def check(ctx: click.Context, config_file: str, section: Optional[str]) -> None:
    """Load CONFIG_FILE and print its sections."""
    try:
        source = ConfigSource(config_file=config_file)
    except ObjectConfigureError as e:
        click.echo(click.style(f"Configuration invalid: {e}", fg="red"), err=True)
        ctx.exit(1)

    if section is None:
        click.echo(click.style(f"Configuration is valid: {config_file}", fg="green"))
        for name in source.sections:
            click.echo(f"  [{name}]")
        return

    if section not in source.sections:
        click.echo(f"No section {section} in {config_file}", err=True)
        ctx.exit(1)

    data = source.data[section]
    click.echo(yaml.safe_dump(_printable(data), default_flow_style=False, sort_keys=True))


@cli.command()
@click.argument("class_name")
@click.argument("keys", nargs=-1, required=True)
def env(class_name: str, keys: Tuple[str, ...]) -> None:
    """Print the environment variable that sets KEYS for CLASS_NAME."""
    click.echo(env_var_name(class_name, *keys))


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
