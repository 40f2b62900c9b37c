"""Error handling utilities for the CLI."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

import click

from buildconfig.exceptions import (
    BuildConfigError,
    BuildConfigExistsError,
    BuildConfigNotFoundError,
    ClusterConnectionError,
    RemoteAPIError,
)

if TYPE_CHECKING:
    from buildconfig.cli._common import Context


def handle_build_config_error(
    e: BuildConfigError, ctx: Context, operation: str = "request"
) -> None:
    """
    Report an SDK error with a user-friendly message and abort the command.

    Args:
        e: The error raised by the SDK
        ctx: The CLI context
        operation: Description of what operation failed (e.g., "creating BuildConfig")
    """
    if isinstance(e, RemoteAPIError) and e.status_code == 401:
        click.echo("Authentication failed: the cluster token is invalid or expired.", err=True)
        click.echo("Set a new one with --token or OPENSHIFT_TOKEN.", err=True)
    elif isinstance(e, RemoteAPIError) and e.status_code == 403:
        click.echo(f"Permission denied while {operation}.", err=True)
        click.echo(f"  Namespace: {ctx.namespace}", err=True)
        click.echo(f"  API URL: {ctx.api_url}", err=True)
    elif isinstance(e, ClusterConnectionError):
        click.echo(f"Could not reach the cluster at {ctx.api_url}.", err=True)
    elif not isinstance(e, (BuildConfigNotFoundError, BuildConfigExistsError)):
        # Not found and already exists errors are self-explanatory.
        click.echo(f"Error while {operation}.", err=True)

    if ctx.debug:
        click.echo("", err=True)
        click.echo("Stack trace:", err=True)
        traceback.print_exception(type(e), e, e.__traceback__, file=sys.stderr)
    else:
        click.echo(
            "For technical details and stack trace, run with --debug or set BUILDCONFIG_DEBUG=1",
            err=True,
        )

    raise click.ClickException(str(e))
