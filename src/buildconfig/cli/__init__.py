import logging

import click

from buildconfig.utils.logging import (
    configure_development_mode_logging,
    configure_logging_early,
    configure_production_mode_logging,
)

from . import _common, build_configs, config


@click.group(
    cls=_common.AliasedGroup,
    epilog="""
\b
Authentication:
  Use --token or OPENSHIFT_TOKEN to pass a cluster bearer token
  Use 'buildconfig config set cluster.token <token>' to store one
""",
)
@click.version_option(
    version=_common.VERSION, package_name="buildconfig", prog_name="buildconfig"
)
@click.option(
    "--debug",
    is_flag=True,
    envvar="BUILDCONFIG_DEBUG",
    help="Show detailed error information, stack traces and debug logs",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    envvar="BUILDCONFIG_LOG_FORMAT",
    help="Format of log lines written to stderr",
)
@click.option(
    "--api-url",
    "api_url",
    envvar="OPENSHIFT_API_URL",
    help="The cluster API server URL",
)
@click.option(
    "--token",
    envvar="OPENSHIFT_TOKEN",
    help="The cluster bearer token",
)
@click.option(
    "--namespace",
    "-n",
    envvar="OPENSHIFT_NAMESPACE",
    help="The namespace to use",
)
@click.option(
    "--api-version",
    "api_version",
    envvar="OPENSHIFT_BUILD_API_VERSION",
    help="BuildConfig API version: build.openshift.io/v1 or legacy v1",
)
@click.option(
    "--insecure",
    is_flag=True,
    help="Skip TLS certificate verification of the API server",
)
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    log_format: str,
    api_url: str | None,
    token: str | None,
    namespace: str | None,
    api_version: str | None,
    insecure: bool,
):
    """
    OpenShift BuildConfig CLI.
    """
    level = logging.DEBUG if debug else logging.WARNING
    configure_logging_early(level)
    if log_format == "json":
        configure_production_mode_logging(level)
    else:
        configure_development_mode_logging(level)

    ctx.obj = _common.Context.default(
        api_url=api_url,
        token=token,
        namespace=namespace,
        api_version=api_version,
        insecure=insecure,
        debug=debug,
    )


cli.add_command(build_configs.render)
cli.add_command(build_configs.create)
cli.add_command(build_configs.ls)
cli.add_command(build_configs.get)
cli.add_command(build_configs.delete)
cli.add_command(config.config)
