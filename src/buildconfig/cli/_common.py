import importlib.metadata
from dataclasses import dataclass

import click

from buildconfig import _defaults
from buildconfig.cli._configuration import get_nested_value, load_config
from buildconfig.client import ClusterClient
from buildconfig.resources import ResourceFactory

try:
    VERSION = importlib.metadata.version("buildconfig")
except importlib.metadata.PackageNotFoundError:
    VERSION = "unknown"


@dataclass
class Context:
    """Class for CLI context."""

    api_url: str
    api_version: str
    namespace: str | None = None
    token: str | None = None
    verify_tls: bool = True
    version: str = VERSION
    debug: bool = False
    _client: ClusterClient | None = None

    @property
    def client(self) -> ClusterClient:
        if self._client is None:
            if not self.namespace:
                raise click.UsageError(
                    "Missing namespace. Use --namespace, set OPENSHIFT_NAMESPACE or "
                    "run 'buildconfig config set cluster.namespace <name>'."
                )
            self._client = ClusterClient(
                api_url=self.api_url,
                token=self.token,
                namespace=self.namespace,
                api_version=self.api_version,
                verify_tls=self.verify_tls,
            )
        return self._client

    @property
    def resource_factory(self) -> ResourceFactory:
        """Resource factory for rendering BuildConfigs without contacting the cluster."""
        if self._client is not None:
            return self._client.resource_factory
        return ResourceFactory(self.api_version)

    @classmethod
    def default(
        cls,
        api_url: str | None = None,
        token: str | None = None,
        namespace: str | None = None,
        api_version: str | None = None,
        insecure: bool = False,
        debug: bool = False,
    ) -> "Context":
        """Create a Context with values from CLI args, environment, saved config, or defaults."""
        config_data = load_config()

        return cls(
            api_url=api_url
            or get_nested_value(config_data, "cluster.api_url")
            or _defaults.API_URL,
            token=token or get_nested_value(config_data, "cluster.token"),
            namespace=namespace or get_nested_value(config_data, "cluster.namespace"),
            api_version=api_version
            or get_nested_value(config_data, "cluster.api_version")
            or _defaults.BUILD_API_VERSION,
            verify_tls=not (
                insecure
                or str(get_nested_value(config_data, "cluster.insecure")).lower()
                in ("1", "true", "yes")
            ),
            debug=debug,
        )


"""Pass the Context object to the click command"""
pass_context = click.make_pass_decorator(Context)


def parse_key_values(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning repeated KEY=VALUE options into a dict."""
    result: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param=param)
        result[key] = value
    return result


class AliasedGroup(click.Group):
    """
    A Click Group that supports command aliases through prefix matching.

    Example:
        buildconfig ren   -> buildconfig render
        buildconfig del   -> buildconfig delete
    """

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        rv = super().get_command(ctx, cmd_name)
        if rv is not None:
            return rv

        matches = [
            x for x in self.list_commands(ctx) if x.lower().startswith(cmd_name.lower())
        ]

        if not matches:
            return None

        if len(matches) == 1:
            return super().get_command(ctx, matches[0])

        ctx.fail(
            f"Ambiguous command '{cmd_name}'. Could be: {', '.join(sorted(matches))}"
        )

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str, click.Command, list[str]]:
        """Resolve command name to always return the full command name, not the alias."""
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name, cmd, args
