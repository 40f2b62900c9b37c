import json

import click
from rich import print_json
from rich.console import Console
from rich.table import Table

from buildconfig.builder import BuildConfigBuilder
from buildconfig.cli._common import Context, pass_context, parse_key_values
from buildconfig.cli._errors import handle_build_config_error
from buildconfig.exceptions import BuildConfigError
from buildconfig.models import BuildConfig

_BUILD_CONFIG_OPTIONS = [
    click.option(
        "--label",
        "labels",
        multiple=True,
        callback=parse_key_values,
        metavar="KEY=VALUE",
        help="Label to add to the BuildConfig (repeatable)",
    ),
    click.option("--git-url", help="Git repository to build from"),
    click.option("--git-ref", help="Branch, tag or commit of the git repository"),
    click.option(
        "--binary", is_flag=True, help="Build from binary input streamed at build start"
    ),
    click.option("--as-file", help="File name the binary input is saved as"),
    click.option("--context-dir", help="Sub-directory of the source to build in"),
    click.option("--builder-image", help="Builder image pull spec (DockerImage)"),
    click.option(
        "--builder-image-stream-tag",
        help="Builder image stream tag, e.g. openshift/python:3.11",
    ),
    click.option("--builder-namespace", help="Namespace of the builder image stream tag"),
    click.option(
        "--env",
        "env",
        multiple=True,
        callback=parse_key_values,
        metavar="KEY=VALUE",
        help="Builder environment variable (repeatable)",
    ),
    click.option("--jenkinsfile", help="Inline Jenkinsfile for a pipeline build"),
    click.option(
        "--jenkinsfile-path", help="Path of the Jenkinsfile inside the source"
    ),
    click.option("--to", "to", help="Output image stream tag, e.g. myapp:latest"),
    click.option(
        "--on-source-change", is_flag=True, help="Add a GitHub webhook trigger"
    ),
    click.option(
        "--on-image-change", is_flag=True, help="Add an image change trigger"
    ),
    click.option(
        "--on-config-change", is_flag=True, help="Add a config change trigger"
    ),
]


def build_config_options(f):
    """Adds the options describing a BuildConfig to a command."""
    for option in reversed(_BUILD_CONFIG_OPTIONS):
        f = option(f)
    return f


def apply_build_config_options(
    builder: BuildConfigBuilder,
    name: str,
    namespace: str | None,
    labels: dict[str, str],
    git_url: str | None,
    git_ref: str | None,
    binary: bool,
    as_file: str | None,
    context_dir: str | None,
    builder_image: str | None,
    builder_image_stream_tag: str | None,
    builder_namespace: str | None,
    env: dict[str, str],
    jenkinsfile: str | None,
    jenkinsfile_path: str | None,
    to: str | None,
    on_source_change: bool,
    on_image_change: bool,
    on_config_change: bool,
) -> BuildConfigBuilder:
    if git_url and binary:
        raise click.UsageError("--git-url and --binary are incompatible")
    if builder_image and builder_image_stream_tag:
        raise click.UsageError(
            "--builder-image and --builder-image-stream-tag are incompatible"
        )
    pipeline = bool(jenkinsfile or jenkinsfile_path)
    if pipeline and (builder_image or builder_image_stream_tag):
        raise click.UsageError(
            "Jenkins pipeline options can't be combined with a builder image"
        )
    if git_ref and not git_url:
        raise click.UsageError("--git-ref requires --git-url")
    if as_file and not binary:
        raise click.UsageError("--as-file requires --binary")
    if context_dir and not (git_url or binary):
        raise click.UsageError("--context-dir requires --git-url or --binary")
    has_builder_image = bool(builder_image or builder_image_stream_tag)
    if env and not has_builder_image:
        raise click.UsageError(
            "--env requires --builder-image or --builder-image-stream-tag"
        )
    if builder_namespace and not has_builder_image:
        raise click.UsageError(
            "--builder-namespace requires --builder-image or --builder-image-stream-tag"
        )

    builder.named(name).in_namespace(namespace).with_labels(labels)

    if git_url:
        source = builder.from_git_source().from_git_url(git_url)
        if git_ref:
            source.using_git_reference(git_ref)
    elif binary:
        source = builder.from_binary_source()
        if as_file:
            source.from_as_file(as_file)
    else:
        source = None
    if source is not None and context_dir:
        source.in_context_dir(context_dir)

    if builder_image or builder_image_stream_tag:
        strategy = builder.using_source_strategy()
        if builder_image:
            strategy.from_docker_image(builder_image)
        else:
            strategy.from_image_stream_tag(builder_image_stream_tag)
        if builder_namespace:
            strategy.in_namespace(builder_namespace)
        if env:
            strategy.with_env_vars(env)
    elif pipeline:
        strategy = builder.using_jenkins_pipeline_strategy()
        if jenkinsfile:
            strategy.using_file(jenkinsfile)
        if jenkinsfile_path:
            strategy.using_file_path(jenkinsfile_path)

    if to:
        builder.to_image_stream_tag(to)

    return (
        builder.build_on_source_change(on_source_change)
        .build_on_image_change(on_image_change)
        .build_on_config_change(on_config_change)
    )


def _print_build_config(bc: BuildConfig) -> None:
    print_json(json.dumps(bc.to_dict()))


@click.command()
@pass_context
@build_config_options
@click.argument("name")
def render(ctx: Context, name: str, **options):
    """
    Print the BuildConfig JSON without submitting it.
    """
    builder = BuildConfigBuilder(ctx)
    try:
        bc = apply_build_config_options(
            builder, name=name, namespace=ctx.namespace, **options
        ).build()
    except BuildConfigError as e:
        handle_build_config_error(e, ctx, "rendering BuildConfig")
    _print_build_config(bc)


@click.command()
@pass_context
@build_config_options
@click.argument("name")
def create(ctx: Context, name: str, **options):
    """
    Build a BuildConfig and submit it to the cluster.
    """
    try:
        builder = ctx.client.build_config_builder()
        bc = apply_build_config_options(
            builder, name=name, namespace=ctx.namespace, **options
        ).build()
        created = ctx.client.create(bc)
    except BuildConfigError as e:
        handle_build_config_error(e, ctx, "creating BuildConfig")

    click.echo(f"Created BuildConfig {created.namespace}/{created.name}")
    for trigger in created.build_triggers:
        secret = getattr(trigger, "secret", None)
        if secret:
            click.echo(f"  {trigger.type} webhook secret: {secret}")


@click.command()
@pass_context
@click.option(
    "--label",
    "labels",
    multiple=True,
    callback=parse_key_values,
    metavar="KEY=VALUE",
    help="Only list BuildConfigs carrying this label (repeatable)",
)
@click.option(
    "--json",
    "use_json",
    "-j",
    is_flag=True,
    help="Export BuildConfigs as JSON-encoded data",
)
def ls(ctx: Context, labels: dict[str, str], use_json: bool):
    """
    List BuildConfigs in the namespace.
    """
    try:
        build_configs = ctx.client.list(labels=labels)
    except BuildConfigError as e:
        handle_build_config_error(e, ctx, "listing BuildConfigs")

    if use_json:
        print_json(json.dumps([bc.to_dict() for bc in build_configs]))
        return

    if len(build_configs) == 0:
        click.echo("No BuildConfigs found")
        return

    table = Table(title="BuildConfigs")
    table.add_column("Name", no_wrap=True)
    table.add_column("Strategy")
    table.add_column("Source")
    table.add_column("Output")
    table.add_column("Created At", style="green")

    for bc in build_configs:
        output = bc.spec.output.to
        table.add_row(
            bc.name,
            _part_type(bc.build_strategy),
            _part_type(bc.build_source),
            output.name if output is not None and output.name else "",
            bc.metadata.creation_timestamp or "",
        )

    Console().print(table)


def _part_type(part) -> str:
    if part is None:
        return ""
    if isinstance(part, dict):
        return str(part.get("type", ""))
    return part.type


@click.command()
@pass_context
@click.argument("name")
def get(ctx: Context, name: str):
    """
    Print a BuildConfig stored in the cluster.
    """
    try:
        bc = ctx.client.get(name)
    except BuildConfigError as e:
        handle_build_config_error(e, ctx, "fetching BuildConfig")
    _print_build_config(bc)


@click.command()
@pass_context
@click.argument("name")
def delete(ctx: Context, name: str):
    """
    Delete a BuildConfig from the cluster.
    """
    try:
        ctx.client.delete(name)
    except BuildConfigError as e:
        handle_build_config_error(e, ctx, "deleting BuildConfig")
    click.echo(f"Deleted BuildConfig {ctx.namespace}/{name}")
