"""Fluent builder for BuildConfig resources."""

from __future__ import annotations

from typing import Dict, List, Protocol

import structlog
from nanoid import generate as nanoid_generate

from .images import DockerImageURI
from .kinds import ResourceKind
from .models import (
    BinaryBuildSource,
    BinarySource,
    BuildConfig,
    BuildTriggerType,
    ConfigChangeTrigger,
    EnvironmentVariable,
    GitBuildSource,
    GitSource,
    ImageChangeTrigger,
    JenkinsPipelineOptions,
    JenkinsPipelineStrategy,
    ObjectReference,
    SourceBuildStrategy,
    SourceStrategyOptions,
    webhook_trigger,
)
from .resources import ResourceFactory

logger = structlog.get_logger(module=__name__)


class ResourceFactoryProvider(Protocol):
    """Anything that hands out a resource factory, usually a ClusterClient."""

    @property
    def resource_factory(self) -> ResourceFactory: ...


class BuildConfigBuilder:
    """Collects BuildConfig settings through chained calls and builds the resource.

    Example:
        bc = (
            BuildConfigBuilder(client)
            .named("frontend")
            .in_namespace("web")
            .from_git_source()
            .from_git_url("https://github.com/acme/frontend.git")
            .using_git_reference("main")
            .end()
            .using_source_strategy()
            .from_image_stream_tag("openshift/nodejs:18")
            .end()
            .to_image_stream_tag("frontend:latest")
            .build_on_source_change(True)
            .build()
        )
    """

    def __init__(self, client: ResourceFactoryProvider):
        self._client: ResourceFactoryProvider = client
        self._name: str | None = None
        self._namespace: str | None = None
        self._labels: Dict[str, str] | None = None
        self._image_stream_tag_output: str | None = None
        self._build_on_config_change: bool = False
        self._build_on_image_change: bool = False
        self._build_on_source_change: bool = False
        self._source_strategy_builder: SourceStrategyBuilder | None = None
        self._jenkins_pipeline_strategy_builder: JenkinsPipelineStrategyBuilder | None = None
        self._git_source_builder: GitSourceBuilder | None = None
        self._binary_source_builder: BinarySourceBuilder | None = None

    def is_supported(self) -> bool:
        return True

    @property
    def name(self) -> str:
        return type(self).__name__

    def named(self, name: str) -> BuildConfigBuilder:
        self._name = name
        return self

    def in_namespace(self, namespace: str) -> BuildConfigBuilder:
        self._namespace = namespace
        return self

    def with_labels(self, labels: Dict[str, str] | None) -> BuildConfigBuilder:
        self._labels = labels
        return self

    def build_on_source_change(self, on_source_change: bool) -> BuildConfigBuilder:
        """Adds a GitHub webhook trigger so pushes to the repository start a build."""
        self._build_on_source_change = on_source_change
        return self

    def build_on_image_change(self, on_image_change: bool) -> BuildConfigBuilder:
        """Adds an image change trigger so builder image updates start a build."""
        self._build_on_image_change = on_image_change
        return self

    def build_on_config_change(self, on_config_change: bool) -> BuildConfigBuilder:
        """Adds a config change trigger so a build starts once the BuildConfig is created."""
        self._build_on_config_change = on_config_change
        return self

    def to_image_stream_tag(self, tag: str) -> BuildConfigBuilder:
        self._image_stream_tag_output = tag
        return self

    def using_source_strategy(self) -> SourceStrategyBuilder:
        self._source_strategy_builder = SourceStrategyBuilder(self)
        return self._source_strategy_builder

    def using_jenkins_pipeline_strategy(self) -> JenkinsPipelineStrategyBuilder:
        self._jenkins_pipeline_strategy_builder = JenkinsPipelineStrategyBuilder(self)
        return self._jenkins_pipeline_strategy_builder

    def from_git_source(self) -> GitSourceBuilder:
        self._git_source_builder = GitSourceBuilder(self)
        return self._git_source_builder

    def from_binary_source(self) -> BinarySourceBuilder:
        self._binary_source_builder = BinarySourceBuilder(self)
        return self._binary_source_builder

    def build(self) -> BuildConfig:
        bc: BuildConfig = self._client.resource_factory.stub(
            ResourceKind.BUILD_CONFIG, self._name, self._namespace
        )

        # A source strategy takes precedence over a pipeline strategy, and a git
        # source over a binary one, when both were requested.
        if self._source_strategy_builder is not None:
            bc.set_build_strategy(self._source_strategy_builder._build())
        elif self._jenkins_pipeline_strategy_builder is not None:
            bc.set_build_strategy(self._jenkins_pipeline_strategy_builder._build())

        if self._git_source_builder is not None:
            bc.set_build_source(self._git_source_builder._build())
        elif self._binary_source_builder is not None:
            bc.set_build_source(self._binary_source_builder._build())

        if self._labels:
            for key, value in self._labels.items():
                bc.add_label(key, value)

        if self._image_stream_tag_output is not None:
            uri = DockerImageURI(self._image_stream_tag_output)
            out_ref: ObjectReference = bc.build_output_reference
            out_ref.kind = ResourceKind.IMAGE_STREAM_TAG.value
            out_ref.name = uri.name_and_tag
            if uri.user_name and uri.user_name.strip():
                out_ref.namespace = uri.user_name

        bc.add_build_trigger(webhook_trigger(BuildTriggerType.GENERIC, nanoid_generate()))
        if self._build_on_image_change:
            bc.add_build_trigger(ImageChangeTrigger())
        if self._build_on_config_change:
            bc.add_build_trigger(ConfigChangeTrigger())
        if self._build_on_source_change:
            bc.add_build_trigger(
                webhook_trigger(BuildTriggerType.GITHUB, nanoid_generate())
            )

        logger.debug(
            "built BuildConfig",
            name=bc.name,
            namespace=bc.namespace,
            strategy=_type_of(bc.build_strategy),
            source=_type_of(bc.build_source),
            triggers=[trigger.type for trigger in bc.build_triggers],
        )
        return bc


def _type_of(part) -> str | None:
    return None if part is None else part.type


class SourceStrategyBuilder:
    """Configures a source-to-image strategy."""

    def __init__(self, parent: BuildConfigBuilder):
        self._parent: BuildConfigBuilder = parent
        self._env_vars: List[EnvironmentVariable] | None = None
        self._namespace: str | None = None
        self._tag: str | None = None
        self._from_kind: str | None = None

    def from_image_stream_tag(self, tag: str) -> SourceStrategyBuilder:
        self._tag = tag
        self._from_kind = ResourceKind.IMAGE_STREAM_TAG.value
        return self

    def from_docker_image(self, tag: str) -> SourceStrategyBuilder:
        self._tag = tag
        self._from_kind = ResourceKind.DOCKER_IMAGE.value
        return self

    def in_namespace(self, namespace: str) -> SourceStrategyBuilder:
        self._namespace = namespace
        return self

    def with_env_vars(
        self, env_vars: List[EnvironmentVariable] | Dict[str, str] | None
    ) -> SourceStrategyBuilder:
        """Sets the environment of the builder image.

        Args:
            env_vars: EnvironmentVariable objects or a name to value mapping.
        """
        if isinstance(env_vars, dict):
            env_vars = [
                EnvironmentVariable(name=name, value=value)
                for name, value in env_vars.items()
            ]
        self._env_vars = env_vars
        return self

    def end(self) -> BuildConfigBuilder:
        return self._parent

    def _build(self) -> SourceBuildStrategy:
        from_ref = ObjectReference(kind=self._from_kind, namespace=self._namespace)
        if self._tag is not None:
            uri = DockerImageURI(self._tag)
            if self._from_kind == ResourceKind.DOCKER_IMAGE.value:
                from_ref.name = uri.absolute_uri
            else:
                from_ref.name = uri.name_and_tag
                if from_ref.namespace is None and uri.user_name:
                    from_ref.namespace = uri.user_name
        return SourceBuildStrategy(
            source_strategy=SourceStrategyOptions(
                from_ref=from_ref,
                env=None if self._env_vars is None else list(self._env_vars),
            )
        )


class JenkinsPipelineStrategyBuilder:
    """Configures a Jenkins pipeline strategy from an inline or repository Jenkinsfile."""

    def __init__(self, parent: BuildConfigBuilder):
        self._parent: BuildConfigBuilder = parent
        self._jenkinsfile_path: str | None = None
        self._jenkinsfile: str | None = None

    def using_file(self, file: str) -> JenkinsPipelineStrategyBuilder:
        """Sets the inline Jenkinsfile contents."""
        self._jenkinsfile = file
        return self

    def using_file_path(self, file_path: str) -> JenkinsPipelineStrategyBuilder:
        """Sets the Jenkinsfile path relative to the source context dir."""
        self._jenkinsfile_path = file_path
        return self

    def end(self) -> BuildConfigBuilder:
        return self._parent

    def _build(self) -> JenkinsPipelineStrategy:
        return JenkinsPipelineStrategy(
            jenkins_pipeline_strategy=JenkinsPipelineOptions(
                jenkinsfile_path=self._jenkinsfile_path,
                jenkinsfile=self._jenkinsfile,
            )
        )


class _SourceBuilder:
    def __init__(self, parent: BuildConfigBuilder):
        self._parent: BuildConfigBuilder = parent
        self._context_dir: str | None = None

    def in_context_dir(self, context_dir: str):
        """Sets the sub-directory of the source the build runs in."""
        self._context_dir = context_dir
        return self

    def end(self) -> BuildConfigBuilder:
        return self._parent


class GitSourceBuilder(_SourceBuilder):
    def __init__(self, parent: BuildConfigBuilder):
        super().__init__(parent)
        self._url: str | None = None
        self._ref: str | None = None

    def from_git_url(self, url: str) -> GitSourceBuilder:
        self._url = url
        return self

    def using_git_reference(self, ref: str) -> GitSourceBuilder:
        """Sets the branch, tag or commit to build."""
        self._ref = ref
        return self

    def _build(self) -> GitBuildSource:
        return GitBuildSource(
            git=GitSource(uri=self._url, ref=self._ref),
            context_dir=self._context_dir,
        )


class BinarySourceBuilder(_SourceBuilder):
    def __init__(self, parent: BuildConfigBuilder):
        super().__init__(parent)
        self._as_file: str | None = None

    def from_as_file(self, as_file: str) -> BinarySourceBuilder:
        """Sets the file name the streamed binary is saved as in the build context."""
        self._as_file = as_file
        return self

    def _build(self) -> BinaryBuildSource:
        return BinaryBuildSource(
            binary=BinarySource(as_file=self._as_file),
            context_dir=self._context_dir,
        )
