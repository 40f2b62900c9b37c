"""Pydantic models for the BuildConfig resource.

Field names are snake_case; aliases carry the camelCase names used on the wire.
``to_dict()`` renders the JSON document accepted by the cluster API.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer

from .kinds import BUILD_API_GROUP_VERSION, ResourceKind


class _WireModel(BaseModel):
    # Keys this package does not model are kept so that a document read from the
    # server is written back without losing fields.
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class BuildSourceType(str, Enum):
    GIT = "Git"
    BINARY = "Binary"


class BuildStrategyType(str, Enum):
    SOURCE = "Source"
    JENKINS_PIPELINE = "JenkinsPipeline"


class BuildTriggerType(str, Enum):
    """Events that start a new build of a BuildConfig."""

    GENERIC = "Generic"
    GITHUB = "GitHub"
    IMAGE_CHANGE = "ImageChange"
    CONFIG_CHANGE = "ConfigChange"


class EnvironmentVariable(_WireModel):
    name: str
    value: str | None = None


class ObjectReference(_WireModel):
    """Reference to another resource, e.g. the image a build starts from."""

    kind: str | None = None
    name: str | None = None
    namespace: str | None = None


class ObjectMeta(_WireModel):
    name: str
    namespace: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    uid: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    creation_timestamp: str | None = Field(default=None, alias="creationTimestamp")

    @model_serializer(mode="wrap")
    def _drop_empty_maps(self, handler):
        data = handler(self)
        for key in ("labels", "annotations"):
            if key in data and not data[key]:
                del data[key]
        return data


# --- Sources ---


class GitSource(_WireModel):
    uri: str | None = None
    ref: str | None = None


class BinarySource(_WireModel):
    as_file: str | None = Field(default=None, alias="asFile")


class GitBuildSource(_WireModel):
    type: Literal["Git"] = BuildSourceType.GIT.value
    git: GitSource = Field(default_factory=GitSource)
    context_dir: str | None = Field(default=None, alias="contextDir")


class BinaryBuildSource(_WireModel):
    """Build input streamed by the client when the build is started."""

    type: Literal["Binary"] = BuildSourceType.BINARY.value
    binary: BinarySource = Field(default_factory=BinarySource)
    context_dir: str | None = Field(default=None, alias="contextDir")


# --- Strategies ---


class SourceStrategyOptions(_WireModel):
    from_ref: ObjectReference = Field(alias="from")
    env: list[EnvironmentVariable] | None = None
    incremental: bool | None = None
    force_pull: bool | None = Field(default=None, alias="forcePull")


class SourceBuildStrategy(_WireModel):
    """Source-to-image strategy: source is injected into a builder image."""

    type: Literal["Source"] = BuildStrategyType.SOURCE.value
    source_strategy: SourceStrategyOptions = Field(alias="sourceStrategy")


class JenkinsPipelineOptions(_WireModel):
    jenkinsfile_path: str | None = Field(default=None, alias="jenkinsfilePath")
    jenkinsfile: str | None = None


class JenkinsPipelineStrategy(_WireModel):
    type: Literal["JenkinsPipeline"] = BuildStrategyType.JENKINS_PIPELINE.value
    jenkins_pipeline_strategy: JenkinsPipelineOptions = Field(
        default_factory=JenkinsPipelineOptions, alias="jenkinsPipelineStrategy"
    )


# --- Triggers ---


class WebHookTriggerOptions(_WireModel):
    secret: str | None = None
    allow_env: bool | None = Field(default=None, alias="allowEnv")


class GenericWebHookTrigger(_WireModel):
    type: Literal["Generic"] = BuildTriggerType.GENERIC.value
    generic: WebHookTriggerOptions = Field(default_factory=WebHookTriggerOptions)

    @property
    def secret(self) -> str | None:
        return self.generic.secret


class GitHubWebHookTrigger(_WireModel):
    type: Literal["GitHub"] = BuildTriggerType.GITHUB.value
    github: WebHookTriggerOptions = Field(default_factory=WebHookTriggerOptions)

    @property
    def secret(self) -> str | None:
        return self.github.secret


class ImageChangeTriggerOptions(_WireModel):
    last_triggered_image_id: str | None = Field(
        default=None, alias="lastTriggeredImageID"
    )
    from_ref: ObjectReference | None = Field(default=None, alias="from")


class ImageChangeTrigger(_WireModel):
    """Fires when the strategy's builder image is updated."""

    type: Literal["ImageChange"] = BuildTriggerType.IMAGE_CHANGE.value
    image_change: ImageChangeTriggerOptions = Field(
        default_factory=ImageChangeTriggerOptions, alias="imageChange"
    )


class ConfigChangeTrigger(_WireModel):
    """Fires once when the BuildConfig is created."""

    type: Literal["ConfigChange"] = BuildTriggerType.CONFIG_CHANGE.value


def webhook_trigger(
    trigger_type: BuildTriggerType, secret: str, allow_env: bool | None = None
) -> GenericWebHookTrigger | GitHubWebHookTrigger:
    """Creates a webhook trigger of the given type."""
    options = WebHookTriggerOptions(secret=secret, allow_env=allow_env)
    if trigger_type == BuildTriggerType.GENERIC:
        return GenericWebHookTrigger(generic=options)
    if trigger_type == BuildTriggerType.GITHUB:
        return GitHubWebHookTrigger(github=options)
    raise ValueError(f"{trigger_type} is not a webhook trigger type")


# --- BuildConfig ---


class BuildOutput(_WireModel):
    to: ObjectReference | None = None


# Server documents may carry strategies, sources and triggers this SDK doesn't
# model; those are kept as plain dicts.
_Strategy = Annotated[
    Union[SourceBuildStrategy, JenkinsPipelineStrategy, dict[str, Any]],
    Field(union_mode="left_to_right"),
]
_Source = Annotated[
    Union[GitBuildSource, BinaryBuildSource, dict[str, Any]],
    Field(union_mode="left_to_right"),
]
_Trigger = Annotated[
    Union[
        GenericWebHookTrigger,
        GitHubWebHookTrigger,
        ImageChangeTrigger,
        ConfigChangeTrigger,
        dict[str, Any],
    ],
    Field(union_mode="left_to_right"),
]


class BuildConfigSpec(_WireModel):
    strategy: Optional[_Strategy] = None
    source: Optional[_Source] = None
    output: BuildOutput = Field(default_factory=BuildOutput)
    triggers: list[_Trigger] = Field(default_factory=list)
    run_policy: str = Field(default="Serial", alias="runPolicy")


class BuildConfigStatus(_WireModel):
    last_version: int | None = Field(default=None, alias="lastVersion")


class BuildConfig(_WireModel):
    api_version: str = Field(default=BUILD_API_GROUP_VERSION, alias="apiVersion")
    kind: Literal["BuildConfig"] = ResourceKind.BUILD_CONFIG.value
    metadata: ObjectMeta
    spec: BuildConfigSpec = Field(default_factory=BuildConfigSpec)
    status: BuildConfigStatus | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildConfig":
        return cls.model_validate(data)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str | None:
        return self.metadata.namespace

    @property
    def labels(self) -> dict[str, str]:
        return self.metadata.labels

    def add_label(self, key: str, value: str) -> None:
        self.metadata.labels[key] = value

    @property
    def build_strategy(self) -> SourceBuildStrategy | JenkinsPipelineStrategy | None:
        return self.spec.strategy

    def set_build_strategy(
        self, strategy: SourceBuildStrategy | JenkinsPipelineStrategy | None
    ) -> None:
        self.spec.strategy = strategy

    @property
    def build_source(self) -> GitBuildSource | BinaryBuildSource | None:
        return self.spec.source

    def set_build_source(self, source: GitBuildSource | BinaryBuildSource | None) -> None:
        self.spec.source = source

    @property
    def build_output_reference(self) -> ObjectReference:
        """The image the build pushes to, created empty on first access."""
        if self.spec.output.to is None:
            self.spec.output.to = ObjectReference()
        return self.spec.output.to

    @property
    def build_triggers(self) -> list:
        return self.spec.triggers

    def add_build_trigger(self, trigger) -> None:
        self.spec.triggers.append(trigger)
