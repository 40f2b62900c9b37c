"""buildconfig SDK - fluent builder and client for OpenShift BuildConfig resources."""

from .builder import (
    BinarySourceBuilder,
    BuildConfigBuilder,
    GitSourceBuilder,
    JenkinsPipelineStrategyBuilder,
    SourceStrategyBuilder,
)
from .client import ClusterClient
from .exceptions import (
    BuildConfigError,
    BuildConfigException,
    BuildConfigExistsError,
    BuildConfigNotFoundError,
    ClusterConfigError,
    ClusterConnectionError,
    InvalidImageURIError,
    RemoteAPIError,
    ResourceError,
    UnsupportedKindError,
)
from .images import DockerImageURI
from .kinds import BUILD_API_GROUP_VERSION, LEGACY_API_VERSION, ResourceKind
from .models import (
    BinaryBuildSource,
    BuildConfig,
    BuildSourceType,
    BuildStrategyType,
    BuildTriggerType,
    ConfigChangeTrigger,
    EnvironmentVariable,
    GenericWebHookTrigger,
    GitBuildSource,
    GitHubWebHookTrigger,
    ImageChangeTrigger,
    JenkinsPipelineStrategy,
    ObjectReference,
    SourceBuildStrategy,
)
from .resources import ResourceFactory

__all__ = [
    # Building
    "BuildConfigBuilder",
    "SourceStrategyBuilder",
    "JenkinsPipelineStrategyBuilder",
    "GitSourceBuilder",
    "BinarySourceBuilder",
    # Submission
    "ClusterClient",
    "ResourceFactory",
    "ResourceKind",
    "BUILD_API_GROUP_VERSION",
    "LEGACY_API_VERSION",
    # Models
    "BuildConfig",
    "BuildSourceType",
    "BuildStrategyType",
    "BuildTriggerType",
    "GitBuildSource",
    "BinaryBuildSource",
    "SourceBuildStrategy",
    "JenkinsPipelineStrategy",
    "GenericWebHookTrigger",
    "GitHubWebHookTrigger",
    "ImageChangeTrigger",
    "ConfigChangeTrigger",
    "EnvironmentVariable",
    "ObjectReference",
    "DockerImageURI",
    # Exceptions
    "BuildConfigException",
    "BuildConfigError",
    "InvalidImageURIError",
    "ResourceError",
    "UnsupportedKindError",
    "ClusterConfigError",
    "ClusterConnectionError",
    "BuildConfigNotFoundError",
    "BuildConfigExistsError",
    "RemoteAPIError",
]
