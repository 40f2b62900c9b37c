"""Resource kinds and API versions understood by the SDK."""

from enum import Enum


class ResourceKind(str, Enum):
    """Kinds of cluster resources referenced by BuildConfigs."""

    BUILD_CONFIG = "BuildConfig"
    IMAGE_STREAM = "ImageStream"
    IMAGE_STREAM_TAG = "ImageStreamTag"
    DOCKER_IMAGE = "DockerImage"


BUILD_API_GROUP: str = "build.openshift.io"
BUILD_API_GROUP_VERSION: str = f"{BUILD_API_GROUP}/v1"
# Clusters older than OpenShift 3.6 only serve builds from the legacy /oapi endpoint.
LEGACY_API_VERSION: str = "v1"

SUPPORTED_API_VERSIONS: tuple[str, ...] = (BUILD_API_GROUP_VERSION, LEGACY_API_VERSION)
