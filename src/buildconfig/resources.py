"""Factory for resource models, stamped with the cluster's API version."""

from typing import Any

import structlog

from .exceptions import ResourceError, UnsupportedKindError
from .kinds import (
    BUILD_API_GROUP_VERSION,
    SUPPORTED_API_VERSIONS,
    ResourceKind,
)
from .models import BuildConfig, ObjectMeta

logger = structlog.get_logger(module=__name__)

_RESOURCE_MODELS: dict[str, type[BuildConfig]] = {
    ResourceKind.BUILD_CONFIG.value: BuildConfig,
}


class ResourceFactory:
    """Creates empty resources and parses server documents into resource models."""

    def __init__(self, api_version: str = BUILD_API_GROUP_VERSION):
        if api_version not in SUPPORTED_API_VERSIONS:
            raise ResourceError(
                f"Unsupported API version: '{api_version}'. "
                f"Valid options: {', '.join(SUPPORTED_API_VERSIONS)}"
            )
        self._api_version: str = api_version

    @property
    def api_version(self) -> str:
        return self._api_version

    def stub(
        self, kind: ResourceKind | str, name: str, namespace: str | None = None
    ) -> BuildConfig:
        """Returns an empty resource of the given kind ready to be filled in.

        Raises:
            UnsupportedKindError: If the factory has no model for the kind.
            ResourceError: If name is blank.
        """
        model = self._model_for(kind)
        if name is None or not name.strip():
            raise ResourceError(f"A name is required to stub a {model.__name__}")
        return model(
            api_version=self._api_version,
            metadata=ObjectMeta(name=name, namespace=namespace),
        )

    def create(self, data: dict[str, Any]) -> BuildConfig:
        """Parses a resource document returned by the API server."""
        kind = data.get("kind")
        if kind is None:
            raise ResourceError("Resource document has no kind")
        model = self._model_for(kind)
        try:
            return model.from_dict(data)
        except ValueError as e:
            logger.warning("failed to parse resource", kind=kind, exc_info=e)
            raise ResourceError(f"Invalid {kind} document: {e}") from e

    def _model_for(self, kind: ResourceKind | str) -> type[BuildConfig]:
        kind_name = kind.value if isinstance(kind, ResourceKind) else kind
        try:
            return _RESOURCE_MODELS[kind_name]
        except KeyError:
            raise UnsupportedKindError(kind_name) from None
