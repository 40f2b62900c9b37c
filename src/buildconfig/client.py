"""Client for submitting BuildConfigs to an OpenShift cluster."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from . import _defaults
from .builder import BuildConfigBuilder
from .exceptions import (
    BuildConfigExistsError,
    BuildConfigNotFoundError,
    ClusterConfigError,
    ClusterConnectionError,
    RemoteAPIError,
)
from .kinds import LEGACY_API_VERSION, ResourceKind
from .models import BuildConfig
from .resources import ResourceFactory
from .utils.retries import exponential_backoff

logger = structlog.get_logger(module=__name__)


class _RetryableResponse(Exception):
    def __init__(self, response: httpx.Response):
        super().__init__(f"retryable status {response.status_code}")
        self.response = response


class ClusterClient:
    """Client for BuildConfig resources of a single cluster.

    Requests are scoped to ``namespace`` unless a method is given an explicit
    namespace or the BuildConfig carries one.
    """

    def __init__(
        self,
        api_url: str = _defaults.API_URL,
        token: str | None = _defaults.TOKEN,
        namespace: str | None = _defaults.NAMESPACE,
        api_version: str = _defaults.BUILD_API_VERSION,
        verify_tls: bool = True,
        max_retries: int = _defaults.MAX_RETRIES,
        retry_backoff_sec: float = _defaults.RETRY_BACKOFF_SEC,
    ):
        self._api_url: str = api_url.rstrip("/")
        self._token: str | None = token
        self._namespace: str | None = namespace
        self._resource_factory: ResourceFactory = ResourceFactory(api_version)
        self._max_retries = max_retries
        self._retry_backoff_sec = retry_backoff_sec
        self._client: httpx.Client = httpx.Client(
            timeout=_defaults.DEFAULT_HTTP_TIMEOUT_SEC, verify=verify_tls
        )

    def __enter__(self) -> "ClusterClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    @property
    def resource_factory(self) -> ResourceFactory:
        return self._resource_factory

    @property
    def namespace(self) -> str | None:
        return self._namespace

    def build_config_builder(self) -> BuildConfigBuilder:
        """Returns a builder whose BuildConfigs match this cluster's API version."""
        return BuildConfigBuilder(self)

    def _resolve_namespace(self, namespace: str | None) -> str:
        namespace = namespace or self._namespace
        if not namespace:
            raise ClusterConfigError(
                "No namespace given; pass one or set OPENSHIFT_NAMESPACE"
            )
        return namespace

    def _collection_url(self, namespace: str) -> str:
        api_version = self._resource_factory.api_version
        if api_version == LEGACY_API_VERSION:
            prefix = f"{self._api_url}/oapi/{api_version}"
        else:
            prefix = f"{self._api_url}/apis/{api_version}"
        return f"{prefix}/namespaces/{namespace}/buildconfigs"

    def _add_auth_headers(self, headers: httpx.Headers | dict[str, str]) -> None:
        if self._token is not None:
            headers["Authorization"] = f"Bearer {self._token}"

    def _run_request(self, request: httpx.Request) -> httpx.Response:
        """Send an HTTP request with auth headers and retry on transient errors.

        Retries on connection errors and 429/502/503/504 status codes with
        exponential backoff, waiting as long as a Retry-After header asks for.
        The last response is returned once retries run out.

        Raises:
            ClusterConnectionError: When the server is unreachable after
                all retry attempts.
        """
        self._add_auth_headers(request.headers)

        @exponential_backoff(
            max_retries=self._max_retries,
            initial_delay_seconds=self._retry_backoff_sec,
            retryable_exceptions=(ClusterConnectionError, _RetryableResponse),
            requested_delay=_retry_after,
            on_retry=self._on_retry,
        )
        def send() -> httpx.Response:
            logger.debug("sending request", method=request.method, url=str(request.url))
            try:
                response = self._client.send(request)
            except httpx.RequestError as e:
                raise ClusterConnectionError(str(e)) from e
            if response.status_code in _defaults.RETRYABLE_STATUS_CODES:
                raise _RetryableResponse(response)
            return response

        try:
            return send()
        except _RetryableResponse as e:
            return e.response

    def _on_retry(self, error: BaseException, sleep_time: float, retries: int) -> None:
        logger.warning(
            "retrying request", error=str(error), sleep_sec=sleep_time, retry=retries
        )

    def _raise_for_status(
        self, response: httpx.Response, name: str | None, namespace: str
    ) -> None:
        if response.status_code < 400:
            return
        if response.status_code == 404 and name is not None:
            raise BuildConfigNotFoundError(name, namespace)
        if response.status_code == 409 and name is not None:
            raise BuildConfigExistsError(name, namespace)
        raise RemoteAPIError(response.status_code, _status_message(response))

    def create(self, build_config: BuildConfig) -> BuildConfig:
        """Submit a new BuildConfig and return the server's copy of it.

        Raises:
            BuildConfigExistsError: If a BuildConfig with the same name exists.
            RemoteAPIError: For any other API error.
        """
        namespace = self._resolve_namespace(build_config.namespace)
        body = build_config.to_dict()
        body["metadata"]["namespace"] = namespace
        request = self._client.build_request(
            "POST", self._collection_url(namespace), json=body
        )
        response = self._run_request(request)
        self._raise_for_status(response, build_config.name, namespace)
        logger.info("created BuildConfig", name=build_config.name, namespace=namespace)
        return self._resource_factory.create(response.json())

    def get(self, name: str, namespace: str | None = None) -> BuildConfig:
        """Fetch a BuildConfig by name.

        Raises:
            BuildConfigNotFoundError: If the BuildConfig does not exist.
        """
        namespace = self._resolve_namespace(namespace)
        request = self._client.build_request(
            "GET", f"{self._collection_url(namespace)}/{name}"
        )
        response = self._run_request(request)
        self._raise_for_status(response, name, namespace)
        return self._resource_factory.create(response.json())

    def list(
        self, namespace: str | None = None, labels: dict[str, str] | None = None
    ) -> list[BuildConfig]:
        """List BuildConfigs, optionally restricted to those carrying all given labels."""
        namespace = self._resolve_namespace(namespace)
        params = {}
        if labels:
            params["labelSelector"] = ",".join(f"{k}={v}" for k, v in labels.items())
        request = self._client.build_request(
            "GET", self._collection_url(namespace), params=params
        )
        response = self._run_request(request)
        self._raise_for_status(response, None, namespace)

        build_configs: list[BuildConfig] = []
        for item in response.json().get("items") or []:
            # List items usually omit their own kind and apiVersion.
            item.setdefault("kind", ResourceKind.BUILD_CONFIG.value)
            item.setdefault("apiVersion", self._resource_factory.api_version)
            build_configs.append(self._resource_factory.create(item))
        return build_configs

    def update(self, build_config: BuildConfig) -> BuildConfig:
        """Replace an existing BuildConfig.

        Raises:
            BuildConfigNotFoundError: If the BuildConfig does not exist.
        """
        namespace = self._resolve_namespace(build_config.namespace)
        body = build_config.to_dict()
        body["metadata"]["namespace"] = namespace
        request = self._client.build_request(
            "PUT",
            f"{self._collection_url(namespace)}/{build_config.name}",
            json=body,
        )
        response = self._run_request(request)
        self._raise_for_status(response, build_config.name, namespace)
        logger.info("updated BuildConfig", name=build_config.name, namespace=namespace)
        return self._resource_factory.create(response.json())

    def delete(self, name: str, namespace: str | None = None) -> None:
        """Delete a BuildConfig by name.

        Raises:
            BuildConfigNotFoundError: If the BuildConfig does not exist.
        """
        namespace = self._resolve_namespace(namespace)
        request = self._client.build_request(
            "DELETE", f"{self._collection_url(namespace)}/{name}"
        )
        response = self._run_request(request)
        self._raise_for_status(response, name, namespace)
        logger.info("deleted BuildConfig", name=name, namespace=namespace)


def _retry_after(error: BaseException) -> float | None:
    if not isinstance(error, _RetryableResponse):
        return None
    value = error.response.headers.get("Retry-After")
    # HTTP dates are allowed too but the API server only sends seconds.
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


def _status_message(response: httpx.Response) -> str:
    """Extracts the message of a Kubernetes Status document, falling back to the body."""
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text
