"""Tests for the cluster client."""

import json
from unittest.mock import patch

import httpx
import pytest
import respx

from buildconfig import (
    BuildConfig,
    BuildConfigExistsError,
    BuildConfigNotFoundError,
    ClusterClient,
    ClusterConfigError,
    ClusterConnectionError,
    RemoteAPIError,
)
from buildconfig.kinds import LEGACY_API_VERSION

COLLECTION = "/apis/build.openshift.io/v1/namespaces/web/buildconfigs"


def _build_config_json(name: str = "app", namespace: str = "web") -> dict:
    return {
        "kind": "BuildConfig",
        "apiVersion": "build.openshift.io/v1",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "uid": "1234",
            "resourceVersion": "7",
            "creationTimestamp": "2024-05-01T10:00:00Z",
        },
        "spec": {
            "source": {"type": "Git", "git": {"uri": "https://github.com/acme/app.git"}},
            "strategy": {
                "type": "Source",
                "sourceStrategy": {"from": {"kind": "DockerImage", "name": "ruby:2.7"}},
            },
            "output": {"to": {"kind": "ImageStreamTag", "name": "app:latest"}},
            "triggers": [{"type": "Generic", "generic": {"secret": "abc"}}],
            "runPolicy": "Serial",
        },
    }


@pytest.fixture
def client():
    """Create a client pointing to a test cluster without retry delays."""
    with ClusterClient(
        api_url="http://test.local",
        token="test-token",
        namespace="web",
        retry_backoff_sec=0,
    ) as client:
        yield client


@pytest.fixture
def mock_api():
    """Mock the HTTP API of the test cluster."""
    with respx.mock(base_url="http://test.local") as mock:
        yield mock


class TestClusterClientInit:
    """Tests for ClusterClient initialization and URL routing."""

    def test_trailing_slash_is_dropped(self):
        client = ClusterClient(api_url="https://cluster:8443/", namespace="web")
        assert client._collection_url("web") == (
            "https://cluster:8443/apis/build.openshift.io/v1/namespaces/web/buildconfigs"
        )

    def test_legacy_url(self):
        client = ClusterClient(
            api_url="https://cluster:8443", api_version=LEGACY_API_VERSION
        )
        assert client._collection_url("web") == (
            "https://cluster:8443/oapi/v1/namespaces/web/buildconfigs"
        )

    def test_resource_factory_api_version(self):
        client = ClusterClient(api_url="https://cluster:8443", api_version="v1")
        assert client.resource_factory.api_version == "v1"

    def test_auth_header(self, client):
        headers = {}
        client._add_auth_headers(headers)
        assert headers["Authorization"] == "Bearer test-token"

    def test_no_token(self):
        client = ClusterClient(api_url="https://cluster:8443", token=None)
        headers = {}
        client._add_auth_headers(headers)
        assert "Authorization" not in headers

    def test_namespace_required(self):
        client = ClusterClient(api_url="https://cluster:8443", namespace=None)
        with pytest.raises(ClusterConfigError):
            client.get("app")


class TestCreate:
    """Tests for BuildConfig creation."""

    def test_create(self, client, mock_api):
        route = mock_api.post(COLLECTION).mock(
            return_value=httpx.Response(201, json=_build_config_json())
        )
        bc = (
            client.build_config_builder()
            .named("app")
            .from_git_source()
            .from_git_url("https://github.com/acme/app.git")
            .end()
            .build()
        )

        created = client.create(bc)

        assert isinstance(created, BuildConfig)
        assert created.metadata.uid == "1234"
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer test-token"
        body = json.loads(request.content)
        assert body["kind"] == "BuildConfig"
        assert body["metadata"] == {"name": "app", "namespace": "web"}
        assert body["spec"]["source"]["git"]["uri"] == "https://github.com/acme/app.git"

    def test_create_in_build_config_namespace(self, client, mock_api):
        route = mock_api.post(
            "/apis/build.openshift.io/v1/namespaces/other/buildconfigs"
        ).mock(return_value=httpx.Response(201, json=_build_config_json(namespace="other")))
        bc = client.build_config_builder().named("app").in_namespace("other").build()

        created = client.create(bc)

        assert route.called
        assert created.namespace == "other"

    def test_create_existing(self, client, mock_api):
        mock_api.post(COLLECTION).mock(
            return_value=httpx.Response(
                409, json={"kind": "Status", "message": "already exists"}
            )
        )
        bc = client.build_config_builder().named("app").build()

        with pytest.raises(BuildConfigExistsError) as exc_info:
            client.create(bc)
        assert exc_info.value.name == "app"
        assert exc_info.value.namespace == "web"

    def test_create_invalid(self, client, mock_api):
        mock_api.post(COLLECTION).mock(
            return_value=httpx.Response(
                422,
                json={
                    "kind": "Status",
                    "message": 'BuildConfig.build.openshift.io "app" is invalid',
                },
            )
        )
        bc = client.build_config_builder().named("app").build()

        with pytest.raises(RemoteAPIError) as exc_info:
            client.create(bc)
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == 'BuildConfig.build.openshift.io "app" is invalid'


class TestGetListUpdateDelete:
    """Tests for reading and changing stored BuildConfigs."""

    def test_get(self, client, mock_api):
        mock_api.get(f"{COLLECTION}/app").mock(
            return_value=httpx.Response(200, json=_build_config_json())
        )

        bc = client.get("app")

        assert bc.name == "app"
        assert bc.build_output_reference.name == "app:latest"

    def test_get_not_found(self, client, mock_api):
        mock_api.get(f"{COLLECTION}/missing").mock(
            return_value=httpx.Response(404, json={"kind": "Status", "message": "not found"})
        )

        with pytest.raises(BuildConfigNotFoundError) as exc_info:
            client.get("missing")
        assert exc_info.value.name == "missing"

    def test_list(self, client, mock_api):
        items = [_build_config_json("a"), _build_config_json("b")]
        for item in items:
            del item["kind"]
            del item["apiVersion"]
        route = mock_api.get(COLLECTION).mock(
            return_value=httpx.Response(
                200, json={"kind": "BuildConfigList", "items": items}
            )
        )

        build_configs = client.list(labels={"app": "web", "tier": "front"})

        assert [bc.name for bc in build_configs] == ["a", "b"]
        assert all(bc.api_version == "build.openshift.io/v1" for bc in build_configs)
        params = route.calls.last.request.url.params
        assert params["labelSelector"] == "app=web,tier=front"

    def test_list_empty(self, client, mock_api):
        mock_api.get(COLLECTION).mock(
            return_value=httpx.Response(200, json={"kind": "BuildConfigList", "items": None})
        )
        assert client.list() == []

    def test_list_other_namespace(self, client, mock_api):
        mock_api.get("/apis/build.openshift.io/v1/namespaces/other/buildconfigs").mock(
            return_value=httpx.Response(200, json={"items": []})
        )
        assert client.list(namespace="other") == []

    def test_update(self, client, mock_api):
        route = mock_api.put(f"{COLLECTION}/app").mock(
            return_value=httpx.Response(200, json=_build_config_json())
        )
        bc = BuildConfig.from_dict(_build_config_json())
        bc.add_label("team", "payments")

        client.update(bc)

        body = json.loads(route.calls.last.request.content)
        assert body["metadata"]["labels"] == {"team": "payments"}
        assert body["metadata"]["resourceVersion"] == "7"

    def test_get_then_update_keeps_server_fields(self, client, mock_api):
        document = _build_config_json()
        document["metadata"]["generation"] = 2
        document["spec"]["resources"] = {"limits": {"memory": "1Gi"}}
        document["spec"]["postCommit"] = {"script": "make test"}
        document["spec"]["source"]["sourceSecret"] = {"name": "git-credentials"}
        document["spec"]["strategy"]["sourceStrategy"]["pullSecret"] = {
            "name": "registry-pull"
        }
        document["spec"]["output"]["pushSecret"] = {"name": "registry-push"}
        document["spec"]["triggers"].append(
            {"type": "GitHub", "github": {"secretReference": {"name": "gh-webhook"}}}
        )
        mock_api.get(f"{COLLECTION}/app").mock(
            return_value=httpx.Response(200, json=document)
        )
        route = mock_api.put(f"{COLLECTION}/app").mock(
            return_value=httpx.Response(200, json=document)
        )

        client.update(client.get("app"))

        body = json.loads(route.calls.last.request.content)
        assert body["spec"] == document["spec"]
        assert body["metadata"] == document["metadata"]

    def test_delete(self, client, mock_api):
        route = mock_api.delete(f"{COLLECTION}/app").mock(
            return_value=httpx.Response(200, json={"kind": "Status", "status": "Success"})
        )

        client.delete("app")

        assert route.called

    def test_delete_not_found(self, client, mock_api):
        mock_api.delete(f"{COLLECTION}/app").mock(return_value=httpx.Response(404))

        with pytest.raises(BuildConfigNotFoundError):
            client.delete("app")

    def test_error_without_json_body(self, client, mock_api):
        mock_api.get(COLLECTION).mock(return_value=httpx.Response(500, text="boom"))

        with pytest.raises(RemoteAPIError) as exc_info:
            client.list()
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "boom"


class TestRetries:
    """Tests for retrying transient failures."""

    def test_retry_on_unavailable(self, client, mock_api):
        route = mock_api.get(f"{COLLECTION}/app").mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json=_build_config_json()),
            ]
        )

        assert client.get("app").name == "app"
        assert route.call_count == 2

    def test_retry_after_header(self, client, mock_api):
        route = mock_api.get(f"{COLLECTION}/app").mock(
            side_effect=[
                httpx.Response(429, headers={"Retry-After": "2"}),
                httpx.Response(503, headers={"Retry-After": "soon"}),
                httpx.Response(200, json=_build_config_json()),
            ]
        )

        with patch("time.sleep") as mock_sleep:
            assert client.get("app").name == "app"

        assert route.call_count == 3
        # The unparsable header falls back to the configured backoff of 0s.
        assert [c.args[0] for c in mock_sleep.call_args_list] == [2.0, 0.0]

    def test_retries_exhausted(self, client, mock_api):
        route = mock_api.get(f"{COLLECTION}/app").mock(
            return_value=httpx.Response(429, text="slow down")
        )

        with pytest.raises(RemoteAPIError) as exc_info:
            client.get("app")
        assert exc_info.value.status_code == 429
        assert route.call_count == 4  # Initial call + 3 retries

    def test_connection_error(self, client, mock_api):
        route = mock_api.get(f"{COLLECTION}/app").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(ClusterConnectionError):
            client.get("app")
        assert route.call_count == 4

    def test_no_retry_on_client_error(self, client, mock_api):
        route = mock_api.get(f"{COLLECTION}/app").mock(return_value=httpx.Response(403))

        with pytest.raises(RemoteAPIError):
            client.get("app")
        assert route.call_count == 1
