"""Exception hierarchy for BuildConfig operations."""


class BuildConfigException(Exception):
    """Base exception for all buildconfig errors."""

    pass


class BuildConfigError(BuildConfigException):
    """General BuildConfig operation error."""

    pass


class InvalidImageURIError(BuildConfigError):
    """Raised when an image reference cannot be parsed."""

    def __init__(self, uri: str | None):
        self._uri = uri
        super().__init__(f"Invalid image reference: {uri!r}")

    @property
    def uri(self) -> str | None:
        return self._uri


class ResourceError(BuildConfigError):
    """Raised when a resource cannot be stubbed or parsed."""

    pass


class UnsupportedKindError(ResourceError):
    """Raised when the resource factory does not know a kind."""

    def __init__(self, kind: str):
        self._kind = kind
        super().__init__(f"Unsupported resource kind: {kind}")

    @property
    def kind(self) -> str:
        return self._kind


class ClusterConfigError(BuildConfigError):
    """Raised when the client is missing configuration needed for a request."""

    pass


class ClusterConnectionError(BuildConfigError):
    """Raised when the client cannot connect to the API server."""

    def __init__(self, message: str):
        super().__init__(f"Connection error: {message}")


class BuildConfigNotFoundError(BuildConfigError):
    """Raised when a BuildConfig is not found."""

    def __init__(self, name: str, namespace: str):
        self._name = name
        self._namespace = namespace
        super().__init__(f"BuildConfig not found: {namespace}/{name}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def namespace(self) -> str:
        return self._namespace


class BuildConfigExistsError(BuildConfigError):
    """Raised when creating a BuildConfig whose name is already taken."""

    def __init__(self, name: str, namespace: str):
        self._name = name
        self._namespace = namespace
        super().__init__(f"BuildConfig already exists: {namespace}/{name}")

    @property
    def name(self) -> str:
        return self._name

    @property
    def namespace(self) -> str:
        return self._namespace


class RemoteAPIError(BuildConfigError):
    """Raised when the API server returns an error."""

    def __init__(self, status_code: int, message: str):
        self._status_code = status_code
        self._message = message
        super().__init__(f"API error (status {status_code}): {message}")

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def message(self) -> str:
        return self._message
