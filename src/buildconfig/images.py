"""Container image reference parsing."""

from .exceptions import InvalidImageURIError

_DEFAULT_TAG = "latest"


def _looks_like_registry(segment: str) -> bool:
    return "." in segment or ":" in segment or segment == "localhost"


class DockerImageURI:
    """A parsed image reference of the form ``[registry/][user/]name[:tag][@digest]``.

    The tag defaults to ``latest`` when the reference does not carry one.

    Example:
        uri = DockerImageURI("quay.io/myproject/ruby:2.7")
        uri.registry       # "quay.io"
        uri.user_name      # "myproject"
        uri.name_and_tag   # "ruby:2.7"
    """

    def __init__(self, uri: str | None):
        if uri is None or not uri.strip():
            raise InvalidImageURIError(uri)
        self._uri: str = uri.strip()
        self._registry: str | None = None
        self._user_name: str | None = None
        self._digest: str | None = None

        remainder = self._uri
        if "@" in remainder:
            remainder, self._digest = remainder.split("@", 1)
            if not self._digest:
                raise InvalidImageURIError(uri)

        segments = remainder.split("/")
        if any(not segment for segment in segments):
            raise InvalidImageURIError(uri)

        if len(segments) >= 3:
            self._registry = segments[0]
            self._user_name = "/".join(segments[1:-1])
        elif len(segments) == 2:
            if _looks_like_registry(segments[0]):
                self._registry = segments[0]
            else:
                self._user_name = segments[0]

        name_and_tag = segments[-1]
        # A colon in the last segment always separates the tag since the port
        # can only appear in the registry segment.
        if ":" in name_and_tag:
            self._name, self._tag = name_and_tag.split(":", 1)
            if not self._name or not self._tag:
                raise InvalidImageURIError(uri)
        else:
            self._name = name_and_tag
            self._tag = _DEFAULT_TAG

    @property
    def registry(self) -> str | None:
        return self._registry

    @property
    def user_name(self) -> str | None:
        return self._user_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def digest(self) -> str | None:
        return self._digest

    @property
    def name_and_tag(self) -> str:
        return f"{self._name}:{self._tag}"

    @property
    def uri_user_name_and_tag(self) -> str:
        if self._user_name:
            return f"{self._user_name}/{self.name_and_tag}"
        return self.name_and_tag

    @property
    def absolute_uri(self) -> str:
        """Returns the full reference including registry and digest if present."""
        uri = self.uri_user_name_and_tag
        if self._registry:
            uri = f"{self._registry}/{uri}"
        if self._digest:
            uri = f"{uri}@{self._digest}"
        return uri

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DockerImageURI):
            return NotImplemented
        return self.absolute_uri == other.absolute_uri

    def __hash__(self) -> int:
        return hash(self.absolute_uri)

    def __str__(self) -> str:
        return self.absolute_uri

    def __repr__(self) -> str:
        return f"DockerImageURI({self.absolute_uri!r})"
