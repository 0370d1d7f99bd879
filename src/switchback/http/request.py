"""Read-only HTTP request descriptor.

Frozen metadata plus the already-received body. Handlers and middleware
see the same object; the router only ever replaces ``path_params``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from switchback.http.headers import Headers
from switchback.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` never carries the query string; that lives in ``query``.
    ``path_params`` is empty until a route matches, then holds the
    values captured by the route's named parameters.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string, as it arrived."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def with_path_params(self, params: Mapping[str, str]) -> "Request":
        """Return a copy carrying *params* as ``path_params``."""
        return replace(self, path_params=dict(params))

    # -- Factories --

    @classmethod
    def create(
        cls,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> "Request":
        """Build a request from a method and a request target.

        The query string, if any, is split off *target*::

            Request.create("GET", "/search?q=router")
        """
        path, _, query_string = target.partition("?")
        return cls(
            method=method,
            path=path,
            headers=Headers.from_mapping(headers),
            query=QueryParams(query_string),
            body=body,
        )

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any], body: bytes = b"") -> "Request":
        """Create a Request from an ASGI HTTP scope and its full body."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers.from_asgi(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            body=body,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
