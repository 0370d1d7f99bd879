"""Mutable response sink.

Handlers and middleware write to a ``ResponseWriter`` instead of
returning a value. The host bridge reads it back once dispatch ends.
"""

DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


class ResponseWriter:
    """Collects status, headers, and body for one request.

    Usage::

        def hello(response: ResponseWriter, request: Request) -> None:
            response.set_header("Content-Type", "text/html; charset=utf-8")
            response.write("<h1>Hello</h1>")
    """

    __slots__ = ("_body", "headers", "status")

    def __init__(self) -> None:
        self.status: int = 200
        self.headers: list[tuple[str, str]] = []
        self._body = bytearray()

    def __repr__(self) -> str:
        return f"<ResponseWriter status={self.status} bytes={len(self._body)}>"

    def set_status(self, status: int) -> None:
        self.status = status

    def add_header(self, name: str, value: str) -> None:
        """Append a header, keeping any existing values for *name*."""
        self.headers.append((name, value))

    def set_header(self, name: str, value: str) -> None:
        """Replace every value of *name* with *value*."""
        lowered = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n.lower() != lowered]
        self.headers.append((name, value))

    def header(self, name: str) -> str | None:
        """First value of *name*, case-insensitive."""
        lowered = name.lower()
        for n, v in self.headers:
            if n.lower() == lowered:
                return v
        return None

    def write(self, data: str | bytes) -> int:
        """Append to the body. Strings are encoded as UTF-8."""
        chunk = data.encode("utf-8") if isinstance(data, str) else data
        self._body.extend(chunk)
        return len(chunk)

    @property
    def body(self) -> bytes:
        return bytes(self._body)

    @property
    def content_type(self) -> str:
        """The Content-Type that will be sent."""
        return self.header("content-type") or DEFAULT_CONTENT_TYPE
