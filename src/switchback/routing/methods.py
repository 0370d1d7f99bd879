"""Supported HTTP methods.

The route table keeps one bucket per member of ``SUPPORTED_METHODS``.
Anything else is an unrecognized verb and never matches.
"""

from http import HTTPMethod

# Order matters: match_all() registers in this order
SUPPORTED_METHODS: tuple[HTTPMethod, ...] = (
    HTTPMethod.GET,
    HTTPMethod.PUT,
    HTTPMethod.POST,
    HTTPMethod.DELETE,
    HTTPMethod.OPTIONS,
    HTTPMethod.HEAD,
    HTTPMethod.TRACE,
    HTTPMethod.CONNECT,
    HTTPMethod.PATCH,
)


def parse_method(value: str | HTTPMethod) -> HTTPMethod | None:
    """Normalize *value* to a supported ``HTTPMethod``.

    Comparison is case-insensitive. Returns ``None`` for verbs the
    router does not know about.
    """
    if isinstance(value, HTTPMethod):
        return value if value in SUPPORTED_METHODS else None
    try:
        method = HTTPMethod(value.strip().upper())
    except ValueError:
        return None
    return method if method in SUPPORTED_METHODS else None
