"""Router configuration.

A frozen dataclass, so settings cannot drift after the router is built.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(strict=True, static_dir="./public")
    """

    # Strict routes reject an unexpected trailing slash
    strict: bool = False

    # Served before any route when set
    static_dir: str | Path | None = None

    # Body of the default 404 fallback
    not_found_body: str = "Not Found"

    # Include tracebacks in 500 responses from the ASGI bridge
    debug: bool = False
