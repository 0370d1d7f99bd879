"""Route and RouteMatch frozen dataclasses."""

import re
from dataclasses import dataclass

from switchback.middleware.protocol import Handler
from switchback.routing.pattern import compile_template


@dataclass(frozen=True, slots=True)
class Route:
    """A compiled route template.

    Created at registration time and never recompiled: the ``strict``
    value is the one the router had when the route was added.

    ``groups`` maps the compiler's group names to positions in
    ``keys``; only those groups are read back as parameter values.
    """

    path: str
    keys: tuple[str, ...]
    matcher: re.Pattern[str]
    strict: bool = False
    groups: tuple[tuple[str, int], ...] = ()

    @classmethod
    def compile(cls, path: str, strict: bool = False) -> "Route":
        """Compile *path* into a Route. Raises ``PatternError`` on bad syntax."""
        template = compile_template(path, strict)
        return cls(
            path=path,
            keys=template.keys,
            matcher=template.matcher,
            strict=strict,
            groups=template.groups,
        )

    def matches(self, path: str) -> bool:
        """True if the whole of *path* satisfies this template."""
        return self.matcher.fullmatch(path) is not None

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path* and return captured parameter values by name.

        Returns ``None`` when the path does not match. Optional
        parameters that were left out are absent from the result; for
        a repeated name the leftmost supplied value wins. Named groups
        inside a custom capture are not reported.
        """
        m = self.matcher.fullmatch(path)
        if m is None:
            return None

        params: dict[str, str] = {}
        for group, index in self.groups:
            value = m.group(group)
            if value is not None:
                params.setdefault(self.keys[index], value)
        return params


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
    handler: Handler
    path_params: dict[str, str]
