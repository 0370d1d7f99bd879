"""Route template compiler.

Turns an author-facing template into an anchored regular expression::

    "/test/:required"            -> ^\\/test\\/(?:(?P<p0_0>[^\\/]+?))\\/?$
    "/posts/:id.:format?"        -> id excludes "/", format excludes "/" and "."
    "/users/:id(\\d+)"           -> id constrained to digits
    "/assets/*"                  -> "*" greedily matches the rest of the path
    "/posts/(:slug)?"            -> "/(" opens a non-capturing group

Grammar of one parameter fragment: optional leading ``/``, optional
literal ``.``, ``:``, a word name, an optional parenthesized capture,
and an optional trailing ``?``.
"""

import re
from dataclasses import dataclass

from switchback.errors import PatternError

# "/(" starts a non-capturing alternative group
_CAPTURE_GROUP_START = re.compile(r"/\(")
# Separators and dots left after substitution are literal
_LITERAL_SEPARATORS = re.compile(r"([/.])")
_WILDCARD = re.compile(r"\*")
# (slash)(format):(name)(capture)(optional)
_PARAMETER = re.compile(r"(/)?(\.)?:(\w+)(?:(\(.*?\)))?(\?)?")

DEFAULT_CAPTURE = "[^/]+?"
FORMAT_CAPTURE = "[^/.]+?"


@dataclass(frozen=True, slots=True)
class ParameterFragment:
    """One ``:name`` occurrence in a template, prior to compilation.

    Empty strings mean "not present", e.g. ``slash == ""`` for a
    parameter with no leading separator.
    """

    definition: str
    slash: str
    format: str
    name: str
    capture: str
    optional: str

    @property
    def is_optional(self) -> bool:
        return bool(self.optional)

    def to_regex(self, group: str) -> str:
        """Synthesize the sub-expression that replaces this fragment.

        *group* names the capture so its value can be read back; naming
        does not change what the expression accepts.
        """
        parts: list[str] = []
        if not self.is_optional:
            parts.append(self.slash)
        parts.append("(?:")
        if self.is_optional:
            parts.append(self.slash)
        parts.append(self.format)

        if self.capture:
            inner = self.capture
        elif self.format:
            inner = FORMAT_CAPTURE
        else:
            inner = DEFAULT_CAPTURE
        parts.append(f"(?P<{group}>{inner})")

        parts.append(")")
        parts.append(self.optional)
        return "".join(parts)


def parse_fragments(path: str) -> list[ParameterFragment]:
    """Return every parameter fragment of *path*, left to right."""
    return [
        ParameterFragment(
            definition=m.group(0),
            slash=m.group(1) or "",
            format=m.group(2) or "",
            name=m.group(3),
            capture=m.group(4) or "",
            optional=m.group(5) or "",
        )
        for m in _PARAMETER.finditer(path)
    ]


def group_name(index: int, occurrence: int) -> str:
    """Name of the regex group for fragment *index*, *occurrence*-th copy."""
    return f"p{index}_{occurrence}"


@dataclass(frozen=True, slots=True)
class CompiledTemplate:
    """Matcher plus the bookkeeping needed to read values back.

    ``groups`` pairs every group name the compiler generated with the
    index of its key, ordered by position in the expression. Named
    groups written by the template author are not listed.
    """

    matcher: re.Pattern[str]
    keys: tuple[str, ...]
    groups: tuple[tuple[str, int], ...]


def compile_template(path: str, strict: bool = False) -> CompiledTemplate:
    """Compile a route template, keeping track of the generated groups.

    A custom capture that declares a group with the same name as a
    generated one fails to compile and raises ``PatternError``.
    """
    compiled = _CAPTURE_GROUP_START.sub("(?:/", path)
    fragments = parse_fragments(path)

    if not strict:
        compiled = f"{compiled}/?"

    keys: list[str] = []
    groups: list[tuple[str, int]] = []
    for index, fragment in enumerate(fragments):
        # Every copy of the definition is replaced, each with its own group name
        pieces = compiled.split(fragment.definition)
        rebuilt = [pieces[0]]
        for occurrence, piece in enumerate(pieces[1:]):
            group = group_name(index, occurrence)
            groups.append((group, index))
            rebuilt.append(fragment.to_regex(group))
            rebuilt.append(piece)
        compiled = "".join(rebuilt)
        keys.append(fragment.name)

    compiled = _LITERAL_SEPARATORS.sub(r"\\\1", compiled)
    compiled = _WILDCARD.sub("(.*)", compiled)

    try:
        matcher = re.compile(f"^{compiled}$")
    except re.error as exc:
        raise PatternError(path, str(exc)) from exc

    # Position in the expression, so the leftmost copy of a name reads first
    groups.sort(key=lambda pair: matcher.groupindex[pair[0]])
    return CompiledTemplate(matcher=matcher, keys=tuple(keys), groups=tuple(groups))


def compile_pattern(path: str, strict: bool = False) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a route template into ``(matcher, keys)``.

    ``keys`` lists parameter names in order of appearance, one entry per
    fragment (a repeated name appears twice). The matcher must be used
    with ``fullmatch`` and accepts the whole path only.

    When *strict* is false, one trailing ``/`` is tolerated.

    Raises ``PatternError`` if the result is not a valid expression,
    e.g. ``/users/:id(+)``.
    """
    template = compile_template(path, strict)
    return template.matcher, template.keys
