"""Switchback exception hierarchy.

Shared across the pattern compiler, Router, and middleware so every
module raises and catches the same types.
"""


class SwitchbackError(Exception):
    """Base for all switchback-specific errors."""


class ConfigurationError(SwitchbackError):
    """Raised when router setup is invalid.

    Registration is a startup-time operation, so these are meant to
    fail loudly rather than be caught.
    """


class PatternError(ConfigurationError):
    """A route template could not be compiled into a matcher.

    Raised at registration time, typically because a custom
    ``:name(...)`` capture is not valid regular expression syntax.
    The offending template is kept on ``path``.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid route template {path!r}: {reason}")
