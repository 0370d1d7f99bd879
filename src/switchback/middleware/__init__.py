"""Middleware: plain callables, no base class required.

A middleware is any callable matching:
    def mw(response: ResponseWriter, request: Request) -> bool

Built-in middleware:
    PublicFiles -- Serve files from a directory, fall through otherwise
"""

from switchback.middleware.protocol import Handler, Middleware
from switchback.middleware.static import PublicFiles, serve_public_files

__all__ = [
    "Handler",
    "Middleware",
    "PublicFiles",
    "serve_public_files",
]
