"""Test utilities for switchback routers.

    from switchback.testing import TestClient
"""

from switchback.testing.client import TestClient, TestResponse

__all__ = ["TestClient", "TestResponse"]
