"""ASGI bridge — lets any ASGI server host a Router."""
