"""RouteDoc: API documentation from JavaScript route definitions."""

__version__ = "0.1.0"
