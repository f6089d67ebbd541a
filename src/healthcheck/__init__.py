"""healthcheck - lightweight health check tool."""

__version__ = "0.1.0"
