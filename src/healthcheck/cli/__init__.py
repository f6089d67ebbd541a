"""Command implementations behind the healthcheck CLI."""
