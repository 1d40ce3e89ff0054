"""API routers."""

from netmetrics.api.routers import admin, metrics

__all__ = [
    "admin",
    "metrics",
]
