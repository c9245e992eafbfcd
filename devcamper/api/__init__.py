"""API package exports."""

from devcamper.api.auth import router as auth_router
from devcamper.api.health import router as health_router
from devcamper.api.middleware import CorrelationIdMiddleware, RequestLoggingMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    "auth_router",
    "health_router",
]
