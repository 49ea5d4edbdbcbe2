"""API package exports."""

from chirpy.api.middleware import CorrelationIdMiddleware, HitCounter, HitCounterMiddleware
from chirpy.api.routes import router

__all__ = ["router", "CorrelationIdMiddleware", "HitCounter", "HitCounterMiddleware"]
