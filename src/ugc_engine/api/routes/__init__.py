"""API route modules."""

from ugc_engine.api.routes import briefs, health, ugc

__all__ = ["briefs", "health", "ugc"]
