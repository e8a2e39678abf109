"""API routes package."""

from . import auth, clusters, health

__all__ = ["health", "auth", "clusters"]
