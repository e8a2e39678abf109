"""Repositories package for data access layer."""

from .session import GROUPS_ATTRIBUTE, SessionRepository

__all__ = ["SessionRepository", "GROUPS_ATTRIBUTE"]
