"""Persistence layer for duetrack application."""

from duetrack.database.base import PaymentRepository
from duetrack.database.factories import create_sqlite_repository

__all__ = ["PaymentRepository", "create_sqlite_repository"]
