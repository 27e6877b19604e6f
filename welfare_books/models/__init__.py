"""Domain models for welfare-organization bookkeeping."""

from welfare_books.models.base import Event

__all__ = ["Event"]
