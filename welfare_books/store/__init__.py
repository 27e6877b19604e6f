"""In-memory data stores for maintaining entity relationships."""

from welfare_books.store.financial import WelfareDataStore

__all__ = ["WelfareDataStore"]
