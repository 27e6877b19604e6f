"""Bookkeeping core for a member-owned welfare organization."""

__version__ = "0.1.0"
