"""Synthetic data generators for bookkeeping fixtures and demos."""
