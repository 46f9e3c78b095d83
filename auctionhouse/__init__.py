"""Timed auction HTTP service with batched bid ingestion backed by MongoDB."""

__version__ = "0.1.0"