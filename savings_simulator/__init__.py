"""Savings product simulator: projection engine, catalog and HTTP API."""

__version__ = "0.1.0"
