"""Recall backend: account-scoped areas, projects, resources and events."""

__version__ = "0.1.0"
