"""Kanban board with optimistic, position-reconciled updates."""

__version__ = "0.1.0"
