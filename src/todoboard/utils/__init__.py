"""Utility functions."""

from .ids import is_provisional, new_id, provisional_id

__all__ = [
    "is_provisional",
    "new_id",
    "provisional_id",
]
