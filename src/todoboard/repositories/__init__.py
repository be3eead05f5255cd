"""Repository layer for board storage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .http import HttpRepository
from .memory import InMemoryRepository
from .protocol import RepositoryProtocol
from .yaml_file import YamlFileRepository

if TYPE_CHECKING:
    from ..config import Settings


def create_repository(settings: Settings) -> RepositoryProtocol:
    """Build the repository selected by ``settings.backend``."""
    if settings.backend == "memory":
        return InMemoryRepository()
    if settings.backend == "http":
        if not settings.api_url:
            raise ValueError("api_url is required for the http backend")
        return HttpRepository(settings.api_url, settings.api_token, settings.timeout)
    return YamlFileRepository(settings.data_file)


__all__ = [
    "HttpRepository",
    "InMemoryRepository",
    "RepositoryProtocol",
    "YamlFileRepository",
    "create_repository",
]
