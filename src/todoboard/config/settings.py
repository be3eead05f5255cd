"""Application settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    backend: Literal["memory", "yaml", "http"] = Field(
        default="yaml",
        description="Storage backend for the board",
    )

    data_file: Path = Field(
        default=Path("board.yaml"),
        description="Board file for the yaml backend",
    )

    api_url: str | None = Field(
        default=None,
        description="Base URL of the document API for the http backend",
    )

    api_token: str | None = Field(
        default=None,
        description="Bearer token for the document API",
    )

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds for the http backend",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "TODOBOARD_",
    }
