"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Late chunking service
    late_chunking_url: str = Field(
        default="",
        description=(
            "Base URL of the late chunking service; requests go to "
            "'{late_chunking_url}/late-chunking'. Required for ingestion."
        ),
    )
    late_chunking_timeout: float | None = Field(
        default=None,
        description="Request timeout in seconds. Unset means no timeout.",
    )

    # Internet Computer
    ic_url: str = "https://ic0.app"
    identity_pem_path: str = Field(
        default="",
        description="PEM file of the caller identity. Empty uses an ephemeral key.",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
