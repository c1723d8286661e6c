# themesmith/schemas/settings.py
"""
Centralized settings management using pydantic-settings.

This module defines a Settings model that loads configuration values from
`THEMESMITH_*` environment variables or a .env file. Both the rendering
service and the editor read their knobs from here.
"""
import functools
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Loads all themesmith environment variables into a structured model.

    Service-side fields configure the HTTP listener and the Tailwind CLI;
    editor-side fields configure how the editor reaches the service and how
    its fields treat user input.
    """

    # --- Rendering service ---
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    reload: bool = False
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    tailwind_version: str = Field(
        "v3.4.17",
        description="Tailwind CLI release; must be a v3 line for JS config files.",
    )
    tailwind_bin_path: Optional[str] = Field(
        None, description="Explicit path to the tailwindcss binary, if not the default."
    )
    minify: bool = False
    themes_dir: Path = Path("themes")

    # --- Theme editor ---
    service_url: str = "http://localhost:8080"
    request_timeout: float = 30.0
    max_retries: int = 0
    cancel_superseded: bool = True
    font_size_unit: str = "rem"
    weight_policy: Literal["reject", "clamp"] = "reject"

    model_config = SettingsConfigDict(
        env_prefix="THEMESMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns the process-wide settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Clear cache and reload (primarily for tests)."""
    get_settings.cache_clear()
    return get_settings()
