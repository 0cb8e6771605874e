"""Configuration and settings for the qti-render CLI.

Loads settings from environment variables and/or a .env file. The library
entry points never read these settings; they take option records instead.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """CLI settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"

    # Report code highlighting
    highlight_code: bool = False
    highlight_style: str = "default"
    highlight_inline_styles: bool = False

    # Image rewriting: prefix joined with resolved asset paths
    asset_base_url: str = ""

    # BeautifulSoup tree builder for post-processing passes
    html_parser_features: str = "html.parser"

    class Config:
        """Pydantic settings configuration."""

        env_prefix = "QTI_RENDER_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
