"""Application configuration."""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # API
    app_name: str = "Decision Tree Studio"
    debug: bool = False
    log_level: str = "INFO"

    # Storage
    data_dir: str = "data"
    database_url: str | None = None
    storage_key: str = "decisionTree"

    # Diagram output
    mermaid_direction: str = "TD"
    graphviz_font: str = "Arial"
    label_max_length: int = 30

    # Import limits
    max_tree_depth: int = 200

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the application."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
