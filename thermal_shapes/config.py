"""Application configuration from environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Fixed camera frame, shared with the rendering layer
    frame_width: int = 120
    frame_height: int = 160

    log_level: str = "info"

    model_config = {
        "env_prefix": "THERMAL_SHAPES_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a root handler at the configured level."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
