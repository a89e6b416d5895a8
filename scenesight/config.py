"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    scenesight_env: str = "development"
    scenesight_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Rendering defaults for API requests that leave them out
    default_svg_width: int = 640
    default_svg_height: int = 640
    default_padding: float = 40.0

    # Culling slack around the viewport, in surface pixels
    offscreen_margin: float = 5.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
