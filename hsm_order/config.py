"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    hsm_env: str = "development"
    hsm_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Arrangement defaults
    hsm_default_threshold_mode: int = 3
    hsm_bitmap_size: int = 500
    hsm_magnification: float = 5.0
    # 0 = no limit on points per request
    hsm_max_points: int = 0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
