# File: backend/app/core/config.py
# Version: v0.4.0
"""
Centralized application settings using Pydantic Settings.

Controls:
- App metadata and API prefix
- CORS origins
- Path to the default analysis config JSON
- Output dir for generated artifacts (EPS, JSON, CSV, HTML)
- Request limits for the neighbor endpoint
"""
from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # --- App ---
    API_PREFIX: str = "/api"
    APP_NAME: str = "BarrierForest"
    APP_VERSION: str = "0.4.0"

    # --- CORS ---
    CORS_ORIGINS: str = "*"  # comma-separated or '*' for all

    # --- Analysis config ---
    ANALYSIS_CONFIG_PATH: Path = Path(__file__).resolve().parents[1] / "config" / "analysis_default.json"

    # --- Output ---
    OUTPUT_DIR: Path = Path("backend/data/out")

    # --- Limits ---
    MAX_CONFORMATIONS: int = 5000  # per /api/neighbors request

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "info"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")

    @property
    def cors_origins_list(self) -> list[str]:
        raw = self.CORS_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]

settings = Settings()
