import os
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "road-hazard-api"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./road_hazard.db"
    CREATE_TABLES_ON_START: bool = False
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Repair workflow
    REPAIR_SKIP_POLICY: str = "allow_skip"  # allow_skip | adjacent_only
    REPAIR_INCLUDE_ON_THE_WAY: bool = False

    # Requests
    REQUEST_TIMEOUT_SECONDS: float = 15.0
    HAZARD_STATS_LIMIT: int = 200
    HAZARD_MAP_LIMIT: int = 50

    # Client
    API_BASE_URL: str = "http://localhost:8000"

    class Config:
        case_sensitive = True
        # Load .env ONLY when not production
        env_file = ".env" if os.getenv("ENVIRONMENT") != "production" else None


settings = Settings()
