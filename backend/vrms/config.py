"""
Configuration settings for VRMS backend
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    APP_NAME: str = "VRMS API"
    LOG_LEVEL: str = "INFO"

    # Overdue sweep
    SWEEP_INTERVAL_SECONDS: float = 60.0
    SWEEP_ON_STARTUP: bool = True
    MAX_VISIT_DURATION_HOURS: float = 8.0

    # Visit date/time fields are wall-clock values at the property
    SITE_TIMEZONE: str = "Asia/Kuala_Lumpur"

    # Load sample residents and facilities when the store is created
    SEED_ON_STARTUP: bool = True

    # Operator shown in the dashboard and used as default guard on check-in
    CURRENT_USER_ID: str = "admin1"
    CURRENT_USER_NAME: str = "Admin Guard"
    CURRENT_USER_ROLE: str = "admin"
    CURRENT_USER_EMAIL: str = "admin@property.com"

    # API Settings
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]


settings = Settings()
