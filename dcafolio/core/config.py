"""Application configuration."""

from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "DCAfolio"
    APP_ENV: str = "development"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Calendar context used for "due today" checks
    TIMEZONE: str = "UTC"

    # DCA scheduling
    # Python weekday numbers (Monday=0): Tuesday and Friday
    TWICE_WEEKLY_DAYS: List[int] = [1, 4]
    MIN_DCA_AMOUNT: float = 100.0

    # Portfolio
    QUANTITY_EPSILON: float = 1e-8
    CASH_SYMBOL: str = "USD"
    RISK_FREE_RATE: float = 0.04

    # CORS
    # Override with comma-separated env var: CORS_ORIGINS=https://a.com,https://b.com
    CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000,http://127.0.0.1:3000"
    CORS_ALLOWED_METHODS: List[str] = ["GET", "POST", "OPTIONS"]
    CORS_ALLOWED_HEADERS: List[str] = [
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ]

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 120
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("TWICE_WEEKLY_DAYS")
    @classmethod
    def validate_twice_weekly_days(cls, v: List[int]) -> List[int]:
        """Ensure exactly two distinct weekdays in 0..6."""
        if len(set(v)) != 2:
            raise ValueError("TWICE_WEEKLY_DAYS must contain two distinct weekdays")
        if any(day < 0 or day > 6 for day in v):
            raise ValueError("TWICE_WEEKLY_DAYS values must be between 0 (Monday) and 6 (Sunday)")
        return sorted(v)

    @field_validator("QUANTITY_EPSILON")
    @classmethod
    def validate_quantity_epsilon(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("QUANTITY_EPSILON must be positive")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
