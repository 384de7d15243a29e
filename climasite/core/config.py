"""Application configuration"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "ClimaSite Orders"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Order lifecycle and payment reconciliation for the ClimaSite storefront"

    # Security
    SECRET_KEY: str = Field(default="change-me")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30)
    ALGORITHM: str = "HS256"

    # Database
    DATABASE_URL: str = Field(default="sqlite:///./climasite.db")

    # Stripe Payment Processing
    STRIPE_SECRET_KEY: Optional[str] = Field(default=None)
    STRIPE_WEBHOOK_SECRET: Optional[str] = Field(default=None)
    STRIPE_WEBHOOK_TOLERANCE: int = Field(default=300)  # seconds

    # Orders
    DEFAULT_CURRENCY: str = Field(default="USD")
    ORDERS_MAX_PAGE_SIZE: int = Field(default=100)

    # CORS
    ALLOWED_HOSTS: list[str] = Field(default=["http://localhost:4200"])

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Development
    DEBUG: bool = Field(default=False)
    TESTING: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")


settings = Settings()
