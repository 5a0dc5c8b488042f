"""
Configuration module for the Smart Restaurants service.

Loads environment variables (and an optional .env file) and provides
configuration settings for the database, logging, sessions and the
recommendation scorer.
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: SQLAlchemy connection string
        environment: Deployment environment (development, production, test)
        log_level: Optional override of the environment's log level
        session_secret: Secret used to sign the profile session cookie
        default_table_capacity: Tables assumed when a restaurant has none recorded
        recommendation_tie_break: Ordering policy inside a cuisine group
        recommendation_limit: Maximum number of recommended restaurants
    """

    # Database configuration
    database_url: str = Field(
        default="sqlite:///restaurants.db",
        alias="DATABASE_URL",
        description="SQLAlchemy connection string"
    )

    seed_data_path: str = Field(
        default="data/restaurants.json",
        alias="SEED_DATA_PATH",
        description="JSON file with restaurant listings used for seeding"
    )

    # Runtime
    environment: str = Field(
        default="development",
        alias="APP_ENV",
        description="development, production or test"
    )

    log_level: Optional[str] = Field(
        default=None,
        alias="LOG_LEVEL",
        description="Overrides the environment's default log level"
    )

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5050, alias="PORT")

    session_secret: str = Field(
        default="smart-restaurants-secret-change-in-production",
        alias="SESSION_SECRET",
        description="Signing key for the active-profile session cookie"
    )

    # Booking
    default_table_capacity: int = Field(
        default=5,
        alias="DEFAULT_TABLE_CAPACITY",
        gt=0,
        description="Capacity used when a restaurant has no valid table count"
    )

    # Recommendations
    recommendation_tie_break: str = Field(
        default="stable",
        alias="RECOMMENDATION_TIE_BREAK",
        pattern="^(stable|random)$",
        description="Ordering inside a cuisine group: stable or random"
    )

    recommendation_limit: int = Field(
        default=3,
        alias="RECOMMENDATION_LIMIT",
        gt=0
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings instance with loaded configuration
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
