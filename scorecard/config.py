"""
Configuration settings using Pydantic.

Loads settings from environment variables (SCORECARD_ prefix) and .env file.
Defaults describe the workbook family the parser was written against.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Scorecard parser settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SCORECARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Sheet titles
    restaurant_sheet: str = "RESTAURANTES"
    disco_sheet: str = "DISCOTECAS"
    roi_sheet: str = "ROI   TIR"  # three spaces, as authored

    # Layout (zero-based from A1)
    name_row: int = 1
    header_row: int = 2
    first_data_row: int = 2
    roi_label_col: int = 2

    # Logging
    log_level: str = "WARNING"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
