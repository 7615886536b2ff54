"""
Engine settings and configuration management
Uses Pydantic Settings for environment variable handling and validation
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource


class Settings(BaseSettings):
    """Chart engine settings with environment variable support"""

    # Logging
    log_level: str = Field(default="INFO", description="Root log level for structlog/stdlib logging")
    log_json: bool = Field(default=False, description="Render log events as JSON instead of console lines")

    # Presentation defaults
    default_color_scheme: str = Field(
        default="blue",
        description="Palette used when a template names no scheme or an unknown one"
    )
    default_bins: int = Field(default=10, ge=1, description="Histogram bin count when the template omits bins")

    # Dataset limits
    max_chart_data_points: int = Field(
        default=2000,
        ge=1,
        description="Row cap applied by sample_rows_for_charts before building charts"
    )
    wordcloud_max_words: int = Field(default=100, ge=1, description="Maximum words kept by the word cloud")
    kde_steps: int = Field(
        default=50,
        ge=1,
        description="Kernel density evaluation steps (steps + 1 points across [min, max])"
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_parse_none_str="null"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to exclude .env file loading"""
        return init_settings, env_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("default_color_scheme")
    @classmethod
    def normalize_color_scheme(cls, v):
        return v.strip().lower() or "blue"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached engine settings
    Uses lru_cache to avoid reading environment variables multiple times
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache. Used primarily for testing.
    After calling this, the next call to get_settings() will
    create a new Settings instance with fresh environment variables.
    """
    get_settings.cache_clear()
