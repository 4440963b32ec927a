# medbill/core/config.py
from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from container + optionally from .env
    model_config = SettingsConfigDict(
        env_file=(".env",),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="medbill", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Billing
    # One of: round, ceil, floor, nearest05, nearest50, nearest1
    ROUND_OFF_METHOD: str = Field(
        default="round",
        validation_alias=AliasChoices("ROUND_OFF_METHOD", "round_off_method"),
    )
    GST_RATES: list[float] = Field(
        default_factory=lambda: [0, 5, 12, 18, 28],
        validation_alias=AliasChoices("GST_RATES", "gst_rates"),
    )
    CURRENCY_SYMBOL: str = Field(default="₹", validation_alias=AliasChoices("CURRENCY_SYMBOL", "currency_symbol"))


settings = Settings()
