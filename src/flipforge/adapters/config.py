# src/flipforge/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # Analysis service
    # -----------------------------
    API_BASE_URL: str = Field(default="http://127.0.0.1:8000")
    HTTP_TIMEOUT_S: float = Field(default=20.0)

    LENDER_REPORT_FILENAME: str = Field(default="flipforge_lender_report_v0.pdf")

    # "Copied" feedback lifetimes (presentation only)
    COPY_FEEDBACK_SECONDS: float = Field(default=1.2)
    METRIC_COPY_FEEDBACK_SECONDS: float = Field(default=0.9)

    # -----------------------------
    # Draft assumption fallbacks (server normally supplies these)
    # -----------------------------
    DEFAULT_CLOSING_COST_PCT: float = Field(default=0.03)
    DEFAULT_SELLING_COST_PCT: float = Field(default=0.08)
    DEFAULT_HOLDING_MONTHS: int = Field(default=6)
    DEFAULT_ANNUAL_INTEREST_RATE: float = Field(default=0.10)
    DEFAULT_LOAN_TO_COST_PCT: float = Field(default=0.80)
    DEFAULT_REQUIRED_PROFIT_MARGIN_PCT: float = Field(default=0.15)

    model_config = SettingsConfigDict(
        env_prefix="FLIPFORGE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("API_BASE_URL", mode="before")
    @classmethod
    def _normalize_base_url(cls, v: Any) -> Any:
        url = str(v or "").strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"API_BASE_URL must be an http(s) URL. Got: {v!r}")
        return url

    @field_validator(
        "DEFAULT_CLOSING_COST_PCT",
        "DEFAULT_SELLING_COST_PCT",
        "DEFAULT_ANNUAL_INTEREST_RATE",
        "DEFAULT_LOAN_TO_COST_PCT",
        "DEFAULT_REQUIRED_PROFIT_MARGIN_PCT",
        mode="before",
    )
    @classmethod
    def _to_non_negative_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("HTTP_TIMEOUT_S", "COPY_FEEDBACK_SECONDS", "METRIC_COPY_FEEDBACK_SECONDS", mode="before")
    @classmethod
    def _seconds_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("durations must be > 0")
        return f


config = AppConfig()
