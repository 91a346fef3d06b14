"""Application configuration and settings management."""

from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FITBOX_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "FitBox Delivery API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root logging level.")
    data_root: Path = Field(default=Path("data"), description="Root directory for static data files.")
    zones_file: Path = Field(
        default=Path("data/delivery_zones.json"),
        description="Delivery zone registry used when no database is configured.",
    )
    delivery_timezone: str = Field(
        default="America/Vancouver",
        description="IANA timezone that delivery dates and cutoffs are expressed in.",
    )
    cutoff_hour: int = Field(default=18, ge=0, le=23, description="Local hour orders close on cutoff day.")
    free_delivery_threshold: Decimal = Field(default=Decimal("75.00"), ge=0)
    rate_limit_window_seconds: int = Field(default=60, ge=1)
    rate_limit_list: int = Field(default=100, ge=1)
    rate_limit_availability: int = Field(default=60, ge=1)
    rate_limit_validate: int = Field(default=50, ge=1)
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("data_root", "zones_file", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()

    @property
    def database_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


settings = Settings()
