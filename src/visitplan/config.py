"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="VISITPLAN_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Visit Planner API"
    api_prefix: str = "/api"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    data_root: Path = Field(default=Path("data"), description="Root directory for snapshots and run outputs.")
    snapshot_file: str = Field(default="workspace.json", description="Snapshot file name under data_root.")

    travel_time_rate: float = Field(default=25.0, ge=0.0, description="Pay per hour of driving.")
    distance_rate: float = Field(default=0.55, ge=0.0, description="Pay per kilometre driven.")
    per_site_rate: float = Field(default=50.0, ge=0.0, description="Pay per site visited.")
    avg_speed_kmh: float = Field(default=60.0, gt=0.0)
    max_daily_drive_time: float = Field(default=8.0, ge=0.0, description="Hours.")
    max_daily_distance: float = Field(default=500.0, ge=0.0, description="Kilometres.")

    home_base_latitude: float = Field(default=43.6532, ge=-90.0, le=90.0)
    home_base_longitude: float = Field(default=-79.3832, ge=-180.0, le=180.0)

    default_max_sites_per_user: int = Field(default=999, ge=0)
    max_pending_notifications: int = Field(
        default=500,
        ge=1,
        description="Undelivered notifications kept in memory; the oldest are discarded first.",
    )

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
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


settings = Settings()
