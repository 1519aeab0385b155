from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# services/api/holidaze/core/config.py -> BASE_DIR == services/api
BASE_DIR = Path(__file__).resolve().parents[2]
PACKAGE_DIR = BASE_DIR / "holidaze"
DEFAULT_FIXTURE_VENUES_PATH = PACKAGE_DIR / "fixtures" / "venues_fixture.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # Environment
    env: str = Field(default="dev", validation_alias="ENV")

    # Application
    api_name: str = Field(default="holidaze-availability", validation_alias="API_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    user_agent: str = Field(default="Holidaze/0.1", validation_alias="USER_AGENT")

    # Noroff holidaze REST backend
    noroff_api_base: str = Field(
        default="https://v2.api.noroff.dev", validation_alias="NOROFF_API_BASE"
    )
    noroff_api_key: str | None = Field(default=None, validation_alias="NOROFF_API_KEY")
    source_fetch_timeout_secs: float = Field(
        default=10.0, validation_alias="SOURCE_FETCH_TIMEOUT_SECS"
    )

    # Booking source
    booking_source: Literal["noroff", "fixture"] = Field(
        default="fixture", validation_alias="BOOKING_SOURCE"
    )
    fixture_venues_path: str = Field(
        default=str(DEFAULT_FIXTURE_VENUES_PATH),
        validation_alias="FIXTURE_VENUES_PATH",
    )

    @field_validator("booking_source", mode="before")
    @classmethod
    def normalize_booking_source(cls, v: Any) -> str:
        if v is None:
            return "fixture"
        if not isinstance(v, str):
            raise TypeError("BOOKING_SOURCE must be a string")
        s = v.strip().lower()
        if s not in {"noroff", "fixture"}:
            raise ValueError("BOOKING_SOURCE must be one of: noroff, fixture")
        return s

    # Availability
    availability_concurrency_limit: int = Field(
        default=8, validation_alias="AVAILABILITY_CONCURRENCY_LIMIT"
    )

    @field_validator("availability_concurrency_limit")
    @classmethod
    def check_concurrency_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("AVAILABILITY_CONCURRENCY_LIMIT must be >= 1")
        return v

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """
        Supported env formats:
          - JSON list: '["http://localhost:5173"]'
          - Bracket list (no quotes): '[http://localhost:5173, https://holidaze.app]'
          - Comma-separated: 'http://localhost:5173, https://holidaze.app'
          - '*' wildcard
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if not isinstance(v, str):
            raise TypeError("cors_origins must be a string or list of strings")

        s = v.strip()
        if not s:
            return []
        if s == "*":
            return ["*"]

        if s.startswith("[") and s.endswith("]"):
            try:
                parsed = json.loads(s)
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
            except json.JSONDecodeError:
                inner = s[1:-1].strip()
                if not inner:
                    return []
                parts = [p.strip().strip('"').strip("'") for p in inner.split(",")]
                return [p for p in parts if p]

        parts = [p.strip() for p in s.split(",")]
        return [p for p in parts if p]

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, validation_alias="OTEL_ENABLED")
    otel_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_OTLP_ENDPOINT",
    )


settings = Settings()
