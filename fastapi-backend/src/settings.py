# src/settings.py
from __future__ import annotations

import json
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_OPENOBSERVE_URL = "http://localhost:5080"


class AppSettings(BaseSettings):
    # Application
    app_name: str = Field(default="aardi-voice-dashboard", env="APP_NAME")
    app_version: str = Field(default="0.1.0", env="APP_VERSION")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    # "production" without an OpenObserve URL means demo mode (simulated metrics only)
    environment: str = Field(default="development", env="ENVIRONMENT")

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_ORIGINS")
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_METHODS")
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"], env="CORS_ALLOW_HEADERS")
    cors_allow_credentials: bool = Field(default=False, env="CORS_ALLOW_CREDENTIALS")

    # OpenObserve
    openobserve_url: Optional[str] = Field(default=None, env="OPENOBSERVE_URL")
    openobserve_user: str = Field(default="admin@aardi.com", env="OPENOBSERVE_USER")
    openobserve_password: str = Field(default="aardi123", env="OPENOBSERVE_PASSWORD")
    openobserve_org: str = Field(default="default", env="OPENOBSERVE_ORG")
    openobserve_stream: str = Field(default="default", env="OPENOBSERVE_STREAM")
    openobserve_timeout: float = Field(default=5.0, env="OPENOBSERVE_TIMEOUT")

    # Celery
    celery_broker_url: Optional[str] = Field(default=None, env="CELERY_BROKER_URL")
    celery_result_backend: Optional[str] = Field(default=None, env="CELERY_RESULT_BACKEND")
    celery_task_default_queue: str = Field(default="default", env="CELERY_TASK_DEFAULT_QUEUE")

    # Synthetic metrics publisher
    metrics_publish_interval: float = Field(default=2.0, env="METRICS_PUBLISH_INTERVAL")
    metrics_source: str = Field(default="aardi-simulator", env="METRICS_SOURCE")

    # Host / Port for serving the app
    host: str = Field(default="0.0.0.0", env="HOST")
    port: int = Field(default=8000, env="PORT")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file="../.env",  # Look for .env in parent directory
        env_file_encoding="utf-8",
        protected_namespaces=(),
        validate_default=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def demo_mode(self) -> bool:
        """Production deployments without a configured store never query it."""
        return self.is_production and not self.openobserve_url

    @property
    def telemetry_url(self) -> str:
        return (self.openobserve_url or DEFAULT_OPENOBSERVE_URL).rstrip("/")

    @staticmethod
    def _parse_list(value: object) -> List[str]:
        """
        Accept JSON array, '*' literal, or comma-separated string.
        Always returns a list of stripped strings. Empty parts are discarded.
        """
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        if isinstance(value, str):
            s = value.strip()
            if s == "*":
                return ["*"]
            if s.startswith("[") and s.endswith("]"):
                try:
                    parsed = json.loads(s)
                    if not isinstance(parsed, list):
                        raise ValueError("Expected JSON array")
                    return [str(v).strip() for v in parsed if str(v).strip()]
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON array: {e}") from e
            return [part.strip() for part in s.split(",") if part.strip()]
        raise TypeError(f"Unsupported list value type: {type(value).__name__}")

    @field_validator(
        "cors_allow_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def _lists_from_env(cls, v: object) -> List[str]:
        return cls._parse_list(v)

    @field_validator("log_level", mode="after")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        x = (v or "INFO").upper()
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
        if x not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(valid)}")
        return x

    @field_validator("environment", mode="after")
    @classmethod
    def _normalize_environment(cls, v: str) -> str:
        return (v or "development").strip().lower()

    @field_validator("openobserve_url", mode="before")
    @classmethod
    def _blank_url_is_unset(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
