# src/SNAP/core/config.py
from __future__ import annotations

import json
from typing import Literal, Optional

from pydantic import AliasChoices, AnyHttpUrl, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ---- App ----
    APP_NAME: str = "SNAP API"
    APP_VERSION: str = "0.1.0"
    SCHOOL_NAME: str = "Escola Berçário Pintando 7"

    # ---- Logging ----
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("SNAP_LOG_LEVEL", "LOG_LEVEL"))
    LOG_JSON: bool = Field(default=False, validation_alias=AliasChoices("SNAP_LOG_JSON", "LOG_JSON"))

    # ---- Document store ----
    STORE_BACKEND: Literal["memory", "firestore"] = Field(
        default="memory",
        validation_alias=AliasChoices("SNAP_STORE_BACKEND", "STORE_BACKEND"),
    )
    FIREBASE_PROJECT_ID: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SNAP_FIREBASE_PROJECT_ID", "FIREBASE_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
    )
    # Service account: path to the JSON file or the raw JSON itself
    FIREBASE_SA_JSON_PATH: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SNAP_FIREBASE_SA_JSON_PATH", "GOOGLE_APPLICATION_CREDENTIALS"),
    )
    FIREBASE_SA_JSON: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SNAP_FIREBASE_SA_JSON", "FIREBASE_SA_JSON"),
    )

    # ---- Managed identity provider (Firebase Auth REST) ----
    FIREBASE_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SNAP_FIREBASE_API_KEY", "FIREBASE_API_KEY"),
    )
    IDENTITY_BASE_URL: str = "https://identitytoolkit.googleapis.com/v1"
    SECURETOKEN_BASE_URL: str = "https://securetoken.googleapis.com/v1"
    IDENTITY_TIMEOUT_SECONDS: float = 10.0

    # ---- Local override credential ----
    # Grants a local session without asking the identity provider. Disable in production.
    LOCAL_OVERRIDE_ENABLED: bool = Field(
        default=True,
        validation_alias=AliasChoices("SNAP_LOCAL_OVERRIDE_ENABLED", "LOCAL_OVERRIDE_ENABLED"),
    )
    LOCAL_OVERRIDE_USERNAME: str = Field(
        default="admin",
        validation_alias=AliasChoices("SNAP_LOCAL_OVERRIDE_USERNAME", "LOCAL_OVERRIDE_USERNAME"),
    )
    LOCAL_OVERRIDE_SECRET: str = Field(
        default="7777777",
        validation_alias=AliasChoices("SNAP_LOCAL_OVERRIDE_SECRET", "LOCAL_OVERRIDE_SECRET"),
    )
    LOCAL_SESSION_PATH: str = Field(
        default=".snap/local_storage.json",
        validation_alias=AliasChoices("SNAP_LOCAL_SESSION_PATH", "LOCAL_SESSION_PATH"),
    )
    LOCAL_SESSION_KEY: str = "local_user"

    # ---- Event dispatch ----
    DISPATCH_DELAY_MIN_SECONDS: float = 0.1
    DISPATCH_DELAY_MAX_SECONDS: float = 0.3
    WHATSAPP_BASE_URL: str = "https://wa.me"
    WHATSAPP_COUNTRY_CODE: str = "55"

    # ---- Notifications ----
    NOTIFICATION_TTL_SECONDS: float = 5.0

    # ---- Student report (Gemini) ----
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SNAP_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    )
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    REPORT_MOCK_DELAY_SECONDS: float = 1.5
    REPORT_TIMEOUT_SECONDS: float = 30.0

    # ---- Web / CORS ----
    cors_origins_raw: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SNAP_CORS_ORIGINS", "CORS_ORIGINS"),
    )
    # Only the validator sets this one.
    cors_origins: list[AnyHttpUrl] = Field(
        default_factory=list,
        validation_alias=AliasChoices("CORS_ORIGINS_PARSED_DO_NOT_USE"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SNAP_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _compute_cors(self) -> "Settings":
        """
        Populate `cors_origins` from SNAP_CORS_ORIGINS / CORS_ORIGINS,
        given either as a JSON array or as CSV.
        """
        raw = self.cors_origins_raw
        if not raw:
            return self
        raw = raw.strip()
        parsed: list[str] = []
        if raw.startswith("["):
            try:
                data = json.loads(raw)
                if isinstance(data, list):
                    parsed = [str(x).strip() for x in data if x]
            except ValueError:
                # not JSON; fall through to CSV
                pass
        if not parsed:
            parsed = [p.strip() for p in raw.split(",") if p.strip()]
        self.cors_origins = parsed  # type: ignore[assignment]
        return self

    @property
    def dispatch_delay_bounds(self) -> tuple[float, float]:
        lo = max(0.0, self.DISPATCH_DELAY_MIN_SECONDS)
        return lo, max(lo, self.DISPATCH_DELAY_MAX_SECONDS)


settings = Settings()
__all__ = ["settings", "Settings"]
