from __future__ import annotations

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application-level settings for the shop console.

    This is separate from shop_erp.db.config.Settings, which focuses on the database layer.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="ERP System")
    APP_DESCRIPTION: str = Field(
        default=(
            "Administrative console for a job-shop machining and plating business. "
            "Master data, job orders, plating challans, invoices and attendance."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list or JSON array of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"])

    # Session guard
    SESSION_COOKIE_NAME: str = Field(
        default="erp_user", description="Cookie holding the signed-in identity."
    )
    SESSION_SECRET_KEY: str = Field(
        default="change-me", description="Secret used to sign the identity cookie."
    )
    SESSION_ALGORITHM: str = Field(default="HS256")
    SESSION_COOKIE_SECURE: bool = Field(default=False)
    SESSION_COOKIE_MAX_AGE: int = Field(
        default=60 * 60 * 24 * 365,
        description="Cookie lifetime in seconds; the identity stays until logout or expiry of the cookie.",
    )

    # Bootstrap administrator created when the users table is empty
    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: str = Field(default="admin")
    ADMIN_NAME: str = Field(default="Admin User")
    ADMIN_ROLE: str = Field(default="Administrator")

    # Startup behavior
    CREATE_TABLES_ON_STARTUP: bool = Field(
        default=True,
        description="If true, create missing tables from the ORM metadata at startup.",
    )
    AUTO_SEED: bool = Field(
        default=True,
        description="If true, ensure the bootstrap administrator exists at startup.",
    )
    SEED_DEMO_DATA: Optional[bool] = Field(
        default=None,
        description=(
            "Seed demonstration rows at startup. Defaults to true only when running "
            "on the local SQLite fallback."
        ),
    )

    LOG_LEVEL: str = Field(default="INFO")

    # Environment label
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (dev/test/prod)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        """
        Accept both JSON array format and comma-separated formats for CORS origins.
        """
        if v is None:
            return ["*"]
        if isinstance(v, str):
            parts = [p.strip() for p in v.split(",") if p.strip()]
            return parts or ["*"]
        if isinstance(v, list):
            return v or ["*"]
        return ["*"]


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """Return a new AppSettings instance populated from environment variables."""
    return AppSettings()
