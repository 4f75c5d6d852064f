"""
Risk Assessment Platform – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──
    APP_NAME: str = "Risk Assessment Platform"
    DEBUG: bool = False

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./riskassess.db"

    # ── Identity provider (Supabase) ──
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""

    # ── JWT (local verification of Supabase access tokens) ──
    SUPABASE_JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # ── AI events (ZAPT) ──
    ZAPT_APP_ID: str = ""
    ZAPT_EVENTS_URL: str = "https://api.zapt.ai/events"

    # ── Client ──
    API_BASE_URL: str = "http://127.0.0.1:8000"

settings = Settings()
