"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env file
as a fallback. Secrets (session signing key, Google OAuth client credentials)
have no defaults: if they are missing, building the Settings object raises a
validation error and the process refuses to start.

Pydantic Settings automatically:
  1. Reads from environment variables (highest priority)
  2. Falls back to .env file values
  3. Uses defaults defined here (lowest priority)

Usage:
    from app.config import settings
    print(settings.SESSION_TTL_HOURS)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the Book Catalog API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Signs the short-lived OAuth state tokens
      - GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET: Google OAuth client credentials
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Book Catalog API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/catalog.db"

    # --- Sessions ---
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    SESSION_TTL_HOURS: int = 24
    SESSION_COOKIE_NAME: str = "catalog_session"
    # Keep False for local http development; browsers drop secure cookies over http
    SESSION_COOKIE_SECURE: bool = False

    # --- Google OAuth ---
    GOOGLE_CLIENT_ID: str
    GOOGLE_CLIENT_SECRET: str
    GOOGLE_REDIRECT_URI: str = "http://localhost:8000/auth/google/callback"
    OAUTH_STATE_COOKIE_NAME: str = "oauth_state"
    OAUTH_STATE_TTL_MINUTES: int = 10

    # Where the browser lands after the Google callback
    FRONTEND_URL: str = "http://localhost:3000"

    # --- Catalog / users ---
    DEFAULT_COVER_IMAGE_URL: str = "https://via.placeholder.com/300x400?text=Book+Cover"
    ACTIVE_USER_WINDOW_MINUTES: int = 30

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
