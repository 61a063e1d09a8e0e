"""
Application Configuration
Centralized configuration management with proper typing and validation.
"""

from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings with proper validation and defaults."""

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Sealed Cookie Sessions")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"

    # CORS settings
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ]

    # Session cookie settings
    # HttpOnly and Secure default to False so the API can be exercised over
    # plain HTTP during development. Set both to True in production.
    cookie_name: str = os.getenv("COOKIE_NAME", "session")
    cookie_http_only: bool = os.getenv("COOKIE_HTTP_ONLY", "False").lower() == "true"
    cookie_secure: bool = os.getenv("COOKIE_SECURE", "False").lower() == "true"
    cookie_max_age: int = int(os.getenv("COOKIE_MAX_AGE", str(7 * 24 * 60 * 60)))
    cookie_same_site: str = os.getenv("COOKIE_SAME_SITE", "lax")
    cookie_max_length: int = int(os.getenv("COOKIE_MAX_LENGTH", "4096"))

    # Cookie keys (hex). Left empty, fresh random keys are generated at startup
    # and every issued cookie becomes invalid on restart.
    cookie_hash_key: str = os.getenv("COOKIE_HASH_KEY", "")
    cookie_block_key: str = os.getenv("COOKIE_BLOCK_KEY", "")

    # Previous keys stay valid for decoding while clients migrate
    cookie_previous_hash_key: str = os.getenv("COOKIE_PREVIOUS_HASH_KEY", "")
    cookie_previous_block_key: str = os.getenv("COOKIE_PREVIOUS_BLOCK_KEY", "")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
