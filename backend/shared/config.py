"""
Centralized configuration for the payments portal backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, BRUTE_FORCE_*).
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Payments Portal API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "https://localhost:3000",
        "https://localhost:3001",
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type", "Authorization"]

    # HTTP hardening
    max_body_bytes: int = 200 * 1024
    hsts_max_age: int = 30 * 24 * 60 * 60  # seconds

    # Tokens
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 8 * 60 * 60

    # Passwords
    password_pepper: str = ""
    bcrypt_rounds: int = 12

    # Registration / login policy
    registration_enabled: bool = True
    generic_login_errors: bool = False
    account_number_length: int = 10
    account_number_max_attempts: int = 10

    # Credential store backend
    credential_store: Literal["memory", "supabase"] = "memory"
    seed_demo_users: bool = False

    # Supabase (used when credential_store == "supabase")
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    # Rate limiting (all clients, per IP)
    rate_limit_requests: int = 300
    rate_limit_window: int = 10 * 60  # seconds

    # Stricter rate limiting on login/register (per IP)
    auth_rate_limit_requests: int = 10
    auth_rate_limit_window: int = 15 * 60  # seconds

    # Brute-force protection (seconds)
    brute_force_ip_free_retries: int = 3
    brute_force_ip_min_wait: int = 5 * 60
    brute_force_ip_max_wait: int = 60 * 60
    brute_force_identity_free_retries: int = 5
    brute_force_identity_min_wait: int = 10 * 60
    brute_force_identity_max_wait: int = 2 * 60 * 60
    brute_force_lifetime: int = 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
