from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """
    Application configuration loaded from environment variables.
    Uses pydantic for validation and type safety.

    Every default here is for local development only.
    Override secrets and admin credentials for any real deployment.
    """
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite:///./clients.sqlite"

    # HMAC key for stored session ids
    # Changing this invalidates all existing sessions
    session_secret: str = "dev-change-me"

    # Fixed lifetime from issuance, no sliding renewal
    session_expire_hours: int = 8

    # secure=True enforces HTTPS only - set behind TLS termination
    cookie_secure: bool = False
    cookie_samesite: str = "lax"

    # POST /auth/demo logs in as the admin without a password
    demo_mode: bool = False

    admin_email: str = "admin@local"
    admin_password: str = "changeme"
    # Refuse to start when the admin cannot be seeded
    require_admin_seed: bool = False

    # Cross-origin callers allowed to send the session cookie
    # Empty means same-origin only; "*" never carries credentials
    cors_origins: List[str] = []
    static_dir: str = "public"

    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    def uses_default_secrets(self) -> bool:
        return self.session_secret == "dev-change-me" or self.admin_password == "changeme"


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance. Load once, reuse throughout application lifecycle.
    """
    return Settings()
