"""
Barangay Portal — Application Configuration
Resident identity service settings. All config from environment / .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- App ---
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"
    cors_origins_csv: str = "http://localhost:3000"

    # --- Supabase (resident + family head tables) ---
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    residents_table: str = "residents"
    family_heads_table: str = "family_heads"

    # --- Auth (JWT bearer tokens) ---
    jwt_secret_key: str = "dev-secret-change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # --- Rate limiting ---
    rate_limit_per_minute: int = 60

    # --- Resident IDs ---
    resident_id_prefix: str = "R-"
    resident_id_min_digits: int = 3
    resident_id_max_attempts: int = 5   # retries on unique-index conflict

    # --- QR artifact ---
    qr_box_size: int = 10
    qr_border: int = 4

    # --- Derived ---
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_csv.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Cached singleton for application settings."""
    return Settings()
