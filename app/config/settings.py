from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List

from app.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    # Backend selection: supabase | firestore | memory
    storage_backend: str = "supabase"

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for creating auth users
    supabase_jwt_secret: Optional[str] = None

    # Firebase (service account)
    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None

    # Tokens for the in-memory backend
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_in: int = 3600

    # Passwords
    bcrypt_rounds: int = 12

    # Search
    search_scan_limit: int = 100
    search_result_limit: int = 10

    # App
    app_name: str = "collab-hub-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_firebase_private_key(self) -> Optional[str]:
        if not self.firebase_private_key:
            return None
        return self.firebase_private_key.replace("\\n", "\n")

    def require(self, *names: str) -> None:
        """Raise ConfigurationError naming every listed setting that is empty."""
        missing = [name.upper() for name in names if not getattr(self, name, None)]
        if missing:
            raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
