from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Dict


class Settings(BaseSettings):
    # Supabase (Postgres)
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used by the seed script

    # Sessions
    session_secret: str = "default-secret-key-change-in-production"
    session_cookie_name: str = "sid"
    session_ttl_seconds: int = 24 * 60 * 60
    session_backend: str = "memory"  # memory | supabase

    # Google OAuth (enabled only when client id and secret are set)
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_callback_url: str = "/api/auth/google/callback"

    # Stripe
    stripe_secret_key: Optional[str] = None
    stripe_currency: str = "brl"
    credit_price_cents: int = 10

    # AI agents: credits charged per use
    ai_agent_costs: Dict[str, int] = {
        "listing_generator": 5,
        "image_generator": 10,
        "expert_amazon": 3,
        "expert_import": 3,
        "expert_action_plan": 5,
    }

    # App
    app_name: str = "sellerhub-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
