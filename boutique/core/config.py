# boutique/core/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - DATABASE_URL (Supabase Postgres connection string)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY
      - ADMIN_EMAILS (comma separated, e.g. "owner@alfalah.in,ops@alfalah.in")
      - ORDER_EMAIL_FUNCTION (edge function name, default "send-order-email")
      - CLAMP_FIXED_DISCOUNT (cap fixed-amount coupons at the cart subtotal)
    """

    PROJECT_NAME: str = "Al Falah Boutique API"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Storefront admins, matched case-insensitively against the JWT email
    ADMIN_EMAILS: str = ""

    ORDER_EMAIL_FUNCTION: str = "send-order-email"

    # Off by default: a fixed coupon larger than the subtotal yields a negative total
    CLAMP_FIXED_DISCOUNT: bool = False

    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8080"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def admin_emails(self) -> set[str]:
        return {
            e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()
        }

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
