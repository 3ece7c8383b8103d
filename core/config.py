from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Property Onboarding API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domain
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = Field(None, env="FRONTEND_DOMAIN")

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (persistence for created team members / tenants)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Avatar uploads
    # -------------------------------------------------
    AVATAR_MAX_BYTES: int = Field(5 * 1024 * 1024, env="AVATAR_MAX_BYTES", description="Maximum avatar size in bytes (default: 5MB)")
    AVATAR_ALLOWED_EXTENSIONS: List[str] = [".png", ".jpg", ".jpeg", ".gif"]
    AVATAR_URL_EXPIRY_SECONDS: int = Field(86400, env="AVATAR_URL_EXPIRY_SECONDS")

    # -------------------------------------------------
    # Wizard sessions
    # -------------------------------------------------
    WIZARD_SESSION_TTL_SECONDS: int = Field(3600, env="WIZARD_SESSION_TTL_SECONDS", description="Idle lifetime of an open wizard (default: 1 hour)")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = ["http://localhost:5173", "http://localhost:3000"]

if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
