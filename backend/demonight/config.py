from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "demonight-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Demo Night")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/demonight_dev")
    redis_url: str = os.getenv("REDIS_URL", "redis://redis:6379/0")
    current_event_key: str = os.getenv("CURRENT_EVENT_KEY", "currentEvent")

    # Investment (pitch night) voting
    vote_budget_cap: int = int(os.getenv("VOTE_BUDGET_CAP", "100000"))  # whole dollars per attendee per award

    # Emails that are granted admin on registration
    admin_emails: list[str] = [e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()]

    # Tokens; access tokens outlive a whole event night
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    access_ttl_min: int = int(os.getenv("ACCESS_TTL_MIN", "360"))
    refresh_ttl_min: int = int(os.getenv("REFRESH_TTL_MIN", "10080"))  # 7d

settings = Settings()
