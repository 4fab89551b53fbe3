from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for writes that bypass RLS

    # Storage
    week_files_bucket: str = "week-files"
    career_photos_bucket: str = "career-photos"
    career_pdfs_bucket: str = "career-pdfs"
    career_ppts_bucket: str = "career-ppts"

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    ai_chat_timeout_sec: int = 30
    ai_chat_retention_days: int = 30
    ai_chat_history_limit: int = 50

    # Program
    default_group_name: str = "General Discussion"
    seeded_admin_emails: str = ""  # comma-separated, always treated as admin

    # App
    app_name: str = "career-guidance-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_seeded_admin_emails(self) -> List[str]:
        return [e.strip().lower() for e in self.seeded_admin_emails.split(",") if e.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
