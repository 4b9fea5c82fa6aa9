"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    api_v1_prefix: str = "/api/v1"
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:4173"
    rate_limit_enabled: bool = True

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_anon_key: str = "test-anon-key"
    supabase_service_role_key: str = "test-service-role-key"
    supabase_db_schema: str = "public"
    users_table: str = "users"

    # Avatar defaults for newly provisioned users
    avatar_bucket: str | None = None
    default_avatar_path: str = "defaults/avatar.png"
    default_avatar_url: str = (
        "https://cdn.pixabay.com/photo/2016/08/08/09/17/avatar-1577909_960_720.png"
    )

    # Session cookie set by the client after OTP verification
    session_cookie_name: str = "docvault-session"

    # Courier Configuration (OTP email delivery)
    courier_api_key: str = ""
    otp_email_subject: str = "Your docvault verification code"
    otp_email_template_id: str | None = None

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"


settings = Settings()
