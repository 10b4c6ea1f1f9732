from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "incubator"
    db_username: str = "incubator"
    db_password: str = "secret"

    tenant_code: str = ""
    expiring_window_days: int = 30
    accepted_application_status: str = "accepted"

    reminder_notifier: str = "log"
    reminder_webhook_url: str = ""
    reminder_webhook_timeout_seconds: int = 30
    send_reminders: bool = False
