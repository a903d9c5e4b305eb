"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./sincro.db"

    # External Services
    postal_code_api_base: str = "https://viacep.com.br/ws"

    # Service
    service_name: str = "sincro-dashboard"
    log_level: str = "INFO"
    company_name: str = "Sincro Acessibilidade"

    # First administrator, created when the users table is empty
    default_admin_name: str = "Administrador Sincro"
    default_admin_email: str = "admin@sincro.com"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Business rules
    deadline_window_days: int = 15
    default_warranty_days: int = 365
    receivable_due_days: int = 30


settings = Settings()
