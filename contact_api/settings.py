from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3001
    root_path: str = ""

    debug: bool = False
    reload: bool = False
    environment: str = "development"

    database_url: str = Field(
        "sqlite+aiosqlite:///contact.db",
        pattern=r"^(postgresql\+asyncpg|mysql\+aiomysql|mssql\+aioodbc|sqlite\+aiosqlite)://.*$",
    )
    pool_size: int = 10
    pool_recycle: int = 30  # max connection age in seconds, checked at checkout
    pool_timeout: int = 30
    query_timeout: float = 30
    sql_show_statements: bool = False
    create_tables: bool = True

    emailjs_service_id: str | None = None
    emailjs_template_id: str | None = None
    emailjs_public_key: str | None = None
    emailjs_private_key: str | None = None
    emailjs_api_url: str = "https://api.emailjs.com/api/v1.0/email/send"
    emailjs_timeout: float = 10

    contact_recipient: str = "alexmerlo23@gmail.com"

    cors_origins: str = "*"
    trusted_proxy_hops: int = 1

    contact_rate_limit: int = 5
    general_rate_limit: int = 100
    rate_limit_window: int = 900

    max_page_limit: int | None = None

    sentry_dsn: str | None = None
    sentry_environment: str = "test"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
