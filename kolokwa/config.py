"""Application configuration from environment."""
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

# Load .env from project root (parent of kolokwa/) so env vars are available everywhere
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=str(_env_path), extra="ignore")

    app_name: str = "KoloKwa TechGuild"
    app_env: str = "development"
    debug: bool = False

    # Empty string = store not configured; store-backed routes answer 503
    database_url: str = "sqlite:///./kolokwa.db"

    # Public site URL used in invitation links ({base_url}/verify/{token})
    base_url: str = "http://localhost:3000"
    invite_expire_days: int = 7

    auth_jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    auth_token_expire_days: int = 7
    cookie_secure: bool = False

    @field_validator("auth_jwt_secret")
    @classmethod
    def strip_jwt_secret(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return (v or "").strip().rstrip("/")

    mailgun_api_key: str = ""
    mailgun_domain: str = ""
    mailgun_base_url: str = "https://api.mailgun.net"
    mailgun_from_email: str = "noreply@kolokwa.tech"
    mailgun_from_name: str = "KoloKwa TechGuild"

    @field_validator("mailgun_api_key", "mailgun_domain", "mailgun_base_url", "mailgun_from_email", mode="before")
    @classmethod
    def strip_mailgun(cls, v: str) -> str:
        return (v or "").strip()

    sendgrid_api_key: str = ""
    sendgrid_from_email: str = "noreply@kolokwa.tech"
    sendgrid_from_name: str = "KoloKwa TechGuild"

    # Staff account created at startup when both are set
    initial_admin_email: str = ""
    initial_admin_password: str = ""
    seed_sample_event: bool = False

    allowed_origins: list[str] = ["http://localhost:3000"]

    @property
    def mail_configured(self) -> bool:
        return bool((self.mailgun_api_key and self.mailgun_domain) or self.sendgrid_api_key)

    @property
    def database_configured(self) -> bool:
        return bool((self.database_url or "").strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
