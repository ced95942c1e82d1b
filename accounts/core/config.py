from datetime import timedelta

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # Bearer token lifecycle
    token_expire_days: int = Field(default=7, alias="TOKEN_EXPIRE_DAYS")
    token_cleanup_interval_minutes: float = Field(
        default=60, alias="TOKEN_CLEANUP_INTERVAL_MINUTES"
    )

    # SMTP Configuration
    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int | None = Field(default=None, alias="SMTP_PORT")
    smtp_user: str | None = Field(default=None, alias="SMTP_USER")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_from_email: str | None = Field(default=None, alias="SMTP_FROM_EMAIL")
    smtp_timeout: float = Field(default=30, alias="SMTP_TIMEOUT")

    # Frontend URL for activation and password reset links
    frontend_url: str | None = Field(default=None, alias="FRONTEND_URL")

    # Profile images
    upload_dir: str = Field(default="upload", alias="UPLOAD_DIR")
    profile_dir: str = Field(default="profile", alias="PROFILE_DIR")
    max_image_size_bytes: int = Field(default=2 * 1024 * 1024, alias="MAX_IMAGE_SIZE_BYTES")

    # Translation
    default_language: str = Field(default="en", alias="DEFAULT_LANGUAGE")

    @field_validator("smtp_host", "smtp_user", "smtp_password", "smtp_from_email", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for optional string fields."""
        if v == "":
            return None
        return v

    @field_validator("smtp_port", mode="before")
    @classmethod
    def empty_str_to_none_int(cls, v: str | int | None) -> int | None:
        """Convert empty strings to None for optional integer fields."""
        if v == "":
            return None
        if isinstance(v, str):
            try:
                return int(v)
            except ValueError:
                return None
        return v

    @property
    def token_expire_after(self) -> timedelta:
        return timedelta(days=self.token_expire_days)

    @property
    def token_cleanup_interval(self) -> timedelta:
        return timedelta(minutes=self.token_cleanup_interval_minutes)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
