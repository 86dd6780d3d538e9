from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, List

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_REACTION_EMOJIS = ["👍", "❤️", "😂", "😮", "😢", "🔥"]

DEFAULT_BANNED_TERMS = ["idiot", "stupid", "moron", "loser", "shut up"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = Field(default="Campus Hub API", env="APP_NAME", description="Human readable service name")
    environment: str = Field(default="development", env="ENVIRONMENT", description="Deployment environment name")
    debug: bool = Field(default=True, env="DEBUG", description="Enable debug mode")

    cors_origins: Annotated[List[AnyHttpUrl], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost",
            "http://localhost:3000",
            "http://127.0.0.1",
            "http://127.0.0.1:3000",
        ],
        env="CORS_ORIGINS",
        description="List of allowed CORS origins",
    )

    cors_allow_origin_regex: str | None = Field(
        default=r"^https?://(localhost|127\.0\.0\.1|\[::1\])(:\d+)?$",
        env="CORS_ALLOW_ORIGIN_REGEX",
        description="Optional regular expression that matches allowed CORS origins",
    )

    database_user: str = Field(default="campus", env="DB_USER")
    database_password: str = Field(default="campus", env="DB_PASSWORD")
    database_host: str = Field(default="db", env="DB_HOST")
    database_port: int = Field(default=3306, env="DB_PORT")
    database_name: str = Field(default="campus", env="DB_NAME")
    database_url_override: str | None = Field(
        default=None,
        validation_alias="DATABASE_URL",
        description="Full SQLAlchemy URL taking precedence over the individual DB_* parts",
    )

    chat_history_limit: int = Field(
        default=100,
        env="CHAT_HISTORY_LIMIT",
        description="Number of most recent messages returned by a scoped fetch.",
    )
    chat_message_max_length: int = Field(default=2000, env="CHAT_MESSAGE_MAX_LENGTH")
    chat_poll_interval_seconds: int = Field(
        default=3,
        env="CHAT_POLL_INTERVAL_SECONDS",
        description="Interval clients should use when re-polling the message feed.",
    )
    presence_window_seconds: int = Field(
        default=300,
        env="PRESENCE_WINDOW_SECONDS",
        description="Users active within this window count as online.",
    )
    max_pinned_conversations: int = Field(default=3, env="MAX_PINNED_CONVERSATIONS")
    reaction_emojis: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_REACTION_EMOJIS),
        env="REACTION_EMOJIS",
        description="Reaction palette advertised to clients.",
    )

    moderation_service_url: AnyHttpUrl | None = Field(
        default=None,
        env="MODERATION_SERVICE_URL",
        description="Optional external text classifier consulted before persisting content.",
    )
    moderation_timeout_seconds: float = Field(default=5.0, env="MODERATION_TIMEOUT_SECONDS")
    moderation_banned_terms: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_BANNED_TERMS),
        env="MODERATION_BANNED_TERMS",
        description="Terms rejected by the built-in lexicon gate.",
    )

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[2] / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"mysql+pymysql://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):  # type: ignore[override]
        if v in (None, "", Ellipsis):
            return v
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, (list, tuple, set)):
            return list(v)
        return v

    @field_validator("reaction_emojis", "moderation_banned_terms", mode="before")
    @classmethod
    def split_comma_list(cls, value: Any) -> list[str] | Any:
        if value in (None, "", Ellipsis):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(item) for item in value]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
