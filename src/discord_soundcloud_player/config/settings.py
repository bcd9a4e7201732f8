"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages

# Public SoundCloud web client id used when none is configured.
DEFAULT_SOUNDCLOUD_CLIENT_ID = "X0XUYgYuJk5p3BEb5NCV8t3MiGpfbRhz"


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    sync_on_startup: bool = True
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )

    @field_validator("test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            if int(snowflake) <= 0:
                raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
        return v


class SoundCloudSettings(BaseModel):
    """SoundCloud provider configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: SecretStr = Field(
        default=SecretStr(DEFAULT_SOUNDCLOUD_CLIENT_ID),
        validation_alias=AliasChoices("client_id", "soundcloud_client_id"),
    )
    oembed_url: str = "https://soundcloud.com/oembed"
    url_pattern: str = "soundcloud.com"
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)


class AudioSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: float = Field(default=0.5, ge=0.0, le=2.0)
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: str = "bestaudio/best"
    connect_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)


class PlaybackSettings(BaseModel):
    """Queue advance and search selection configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    max_consecutive_failures: int = Field(default=5, ge=1, le=50)
    search_result_limit: int = Field(default=15, ge=1, le=25)
    autocomplete_min_chars: int = Field(default=2, ge=0)
    search_cache_ttl_seconds: int = Field(
        default=300, ge=1, validation_alias=AliasChoices("search_cache_ttl_seconds", "cache_ttl")
    )
    search_cache_max_entries: int = Field(default=1000, ge=1)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD_TOKEN, SOUNDCLOUD_CLIENT_ID (flat shortcuts)
    - DISCORD__SYNC_ON_STARTUP, AUDIO__DEFAULT_VOLUME, etc. (nested with ``__``)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord_token: SecretStr | None = None
    soundcloud_client_id: SecretStr | None = None

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    soundcloud: SoundCloudSettings = Field(default_factory=SoundCloudSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper

    @model_validator(mode="after")
    def apply_flat_credentials(self) -> Settings:
        """Fold DISCORD_TOKEN / SOUNDCLOUD_CLIENT_ID into their nested sections."""
        if self.discord_token is not None and self.discord_token.get_secret_value():
            if not self.discord.token.get_secret_value():
                self.discord = self.discord.model_copy(update={"token": self.discord_token})
        if self.soundcloud_client_id is not None and self.soundcloud_client_id.get_secret_value():
            self.soundcloud = self.soundcloud.model_copy(
                update={"client_id": self.soundcloud_client_id}
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
