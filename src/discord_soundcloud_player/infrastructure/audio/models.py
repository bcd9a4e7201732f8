"""Pydantic models for yt-dlp data transformation and configuration.

These are infrastructure-specific models for parsing the info dicts yt-dlp
returns for SoundCloud and configuring the options handed to ``YoutubeDL``.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_soundcloud_player.domain.shared.types import (
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
)

DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
UNKNOWN_TITLE: Final[str] = "Unknown Title"


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single audio format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None
    protocol: NonEmptyStr | None = None
    http_headers: dict[str, str] = Field(default_factory=dict)


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result for a SoundCloud track.

    Flat search entries carry only ``url``/``title``/``duration``; full
    extraction adds the direct stream ``url``, ``formats`` and headers.
    Before-validators coerce garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    webpage_url: HttpUrlStr | None = None
    url: NonEmptyStr | None = None
    title: NonEmptyStr = UNKNOWN_TITLE
    duration: NonNegativeInt | None = None
    thumbnail: HttpUrlStr | None = None
    uploader: NonEmptyStr | None = None
    http_headers: dict[str, str] = Field(default_factory=dict)
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator("webpage_url", "url", "thumbnail", "uploader", mode="before")
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return UNKNOWN_TITLE
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """SoundCloud reports fractional seconds; round down, drop garbage."""
        if v is None:
            return None
        try:
            val = int(float(v))
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @field_validator("http_headers", mode="before")
    @classmethod
    def _coerce_headers(cls, v: Any) -> dict[str, str]:
        if not isinstance(v, dict):
            return {}
        return {str(k): str(val) for k, val in v.items()}

    @property
    def page_url(self) -> str | None:
        """The public track page: ``webpage_url`` on full info, ``url`` on flat entries."""
        if self.webpage_url:
            return self.webpage_url
        if self.url and self.url.startswith(("http://", "https://")):
            return self.url
        return None


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    default_search: NonEmptyStr = "scsearch"
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    format: NonEmptyStr | None = None
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
