"""MetadataEnricher backed by SoundCloud's public oEmbed endpoint."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from discord_soundcloud_player.application.interfaces.track_resolver import MetadataEnricher
from discord_soundcloud_player.config.settings import SoundCloudSettings
from discord_soundcloud_player.domain.music.entities import Track
from discord_soundcloud_player.domain.shared.exceptions import MetadataEnrichmentError
from discord_soundcloud_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class OEmbedResponse(BaseModel):
    """The subset of the oEmbed document used for display."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    author_name: str | None = None
    thumbnail_url: str | None = None
    url: str | None = None

    @field_validator("author_name", "thumbnail_url", "url", mode="before")
    @classmethod
    def _coerce_blank(cls, v: object) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("thumbnail_url", "url")
    @classmethod
    def _require_http(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("http://", "https://")):
            return None
        return v


class OEmbedEnricher(MetadataEnricher):
    def __init__(
        self,
        settings: SoundCloudSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or SoundCloudSettings()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.request_timeout_s, follow_redirects=True
            )
        return self._client

    async def fetch(self, url: str) -> OEmbedResponse:
        """Fetch the oEmbed document for a track page."""
        try:
            response = await self._get_client().get(
                self._settings.oembed_url, params={"format": "json", "url": url}
            )
            response.raise_for_status()
            return OEmbedResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as exc:
            raise MetadataEnrichmentError(url, f"{type(exc).__name__}: {exc}") from exc

    async def enrich(self, track: Track) -> Track:
        data = await self.fetch(track.permalink_url)
        enriched = track.with_metadata(
            author=data.author_name,
            thumbnail_url=data.thumbnail_url,
            permalink_url=data.url,
        )
        if enriched is not track:
            logger.debug(LogTemplates.OEMBED_ENRICHED, track.title)
        return enriched

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
