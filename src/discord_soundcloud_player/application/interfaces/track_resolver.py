"""Port interfaces for resolving tracks and enriching their display metadata."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from discord_soundcloud_player.domain.shared.types import NonEmptyStr, PositiveInt

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ...domain.music.value_objects import StreamSource


class TrackResolver(ABC):
    """Interface for turning URLs and search queries into playable tracks.

    Implementations raise ``TrackNotFoundError``, ``ProviderUnavailableError``
    or ``UnsupportedSourceError`` (all ``ResolutionError``).
    """

    @abstractmethod
    async def resolve_url(self, url: NonEmptyStr) -> "Track":
        """Resolve a provider URL to a single track."""
        ...

    @abstractmethod
    async def search(self, query: NonEmptyStr, limit: PositiveInt) -> list["Track"]:
        """Search the provider. Returns an ordered, possibly empty list."""
        ...

    @abstractmethod
    async def open_stream(self, track: "Track") -> "StreamSource":
        """Produce a directly playable media source for the track."""
        ...

    @abstractmethod
    def is_provider_url(self, query: str) -> bool:
        """Whether the query is a link to the supported provider."""
        ...


class MetadataEnricher(ABC):
    """Best-effort lookup of author, thumbnail and canonical link for a track."""

    @abstractmethod
    async def enrich(self, track: "Track") -> "Track":
        """Return an enriched copy.

        Raises:
            MetadataEnrichmentError: The lookup failed; callers keep the original track.
        """
        ...
