"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for services and adapters. Components are created
on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.notifier import Notifier
    from ..application.interfaces.track_resolver import MetadataEnricher, TrackResolver
    from ..application.interfaces.voice_adapter import VoiceAdapter
    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.search_cache import SearchCache
    from ..application.services.search_service import SearchApplicationService
    from ..application.services.session_registry import GuildSessionRegistry
    from ..infrastructure.audio.oembed_enricher import OEmbedEnricher
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. Discord-bound
    adapters (voice, notifier) need :meth:`set_bot` to have been called.
    """

    settings: Settings
    _bot: Bot | None = None

    # In-memory state
    _session_registry: GuildSessionRegistry | None = None
    _search_cache: SearchCache | None = None

    # Infrastructure adapters
    _track_resolver: TrackResolver | None = None
    _metadata_enricher: MetadataEnricher | None = None
    _voice_adapter: VoiceAdapter | None = None
    _notifier: Notifier | None = None

    # Application services
    _search_service: SearchApplicationService | None = None
    _playback_service: PlaybackApplicationService | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === In-memory state ===

    @property
    def session_registry(self) -> GuildSessionRegistry:
        if self._session_registry is None:
            from ..application.services.session_registry import GuildSessionRegistry

            self._session_registry = GuildSessionRegistry()
        return self._session_registry

    @property
    def search_cache(self) -> SearchCache:
        if self._search_cache is None:
            from ..application.services.search_cache import SearchCache

            playback = self.settings.playback
            self._search_cache = SearchCache(
                ttl_seconds=playback.search_cache_ttl_seconds,
                max_entries=playback.search_cache_max_entries,
            )
        return self._search_cache

    # === Infrastructure Adapters ===

    @property
    def track_resolver(self) -> TrackResolver:
        """Get the SoundCloud track resolver."""
        if self._track_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import SoundCloudResolver

            self._track_resolver = SoundCloudResolver(
                self.settings.soundcloud, self.settings.audio
            )
        return self._track_resolver

    @property
    def metadata_enricher(self) -> MetadataEnricher:
        """Get the oEmbed metadata enricher."""
        if self._metadata_enricher is None:
            from ..infrastructure.audio.oembed_enricher import OEmbedEnricher

            self._metadata_enricher = OEmbedEnricher(self.settings.soundcloud)
        return self._metadata_enricher

    @property
    def voice_adapter(self) -> VoiceAdapter:
        """Get the voice adapter."""
        if self._voice_adapter is None:
            from ..infrastructure.discord.adapters.voice_adapter import (
                DiscordVoiceAdapter,
            )

            self._voice_adapter = DiscordVoiceAdapter(self.bot, self.settings.audio)
        return self._voice_adapter

    @property
    def notifier(self) -> Notifier:
        """Get the text-channel notifier."""
        if self._notifier is None:
            from ..infrastructure.discord.services.notifier import DiscordNotifier

            self._notifier = DiscordNotifier(self.bot)
        return self._notifier

    # === Application Services ===

    @property
    def search_service(self) -> SearchApplicationService:
        """Get the search application service."""
        if self._search_service is None:
            from ..application.services.search_service import SearchApplicationService

            self._search_service = SearchApplicationService(
                track_resolver=self.track_resolver,
                search_cache=self.search_cache,
                settings=self.settings.playback,
            )
        return self._search_service

    @property
    def playback_service(self) -> PlaybackApplicationService:
        """Get the playback application service."""
        if self._playback_service is None:
            from ..application.services.playback_service import (
                PlaybackApplicationService,
            )

            self._playback_service = PlaybackApplicationService(
                registry=self.session_registry,
                search_service=self.search_service,
                track_resolver=self.track_resolver,
                metadata_enricher=self.metadata_enricher,
                voice_adapter=self.voice_adapter,
                notifier=self.notifier,
                settings=self.settings.playback,
            )
        return self._playback_service

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Release network resources and drop cached state."""
        enricher = self._metadata_enricher
        if enricher is not None and hasattr(enricher, "close"):
            oembed: OEmbedEnricher = enricher  # type: ignore[assignment]
            await oembed.close()

        if self._search_cache is not None:
            self._search_cache.clear()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
