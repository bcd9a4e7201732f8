from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_soundcloud_player.application.interfaces.notifier import Notifier
from discord_soundcloud_player.application.interfaces.track_resolver import (
    MetadataEnricher,
    TrackResolver,
)
from discord_soundcloud_player.application.interfaces.voice_adapter import (
    PlayerEndCallback,
    PlayerHandle,
    VoiceAdapter,
    VoiceConnection,
)
from discord_soundcloud_player.config.settings import PlaybackSettings
from discord_soundcloud_player.domain.music.entities import Track
from discord_soundcloud_player.domain.music.value_objects import PlayerSignal, StreamSource
from discord_soundcloud_player.domain.shared.exceptions import (
    MetadataEnrichmentError,
    PlaybackFailedError,
    ProviderUnavailableError,
    TrackNotFoundError,
    UnsupportedSourceError,
    VoiceConnectionError,
)

GUILD_ID = 111
USER_ID = 222
VOICE_CHANNEL_ID = 333
TEXT_CHANNEL_ID = 444


def make_track(title: str = "Example Track", *, duration: int = 185, author: str | None = None) -> Track:
    slug = title.lower().replace(" ", "-")
    url = f"https://soundcloud.com/artist/{slug}"
    kwargs = {"author": author} if author else {}
    return Track(
        title=title,
        source_url=url,
        permalink_url=url,
        duration_seconds=duration,
        **kwargs,
    )


# ============================================================================
# Fakes for the application ports
# ============================================================================


class FakePlayerHandle(PlayerHandle):
    def __init__(self, source: StreamSource, on_end: PlayerEndCallback) -> None:
        self.source = source
        self.on_end = on_end
        self.paused = False
        self.stopped = False
        self._detached = False

    @property
    def detached(self) -> bool:
        return self._detached

    def detach(self) -> None:
        self._detached = True

    def pause(self) -> bool:
        if self.paused or self.stopped:
            return False
        self.paused = True
        return True

    def resume(self) -> bool:
        if not self.paused:
            return False
        self.paused = False
        return True

    def stop(self) -> None:
        self.stopped = True

    async def finish(self, signal: PlayerSignal = PlayerSignal.COMPLETED) -> None:
        """Deliver the end-of-track signal the way the audio thread would."""
        await self.on_end(self, signal)


class FakeVoiceConnection(VoiceConnection):
    def __init__(self, channel_id: int) -> None:
        self._channel_id = channel_id
        self.connected = True
        self.handles: list[FakePlayerHandle] = []
        self.fail_play = False
        self.disconnect_calls = 0

    @property
    def channel_id(self) -> int:
        return self._channel_id

    @property
    def current(self) -> FakePlayerHandle | None:
        return self.handles[-1] if self.handles else None

    def is_connected(self) -> bool:
        return self.connected

    def play(self, source: StreamSource, on_end: PlayerEndCallback) -> PlayerHandle:
        if self.fail_play:
            raise PlaybackFailedError(source.url)
        handle = FakePlayerHandle(source, on_end)
        self.handles.append(handle)
        return handle

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.connected = False


class FakeVoiceAdapter(VoiceAdapter):
    def __init__(self) -> None:
        self.connections: list[FakeVoiceConnection] = []
        self.fail = False
        self.gate: asyncio.Event | None = None

    async def connect(self, guild_id: int, channel_id: int) -> VoiceConnection:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise VoiceConnectionError(guild_id, channel_id)
        connection = FakeVoiceConnection(channel_id)
        self.connections.append(connection)
        return connection


class FakeTrackResolver(TrackResolver):
    def __init__(self) -> None:
        self.by_url: dict[str, Track] = {}
        self.search_results: dict[str, list[Track]] = {}
        self.unplayable: set[str] = set()
        self.stream_errors: dict[str, Exception] = {}
        self.search_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.search_calls: list[tuple[str, int]] = []
        self.opened: list[str] = []

    def add(self, track: Track) -> Track:
        self.by_url[track.source_url] = track
        return track

    async def resolve_url(self, url: str) -> Track:
        if self.gate is not None:
            await self.gate.wait()
        if not self.is_provider_url(url):
            raise UnsupportedSourceError(url)
        try:
            return self.by_url[url]
        except KeyError:
            raise TrackNotFoundError(url) from None

    async def search(self, query: str, limit: int) -> list[Track]:
        self.search_calls.append((query, limit))
        if self.gate is not None:
            await self.gate.wait()
        if self.search_error is not None:
            raise self.search_error
        return list(self.search_results.get(query, []))[:limit]

    async def open_stream(self, track: Track) -> StreamSource:
        self.opened.append(track.title)
        if track.title in self.stream_errors:
            raise self.stream_errors[track.title]
        if track.title in self.unplayable:
            raise ProviderUnavailableError(track.source_url)
        return StreamSource(url=f"https://cf-media.sndcdn.com/{len(self.opened)}.mp3")

    def is_provider_url(self, query: str) -> bool:
        return "soundcloud.com" in query


class FakeEnricher(MetadataEnricher):
    def __init__(self) -> None:
        self.fail = False
        self.author: str | None = None

    async def enrich(self, track: Track) -> Track:
        if self.fail:
            raise MetadataEnrichmentError(track.permalink_url)
        return track.with_metadata(author=self.author)


@dataclass
class FakeNotifier(Notifier):
    announced: list[tuple[int, Track]] = field(default_factory=list)
    gave_up: list[tuple[int, int]] = field(default_factory=list)
    fail: bool = False

    async def announce(self, text_channel_id: int, track: Track) -> None:
        if self.fail:
            raise RuntimeError("channel gone")
        self.announced.append((text_channel_id, track))

    async def announce_gave_up(self, text_channel_id: int, failures: int) -> None:
        self.gave_up.append((text_channel_id, failures))


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def sample_track() -> Track:
    return make_track("Example Track")


@pytest.fixture
def track_factory():
    return make_track


@pytest.fixture
def playback_settings() -> PlaybackSettings:
    return PlaybackSettings()


@pytest.fixture
def env(playback_settings):
    """Playback and search services wired to in-memory fakes."""
    from discord_soundcloud_player.application.services.playback_service import (
        PlaybackApplicationService,
    )
    from discord_soundcloud_player.application.services.search_cache import SearchCache
    from discord_soundcloud_player.application.services.search_service import (
        SearchApplicationService,
    )
    from discord_soundcloud_player.application.services.session_registry import (
        GuildSessionRegistry,
    )

    clock = SimpleNamespace(now=0.0)
    resolver = FakeTrackResolver()
    enricher = FakeEnricher()
    voice = FakeVoiceAdapter()
    notifier = FakeNotifier()
    registry = GuildSessionRegistry()
    cache = SearchCache(ttl_seconds=300, max_entries=1000, clock=lambda: clock.now)
    search = SearchApplicationService(
        track_resolver=resolver, search_cache=cache, settings=playback_settings
    )
    playback = PlaybackApplicationService(
        registry=registry,
        search_service=search,
        track_resolver=resolver,
        metadata_enricher=enricher,
        voice_adapter=voice,
        notifier=notifier,
        settings=playback_settings,
    )
    return SimpleNamespace(
        clock=clock,
        resolver=resolver,
        enricher=enricher,
        voice=voice,
        notifier=notifier,
        registry=registry,
        cache=cache,
        search=search,
        playback=playback,
    )


# ============================================================================
# Discord Interaction Fixtures
# ============================================================================


def make_interaction(
    *,
    in_guild: bool = True,
    is_member: bool = True,
    in_voice: bool = True,
    can_speak: bool = True,
) -> MagicMock:
    """Build a slash-command interaction from a guild member, optionally in voice."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.response = MagicMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    interaction.channel_id = TEXT_CHANNEL_ID

    channel = MagicMock(spec=discord.VoiceChannel)
    channel.id = VOICE_CHANNEL_ID
    permissions = MagicMock()
    permissions.connect = can_speak
    permissions.speak = can_speak
    channel.permissions_for = MagicMock(return_value=permissions)

    user = MagicMock(spec=discord.Member) if is_member else MagicMock(spec=discord.User)
    user.id = USER_ID
    if is_member:
        if in_voice:
            user.voice = MagicMock()
            user.voice.channel = channel
        else:
            user.voice = None
    interaction.user = user

    if in_guild:
        guild = MagicMock(spec=discord.Guild)
        guild.id = GUILD_ID
        guild.me = MagicMock(spec=discord.Member)
        interaction.guild = guild
    else:
        interaction.guild = None

    return interaction


@pytest.fixture
def interaction_factory():
    return make_interaction


@pytest.fixture
def play_request():
    """Factory for PlayRequest objects in the default test guild."""
    from discord_soundcloud_player.application.services.playback_models import PlayRequest

    def _make(query: str, *, guild_id: int = GUILD_ID, user_id: int = USER_ID) -> PlayRequest:
        return PlayRequest(
            guild_id=guild_id,
            user_id=user_id,
            text_channel_id=TEXT_CHANNEL_ID,
            voice_channel_id=VOICE_CHANNEL_ID,
            query=query,
        )

    return _make
