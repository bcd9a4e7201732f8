"""Playback Application Service - the per-guild session state machine.

Every state change for a guild runs under that guild's gate from
:class:`GuildSessionRegistry`, including the suspension points of track
resolution, voice join and stream opening. Player completion and failure
arrive as :class:`PlayerSignal` values and are serialized through the same
gate, so transitions never interleave.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from ...domain.music.entities import GuildPlaybackSession, Track
from ...domain.music.value_objects import PlayerSignal, SessionState
from ...domain.shared.exceptions import (
    MetadataEnrichmentError,
    PlaybackCancelledError,
    PlaybackFailedError,
    VoiceConnectionError,
)
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake
from .playback_models import EnqueueResult, PlayRequest, QueueInfo
from .session_registry import ActiveSession

if TYPE_CHECKING:
    from ...config.settings import PlaybackSettings
    from ..interfaces.notifier import Notifier
    from ..interfaces.track_resolver import MetadataEnricher, TrackResolver
    from ..interfaces.voice_adapter import PlayerHandle, VoiceAdapter
    from .search_service import SearchApplicationService
    from .session_registry import GuildSessionRegistry

logger = logging.getLogger(__name__)


class PlaybackApplicationService:
    """Orchestrates sessions across the registry, resolver, voice adapter, and notifier."""

    def __init__(
        self,
        *,
        registry: GuildSessionRegistry,
        search_service: SearchApplicationService,
        track_resolver: TrackResolver,
        metadata_enricher: MetadataEnricher,
        voice_adapter: VoiceAdapter,
        notifier: Notifier,
        settings: PlaybackSettings,
    ) -> None:
        self._registry = registry
        self._search_service = search_service
        self._resolver = track_resolver
        self._enricher = metadata_enricher
        self._voice_adapter = voice_adapter
        self._notifier = notifier
        self._max_failures = settings.max_consecutive_failures

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    def get_session(self, guild_id: DiscordSnowflake) -> GuildPlaybackSession | None:
        active = self._registry.get(guild_id)
        return active.state if active is not None else None

    def get_queue(self, guild_id: DiscordSnowflake) -> QueueInfo:
        session = self.get_session(guild_id)
        if session is None:
            return QueueInfo(current_track=None, upcoming_tracks=[])
        return QueueInfo(current_track=session.current_track, upcoming_tracks=session.upcoming)

    # ─────────────────────────────────────────────────────────────────
    # Play / enqueue
    # ─────────────────────────────────────────────────────────────────

    async def play(self, request: PlayRequest) -> EnqueueResult:
        """Resolve the request and enqueue it, creating the session if needed.

        Raises:
            CacheMissError: A search selection expired or was already consumed.
            ResolutionError: The query could not be resolved.
            VoiceConnectionError: The first play could not join voice.
            PlaybackCancelledError: ``stop``/``leave`` ran while this request was pending.
            PlaybackFailedError: The first track of a new session could not be played.
        """
        guild_id = request.guild_id
        generation = self._registry.generation(guild_id)

        async with self._registry.gate(guild_id):
            track = await self._search_service.resolve_query(
                guild_id, request.user_id, request.query
            )
            track = await self._enrich(track)
            self._ensure_not_cancelled(guild_id, generation, track)

            active = self._registry.get(guild_id)
            if active is not None:
                position = active.state.enqueue(track)
                logger.info(LogTemplates.QUEUE_ENQUEUED, track.title, position, guild_id)
                return EnqueueResult(
                    track=track,
                    position=position,
                    queue_length=len(active.state.queue),
                )

            active, _ = await self._registry.get_or_create(
                guild_id, functools.partial(self._open_session, request, track)
            )
            if self._registry.generation(guild_id) != generation:
                await self._teardown(active)
                self._ensure_not_cancelled(guild_id, generation, track)

            if not await self._start_head(active):
                raise PlaybackFailedError(track.title)
            return EnqueueResult(track=track, position=0, queue_length=1, started_session=True)

    async def _open_session(self, request: PlayRequest, track: Track) -> ActiveSession:
        session = GuildPlaybackSession(
            guild_id=request.guild_id,
            text_channel_id=request.text_channel_id,
            voice_channel_id=request.voice_channel_id,
        )
        session.transition_to(SessionState.CONNECTING)
        try:
            connection = await self._voice_adapter.connect(
                request.guild_id, request.voice_channel_id
            )
        except VoiceConnectionError:
            session.transition_to(SessionState.IDLE)
            raise

        session.enqueue(track)
        return ActiveSession(state=session, connection=connection)

    async def _enrich(self, track: Track) -> Track:
        try:
            return await self._enricher.enrich(track)
        except MetadataEnrichmentError as exc:
            logger.debug(LogTemplates.OEMBED_FAILED, track.permalink_url, exc)
            return track

    def _ensure_not_cancelled(
        self, guild_id: DiscordSnowflake, generation: int, track: Track
    ) -> None:
        if self._registry.generation(guild_id) != generation:
            logger.info(LogTemplates.PLAYBACK_CANCELLED, track.title, guild_id)
            raise PlaybackCancelledError(guild_id)

    # ─────────────────────────────────────────────────────────────────
    # Player signals
    # ─────────────────────────────────────────────────────────────────

    async def handle_player_signal(
        self, guild_id: DiscordSnowflake, handle: PlayerHandle, signal: PlayerSignal
    ) -> None:
        """Advance the queue when the current player completes or fails."""
        async with self._registry.gate(guild_id):
            active = self._registry.get(guild_id)
            if active is None or active.player is not handle or handle.detached:
                logger.debug(LogTemplates.PLAYBACK_STALE_SIGNAL, signal.value, guild_id)
                return

            logger.debug(LogTemplates.PLAYBACK_SIGNAL, signal.value, guild_id)
            await self._advance(active, failed=signal is PlayerSignal.FAILED)

    async def _advance(self, active: ActiveSession, *, failed: bool) -> None:
        active.replace_player(None)
        finished = active.state.finish_current(failed=failed)
        if failed and finished is not None:
            logger.warning(
                LogTemplates.TRACK_DROPPED, finished.title, active.guild_id, "player error"
            )
            if await self._gave_up(active):
                return
        await self._start_head(active)

    async def _start_head(self, active: ActiveSession) -> bool:
        """Play the queue head, dropping unplayable tracks. Tears down when nothing is left.

        Returns True when a track started.
        """
        session = active.state
        while session.has_tracks:
            track = session.current_track
            assert track is not None
            active.replace_player(None)

            try:
                source = await self._resolver.open_stream(track)
                handle = active.connection.play(
                    source, functools.partial(self.handle_player_signal, active.guild_id)
                )
            except Exception as exc:
                logger.warning(LogTemplates.TRACK_DROPPED, track.title, active.guild_id, exc)
                session.finish_current(failed=True)
                if await self._gave_up(active):
                    return False
                continue

            active.replace_player(handle)
            session.transition_to(SessionState.PLAYING)
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, active.guild_id)
            await self._announce(session, track)
            return True

        await self._teardown(active)
        return False

    async def _gave_up(self, active: ActiveSession) -> bool:
        failures = active.state.consecutive_failures
        if failures < self._max_failures:
            return False

        logger.warning(LogTemplates.PLAYBACK_GAVE_UP, active.guild_id, failures)
        try:
            await self._notifier.announce_gave_up(active.state.text_channel_id, failures)
        except Exception as exc:
            logger.warning(LogTemplates.NOTIFY_FAILED, active.guild_id, exc)
        await self._teardown(active)
        return True

    async def _announce(self, session: GuildPlaybackSession, track: Track) -> None:
        try:
            await self._notifier.announce(session.text_channel_id, track)
        except Exception as exc:
            logger.warning(LogTemplates.NOTIFY_FAILED, session.guild_id, exc)

    async def _teardown(self, active: ActiveSession) -> None:
        session = active.state
        if session.state != SessionState.DRAINING:
            session.transition_to(SessionState.DRAINING)

        player = active.player
        active.replace_player(None)
        if player is not None:
            player.stop()

        session.clear_queue()
        if self._registry.get(active.guild_id) is active:
            self._registry.remove(active.guild_id)

        await active.connection.disconnect()
        session.transition_to(SessionState.IDLE)
        logger.info(LogTemplates.SESSION_TORN_DOWN, active.guild_id)

    # ─────────────────────────────────────────────────────────────────
    # Controls
    # ─────────────────────────────────────────────────────────────────

    def pause(self, guild_id: DiscordSnowflake) -> bool:
        """Pause the current track. Returns False when nothing is playing."""
        active = self._registry.get(guild_id)
        if active is None or active.state.state != SessionState.PLAYING:
            return False
        if active.player is None or not active.player.pause():
            return False

        active.state.pause()
        logger.info(LogTemplates.PLAYBACK_PAUSED, guild_id)
        return True

    def resume(self, guild_id: DiscordSnowflake) -> bool:
        """Resume a paused track. Returns False when the session is not paused."""
        active = self._registry.get(guild_id)
        if active is None or active.state.state != SessionState.PAUSED:
            return False
        if active.player is None or not active.player.resume():
            return False

        active.state.resume()
        logger.info(LogTemplates.PLAYBACK_RESUMED, guild_id)
        return True

    async def skip(self, guild_id: DiscordSnowflake) -> bool:
        """Stop the current track and advance. Returns False when there is no session."""
        async with self._registry.gate(guild_id):
            active = self._registry.get(guild_id)
            if active is None or not active.state.state.is_active:
                return False

            current = active.state.current_track
            player = active.player
            active.replace_player(None)
            if player is not None:
                player.stop()

            logger.info(
                LogTemplates.TRACK_SKIPPED, current.title if current else None, guild_id
            )
            await self._advance(active, failed=False)
            return True

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Clear the queue and tear the session down, cancelling pending plays."""
        self._registry.cancel_pending(guild_id)
        async with self._registry.gate(guild_id):
            active = self._registry.get(guild_id)
            if active is None:
                return False

            cleared = active.state.clear_queue()
            logger.info(LogTemplates.QUEUE_CLEARED, cleared, guild_id)
            await self._teardown(active)
            logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
            return True

    async def leave(self, guild_id: DiscordSnowflake) -> bool:
        """Unconditional teardown. Returns False when there was no session."""
        self._registry.cancel_pending(guild_id)
        async with self._registry.gate(guild_id):
            active = self._registry.get(guild_id)
            if active is None:
                return False

            await self._teardown(active)
            return True

    async def handle_forced_disconnect(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> bool:
        """Tear down after the bot was removed from ``channel_id`` outside our control.

        Pending plays are left alone. Late events for a connection we already
        closed, or for a channel the current session is not using, are ignored.
        The session is captured before waiting on the gate, so one created by a
        play that held the gate when the event arrived is never affected.
        """
        active = self._registry.get(guild_id)
        if active is None:
            return False
        connection = active.connection
        if connection.is_connected() and connection.channel_id != channel_id:
            return False

        async with self._registry.gate(guild_id):
            if self._registry.get(guild_id) is not active:
                return False

            await self._teardown(active)
            return True

    async def shutdown(self) -> int:
        """Tear down every live session; used on bot close."""
        guild_ids = [active.guild_id for active in self._registry.all()]
        count = 0
        for guild_id in guild_ids:
            if await self.leave(guild_id):
                count += 1
        logger.info(LogTemplates.SESSIONS_SHUTDOWN, count)
        return count
