"""Registry of live playback sessions, one per guild.

Owns the per-guild serialization gate and the cancellation generation used
to discard play requests overtaken by ``stop`` or ``leave``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.shared.exceptions import InvalidOperationError
from ...domain.shared.messages import LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import GuildPlaybackSession
    from ..interfaces.voice_adapter import PlayerHandle, VoiceConnection

logger = logging.getLogger(__name__)


@dataclass
class ActiveSession:
    """A registered session: domain state plus the handles it exclusively owns."""

    state: GuildPlaybackSession
    connection: VoiceConnection
    player: PlayerHandle | None = None

    @property
    def guild_id(self) -> int:
        return self.state.guild_id

    def replace_player(self, player: PlayerHandle | None) -> None:
        """Detach the previous handle before the new one takes over."""
        if self.player is not None and self.player is not player:
            self.player.detach()
        self.player = player


class GuildSessionRegistry:
    """Process-local map from guild to at most one active session."""

    def __init__(self) -> None:
        self._sessions: dict[DiscordSnowflake, ActiveSession] = {}
        self._locks: dict[DiscordSnowflake, asyncio.Lock] = {}
        self._generations: dict[DiscordSnowflake, int] = {}
        self._gate_users: dict[DiscordSnowflake, int] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def get(self, guild_id: DiscordSnowflake) -> ActiveSession | None:
        return self._sessions.get(guild_id)

    def all(self) -> list[ActiveSession]:
        return list(self._sessions.values())

    async def get_or_create(
        self,
        guild_id: DiscordSnowflake,
        factory: Callable[[], Awaitable[ActiveSession]],
    ) -> tuple[ActiveSession, bool]:
        """Return ``(session, created)``.

        The factory only runs when no session exists; if it raises, nothing is
        registered. Callers must hold :meth:`gate` for the guild so that two
        overlapping creations cannot both pass the existence check.
        """
        existing = self._sessions.get(guild_id)
        if existing is not None:
            return existing, False

        session = await factory()
        self.register(session)
        return session, True

    def register(self, session: ActiveSession) -> None:
        if session.guild_id in self._sessions:
            raise InvalidOperationError(
                operation="register session",
                current_state="registered",
                message=f"Guild {session.guild_id} already has an active session",
            )
        self._sessions[session.guild_id] = session
        logger.info(LogTemplates.SESSION_CREATED, session.guild_id)

    def remove(self, guild_id: DiscordSnowflake) -> ActiveSession | None:
        return self._sessions.pop(guild_id, None)

    # ── Per-guild gate and cancellation ────────────────────────────────

    @asynccontextmanager
    async def gate(self, guild_id: DiscordSnowflake) -> AsyncIterator[None]:
        """Hold the exclusive lock serializing every state change for one guild.

        Once the last holder or waiter leaves a guild with no session, its lock
        and generation are dropped. A request that captured a generation is
        always one of those holders or waiters, so nothing it compares against
        is reset under it.
        """
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = self._locks[guild_id] = asyncio.Lock()
        self._gate_users[guild_id] = self._gate_users.get(guild_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            users = self._gate_users[guild_id] - 1
            if users:
                self._gate_users[guild_id] = users
            else:
                del self._gate_users[guild_id]
                if guild_id not in self._sessions:
                    self._locks.pop(guild_id, None)
                    self._generations.pop(guild_id, None)

    def generation(self, guild_id: DiscordSnowflake) -> int:
        return self._generations.get(guild_id, 0)

    def cancel_pending(self, guild_id: DiscordSnowflake) -> int:
        """Invalidate every play request that captured an older generation."""
        generation = self._generations.get(guild_id, 0) + 1
        self._generations[guild_id] = generation
        return generation
