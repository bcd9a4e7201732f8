"""
Music Bounded Context

Domain logic for tracks, the per-guild queue and the session state machine.
"""

from discord_soundcloud_player.domain.music.entities import GuildPlaybackSession, Track
from discord_soundcloud_player.domain.music.value_objects import (
    PlayerSignal,
    SearchCacheKey,
    SessionState,
    StreamSource,
)

__all__ = [
    # Entities
    "Track",
    "GuildPlaybackSession",
    # Value Objects
    "SessionState",
    "PlayerSignal",
    "StreamSource",
    "SearchCacheKey",
]
