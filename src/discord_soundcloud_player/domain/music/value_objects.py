"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from discord_soundcloud_player.domain.shared.messages import ErrorMessages


class SessionState(Enum):
    """Playback session state with enforced transitions.

    State transitions:
    - IDLE -> CONNECTING (first enqueue, voice join in flight)
    - CONNECTING -> PLAYING (head started) / IDLE (join failed) / DRAINING (nothing playable)
    - PLAYING <-> PAUSED (pause / resume)
    - PAUSED -> PLAYING (resume, or skip onto the next head)
    - PLAYING, PAUSED -> DRAINING (queue emptied, stop, leave)
    - DRAINING -> IDLE (voice connection destroyed, session removed)
    """

    IDLE = "idle"
    CONNECTING = "connecting"
    PLAYING = "playing"
    PAUSED = "paused"
    DRAINING = "draining"

    def can_transition_to(self, target: SessionState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            SessionState.IDLE: {SessionState.CONNECTING},
            SessionState.CONNECTING: {
                SessionState.PLAYING,
                SessionState.IDLE,
                SessionState.DRAINING,
            },
            SessionState.PLAYING: {
                SessionState.PLAYING,
                SessionState.PAUSED,
                SessionState.DRAINING,
            },
            SessionState.PAUSED: {SessionState.PLAYING, SessionState.DRAINING},
            SessionState.DRAINING: {SessionState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        return self in {SessionState.PLAYING, SessionState.PAUSED}


class PlayerSignal(Enum):
    """Terminal events reported by the audio player for the current track."""

    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class StreamSource:
    """A directly playable media URL plus the headers the provider expects."""

    url: str
    http_headers: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            raise ValueError(ErrorMessages.EMPTY_TRACK_URL)


@dataclass(frozen=True)
class SearchCacheKey:
    """Identity of a pending search selection: one requester within one guild."""

    guild_id: int
    user_id: int

    def __post_init__(self) -> None:
        if self.guild_id <= 0:
            raise ValueError(ErrorMessages.INVALID_GUILD_ID)
        if self.user_id <= 0:
            raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
