"""Core domain entities for the music bounded context."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from discord_soundcloud_player.domain.music.value_objects import SessionState
from discord_soundcloud_player.domain.shared.datetime_utils import utcnow
from discord_soundcloud_player.domain.shared.exceptions import InvalidOperationError
from discord_soundcloud_player.domain.shared.messages import ErrorMessages
from discord_soundcloud_player.domain.shared.types import (
    DiscordSnowflake,
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeInt,
    TrackTitleStr,
    UtcDatetimeField,
)

UNKNOWN_ARTIST = "Unknown artist"


class Track(BaseModel):
    """Immutable value object representing a playable track."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: TrackTitleStr
    source_url: NonEmptyStr
    permalink_url: HttpUrlStr
    duration_seconds: DurationSeconds = 0
    thumbnail_url: HttpUrlStr | None = None
    author: NonEmptyStr = UNKNOWN_ARTIST

    @property
    def duration_formatted(self) -> str:
        """Format duration as M:SS; minutes are never folded into hours."""
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    def with_metadata(
        self,
        *,
        author: str | None = None,
        thumbnail_url: str | None = None,
        permalink_url: str | None = None,
    ) -> Track:
        """Return a copy with display metadata filled in; blank values keep the current field."""
        update: dict[str, str] = {}
        if author and author.strip():
            update["author"] = author
        if thumbnail_url:
            update["thumbnail_url"] = thumbnail_url
        if permalink_url:
            update["permalink_url"] = permalink_url
        if not update:
            return self
        return self.model_validate({**self.model_dump(), **update})


class GuildPlaybackSession(BaseModel):
    """Queue and state for a single guild's playback session.

    The head of ``queue`` is the track that is playing (or about to play).
    Live voice and player handles are owned by the application layer.
    """

    model_config = ConfigDict(strict=True)

    guild_id: DiscordSnowflake
    text_channel_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake
    queue: list[Track] = Field(default_factory=list)
    state: SessionState = SessionState.IDLE
    consecutive_failures: NonNegativeInt = 0
    created_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def current_track(self) -> Track | None:
        return self.queue[0] if self.queue else None

    @property
    def has_tracks(self) -> bool:
        return bool(self.queue)

    @property
    def playing(self) -> bool:
        """False only while explicitly paused."""
        return self.state != SessionState.PAUSED

    @property
    def upcoming(self) -> list[Track]:
        return self.queue[1:]

    def enqueue(self, track: Track) -> int:
        """Append a track and return its zero-based queue position."""
        self.queue.append(track)
        return len(self.queue) - 1

    def finish_current(self, *, failed: bool = False) -> Track | None:
        """Pop the head. Failures count towards the give-up bound; a clean finish resets it."""
        if failed:
            self.consecutive_failures += 1
        else:
            self.consecutive_failures = 0
        if not self.queue:
            return None
        return self.queue.pop(0)

    def clear_queue(self) -> int:
        """Remove every track, including the head. Returns the number removed."""
        count = len(self.queue)
        self.queue.clear()
        return count

    def transition_to(self, new_state: SessionState) -> None:
        """Move to a new state, rejecting transitions the state machine forbids."""
        if not self.state.can_transition_to(new_state):
            raise InvalidOperationError(
                operation=f"transition to {new_state.value}",
                current_state=self.state.value,
                message=ErrorMessages.INVALID_STATE_TRANSITION.format(
                    current=self.state.value, target=new_state.value
                ),
            )
        self.state = new_state

    def pause(self) -> None:
        """Pause playback. Only valid while playing."""
        self.transition_to(SessionState.PAUSED)

    def resume(self) -> None:
        """Resume playback. Only valid while paused."""
        if self.state != SessionState.PAUSED:
            raise InvalidOperationError(operation="resume", current_state=self.state.value)
        self.transition_to(SessionState.PLAYING)
