"""DTOs for the playback and search application services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Track
from ...domain.shared.types import DiscordSnowflake, NonEmptyStr, NonNegativeInt


class PlayRequest(BaseModel):
    """Everything a play command needs, captured from the interaction."""

    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake
    user_id: DiscordSnowflake
    text_channel_id: DiscordSnowflake
    voice_channel_id: DiscordSnowflake
    query: NonEmptyStr


class EnqueueResult(BaseModel):
    track: Track
    position: NonNegativeInt = 0
    queue_length: NonNegativeInt = 1
    started_session: bool = False


class QueueInfo(BaseModel):

    current_track: Track | None
    upcoming_tracks: list[Track]

    @property
    def tracks(self) -> list[Track]:
        """Every queued track, head first."""
        if self.current_track is None:
            return list(self.upcoming_tracks)
        return [self.current_track, *self.upcoming_tracks]

    @property
    def total_tracks(self) -> int:
        return len(self.tracks)


class SearchSuggestion(BaseModel):
    """One autocomplete choice: display label plus the value sent back on selection."""

    model_config = ConfigDict(frozen=True)

    name: NonEmptyStr
    value: NonEmptyStr
