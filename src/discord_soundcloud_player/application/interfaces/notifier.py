"""Port interface for now-playing and status announcements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from discord_soundcloud_player.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class Notifier(ABC):
    """Sends playback announcements to a guild's text channel."""

    @abstractmethod
    async def announce(self, text_channel_id: DiscordSnowflake, track: "Track") -> None:
        """Announce that a track started playing."""
        ...

    @abstractmethod
    async def announce_gave_up(self, text_channel_id: DiscordSnowflake, failures: int) -> None:
        """Announce that playback stopped after too many unplayable tracks."""
        ...
