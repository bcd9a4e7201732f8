"""Port interfaces for voice connections and audio players."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from discord_soundcloud_player.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.music.value_objects import PlayerSignal, StreamSource

PlayerEndCallback = Callable[["PlayerHandle", "PlayerSignal"], Awaitable[None]]
"""Invoked on the event loop once per handle when its track ends or fails."""


class PlayerHandle(ABC):
    """Control surface for the one source currently playing on a connection."""

    @abstractmethod
    def pause(self) -> bool:
        ...

    @abstractmethod
    def resume(self) -> bool:
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop the source. Emits a signal unless the handle was detached first."""
        ...

    @abstractmethod
    def detach(self) -> None:
        """Drop the end-of-track subscription; later signals from this handle are discarded."""
        ...

    @property
    @abstractmethod
    def detached(self) -> bool:
        ...


class VoiceConnection(ABC):
    """A live voice connection owned by exactly one playback session."""

    @property
    @abstractmethod
    def channel_id(self) -> DiscordSnowflake:
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    def play(self, source: "StreamSource", on_end: PlayerEndCallback) -> PlayerHandle:
        """Start a source, replacing whatever was playing.

        Raises:
            PlaybackFailedError: The audio transport refused the source.
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...


class VoiceAdapter(ABC):
    """Interface for joining Discord voice channels."""

    @abstractmethod
    async def connect(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> VoiceConnection:
        """Join a voice channel.

        Raises:
            VoiceConnectionError: The join failed or timed out.
        """
        ...
