"""
FFmpeg Audio Player

Infrastructure component for handling FFmpeg-based audio playback.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from dataclasses import dataclass, field

import discord

from discord_soundcloud_player.application.interfaces.voice_adapter import (
    PlayerEndCallback,
    PlayerHandle,
)
from discord_soundcloud_player.config.settings import AudioSettings
from discord_soundcloud_player.domain.music.value_objects import PlayerSignal, StreamSource
from discord_soundcloud_player.domain.shared.exceptions import PlaybackFailedError
from discord_soundcloud_player.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


@dataclass
class FFmpegConfig:
    """Configuration for FFmpeg audio processing."""

    before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    options: str = "-vn"

    # Volume (handled by PCMVolumeTransformer)
    default_volume: float = 0.5

    extra_headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: AudioSettings) -> FFmpegConfig:
        opts = settings.ffmpeg_options
        return cls(
            before_options=opts.get("before_options", cls.before_options),
            options=opts.get("options", cls.options),
            default_volume=settings.default_volume,
        )

    def get_before_options(self, http_headers: dict[str, str] | None = None) -> str:
        """Get FFmpeg before_options, forwarding provider headers to the input."""
        headers = {**self.extra_headers, **(http_headers or {})}
        if not headers:
            return self.before_options
        joined = "".join(f"{name}: {value}\r\n" for name, value in headers.items())
        return f'{self.before_options} -headers "{joined}"'.strip()

    def get_options(self) -> str:
        return self.options


class FFmpegPlayerHandle(PlayerHandle):
    """One FFmpeg source on one voice client.

    The ``after`` hook runs on discord.py's audio thread, so the end signal is
    marshalled back onto the event loop. Detached handles never signal.
    """

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        on_end: PlayerEndCallback,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._voice_client = voice_client
        self._on_end = on_end
        self._loop = loop
        self._detached = False
        self._signalled = False

    @property
    def detached(self) -> bool:
        return self._detached

    def detach(self) -> None:
        self._detached = True

    def pause(self) -> bool:
        if self._detached or not self._voice_client.is_playing():
            return False
        self._voice_client.pause()
        return True

    def resume(self) -> bool:
        if self._detached or not self._voice_client.is_paused():
            return False
        self._voice_client.resume()
        return True

    def stop(self) -> None:
        if self._voice_client.is_playing() or self._voice_client.is_paused():
            self._voice_client.stop()

    def after(self, error: Exception | None) -> None:
        """Playback-finished hook handed to ``VoiceClient.play``."""
        if error is not None:
            logger.warning(LogTemplates.PLAYBACK_ERROR, self._voice_client.guild.id, error)
        if self._detached or self._signalled:
            return
        self._signalled = True

        signal = PlayerSignal.FAILED if error is not None else PlayerSignal.COMPLETED
        if self._loop.is_closed():
            return
        future = asyncio.run_coroutine_threadsafe(self._on_end(self, signal), self._loop)
        future.add_done_callback(self._log_signal_failure)

    def _log_signal_failure(self, future: concurrent.futures.Future[None]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                LogTemplates.PLAYBACK_SIGNAL_FAILED,
                self._voice_client.guild.id,
                exc,
                exc_info=exc,
            )


class FFmpegPlayer:
    """Creates FFmpeg sources and starts them on voice clients."""

    def __init__(
        self, settings: AudioSettings | None = None, config: FFmpegConfig | None = None
    ) -> None:
        self._settings = settings or AudioSettings()
        self._config = config or FFmpegConfig.from_settings(self._settings)

    @property
    def config(self) -> FFmpegConfig:
        return self._config

    def create_source(
        self, stream: StreamSource, volume: float | None = None
    ) -> discord.PCMVolumeTransformer:
        """Wrap the stream in an FFmpeg PCM source with volume control."""
        source = discord.FFmpegPCMAudio(
            stream.url,
            before_options=self._config.get_before_options(stream.http_headers),
            options=self._config.get_options(),
        )
        vol = volume if volume is not None else self._config.default_volume
        return discord.PCMVolumeTransformer(source, volume=vol)

    def start(
        self,
        voice_client: discord.VoiceClient,
        stream: StreamSource,
        on_end: PlayerEndCallback,
        loop: asyncio.AbstractEventLoop,
    ) -> FFmpegPlayerHandle:
        """Start a stream, replacing whatever the voice client was playing.

        Raises:
            PlaybackFailedError: FFmpeg could not be spawned or the client refused the source.
        """
        if voice_client.is_playing() or voice_client.is_paused():
            voice_client.stop()

        handle = FFmpegPlayerHandle(voice_client, on_end, loop)
        try:
            source = self.create_source(stream)
            voice_client.play(source, after=handle.after)
        except discord.ClientException as e:
            handle.detach()
            logger.error(LogTemplates.FFMPEG_DISCORD_CLIENT_ERROR, e)
            raise PlaybackFailedError(stream.url, str(e)) from e
        except OSError as e:
            handle.detach()
            logger.error(LogTemplates.PLAYBACK_FAILED_START, e)
            raise PlaybackFailedError(stream.url, str(e)) from e

        return handle
