"""Discord voice adapter implementing VoiceAdapter for connection and playback."""

from __future__ import annotations

import asyncio
import logging

import discord

from discord_soundcloud_player.application.interfaces.voice_adapter import (
    PlayerEndCallback,
    PlayerHandle,
    VoiceAdapter,
    VoiceConnection,
)
from discord_soundcloud_player.config.settings import AudioSettings
from discord_soundcloud_player.domain.music.value_objects import StreamSource
from discord_soundcloud_player.domain.shared.exceptions import VoiceConnectionError
from discord_soundcloud_player.domain.shared.messages import LogTemplates
from discord_soundcloud_player.infrastructure.audio.ffmpeg_player import FFmpegPlayer

logger = logging.getLogger(__name__)


class DiscordVoiceConnection(VoiceConnection):
    """Wraps one ``discord.VoiceClient`` for the lifetime of a session."""

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        player: FFmpegPlayer,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._voice_client = voice_client
        self._player = player
        self._loop = loop

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    @property
    def channel_id(self) -> int:
        return self._voice_client.channel.id

    def is_connected(self) -> bool:
        return self._voice_client.is_connected()

    def play(self, source: StreamSource, on_end: PlayerEndCallback) -> PlayerHandle:
        return self._player.start(self._voice_client, source, on_end, self._loop)

    async def disconnect(self) -> None:
        guild_id = self._voice_client.guild.id
        try:
            await self._voice_client.disconnect(force=True)
            logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        except (discord.ClientException, discord.HTTPException, OSError) as e:
            # the session is gone either way; a half-closed socket is discord.py's to reap
            logger.warning(LogTemplates.VOICE_DISCONNECT_FAILED, guild_id, e)


class DiscordVoiceAdapter(VoiceAdapter):
    def __init__(
        self,
        bot: discord.Client,
        settings: AudioSettings | None = None,
        player: FFmpegPlayer | None = None,
    ) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()
        self._player = player or FFmpegPlayer(self._settings)

    def _get_guild(self, guild_id: int) -> discord.Guild | None:
        return self._bot.get_guild(guild_id)

    async def connect(self, guild_id: int, channel_id: int) -> VoiceConnection:
        guild = self._get_guild(guild_id)
        if not guild:
            logger.warning(LogTemplates.GUILD_NOT_FOUND, guild_id)
            raise VoiceConnectionError(guild_id, channel_id)

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.CHANNEL_NOT_VOICE, channel_id)
            raise VoiceConnectionError(guild_id, channel_id)

        await self._drop_stale_client(guild)

        try:
            async with asyncio.timeout(self._settings.connect_timeout_s):
                voice_client = await channel.connect(self_deaf=True)
        except TimeoutError as e:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            raise VoiceConnectionError(guild_id, channel_id) from e
        except discord.Forbidden as e:
            logger.error(LogTemplates.VOICE_NO_PERMISSION, channel_id)
            raise VoiceConnectionError(guild_id, channel_id) from e
        except (discord.ClientException, discord.HTTPException) as e:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, e)
            raise VoiceConnectionError(guild_id, channel_id) from e

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return DiscordVoiceConnection(voice_client, self._player, self._bot.loop)

    async def _drop_stale_client(self, guild: discord.Guild) -> None:
        """Disconnect a voice client left behind without a session (e.g. after a crash)."""
        vc = guild.voice_client
        if not isinstance(vc, discord.VoiceClient):
            return
        logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild.id)
        try:
            await vc.disconnect(force=True)
        except (discord.ClientException, discord.HTTPException) as e:
            logger.warning(LogTemplates.VOICE_DISCONNECT_FAILED, guild.id, e)
