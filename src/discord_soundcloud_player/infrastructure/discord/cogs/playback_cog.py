"""Slash-command cog for core playback: play, pause, resume, stop, leave."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from discord_soundcloud_player.application.services.playback_models import PlayRequest
from discord_soundcloud_player.domain.music.value_objects import SessionState
from discord_soundcloud_player.domain.shared.exceptions import (
    CacheMissError,
    DomainError,
    PlaybackCancelledError,
    PlaybackFailedError,
    ProviderUnavailableError,
    TrackNotFoundError,
    UnsupportedSourceError,
    VoiceConnectionError,
)
from discord_soundcloud_player.domain.shared.messages import (
    DiscordUIMessages,
    ErrorMessages,
    LogTemplates,
)
from discord_soundcloud_player.infrastructure.discord.guards.voice_guards import (
    ensure_can_join,
    get_voice_channel,
)

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def play_error_message(error: DomainError) -> str:
    """Map a failed play request onto the reply shown to the requester."""
    if isinstance(error, CacheMissError):
        return DiscordUIMessages.ERROR_SELECTION_EXPIRED
    if isinstance(error, UnsupportedSourceError):
        return DiscordUIMessages.ERROR_UNSUPPORTED_SOURCE
    if isinstance(error, TrackNotFoundError):
        return DiscordUIMessages.ERROR_NO_SONGS_FOUND
    if isinstance(error, VoiceConnectionError):
        return DiscordUIMessages.ERROR_JOINING_VOICE
    if isinstance(error, PlaybackCancelledError):
        return DiscordUIMessages.ERROR_REQUEST_CANCELLED
    if isinstance(error, PlaybackFailedError | ProviderUnavailableError):
        return DiscordUIMessages.ERROR_PLAYING_SONG
    return DiscordUIMessages.ERROR_OCCURRED.format(error=error.message)


class PlaybackCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Play
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="play", description="Play a song from SoundCloud.")
    @app_commands.describe(query="SoundCloud link or search terms")
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        channel = await get_voice_channel(interaction, DiscordUIMessages.STATE_NOT_IN_VOICE_PLAY)
        if channel is None:
            return
        if not await ensure_can_join(interaction, channel):
            return

        assert interaction.guild is not None
        await interaction.response.defer()

        request = PlayRequest(
            guild_id=interaction.guild.id,
            user_id=interaction.user.id,
            text_channel_id=interaction.channel_id or channel.id,
            voice_channel_id=channel.id,
            query=query,
        )

        try:
            result = await self.container.playback_service.play(request)
        except DomainError as e:
            logger.info(LogTemplates.RESOLUTION_FAILED, query, e.message)
            await interaction.followup.send(play_error_message(e), ephemeral=True)
            return

        await interaction.followup.send(
            DiscordUIMessages.SUCCESS_ADDED_TO_QUEUE.format(title=result.track.title)
        )

    @play.autocomplete("query")
    async def play_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        if interaction.guild is None:
            return []

        suggestions = await self.container.search_service.suggest(
            interaction.guild.id, interaction.user.id, current
        )
        return [app_commands.Choice(name=s.name, value=s.value) for s in suggestions]

    # ─────────────────────────────────────────────────────────────────
    # Playback Controls
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="pause", description="Pause the current song.")
    async def pause(self, interaction: discord.Interaction) -> None:
        if await get_voice_channel(interaction, DiscordUIMessages.STATE_NOT_IN_VOICE_PAUSE) is None:
            return

        assert interaction.guild is not None

        if self.container.playback_service.pause(interaction.guild.id):
            await interaction.response.send_message(DiscordUIMessages.SUCCESS_PAUSED)
        else:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_NOTHING_PLAYING, ephemeral=True
            )

    @app_commands.command(name="resume", description="Resume the paused song.")
    async def resume(self, interaction: discord.Interaction) -> None:
        if await get_voice_channel(interaction, DiscordUIMessages.STATE_NOT_IN_VOICE_RESUME) is None:
            return

        assert interaction.guild is not None

        playback_service = self.container.playback_service
        if playback_service.resume(interaction.guild.id):
            await interaction.response.send_message(DiscordUIMessages.SUCCESS_RESUMED)
            return

        session = playback_service.get_session(interaction.guild.id)
        if session is not None and session.state == SessionState.PLAYING:
            message = DiscordUIMessages.STATE_ALREADY_PLAYING
        else:
            message = DiscordUIMessages.STATE_NOTHING_PLAYING
        await interaction.response.send_message(message, ephemeral=True)

    @app_commands.command(name="stop", description="Stop the music and clear the queue.")
    async def stop(self, interaction: discord.Interaction) -> None:
        if await get_voice_channel(interaction, DiscordUIMessages.STATE_NOT_IN_VOICE_STOP) is None:
            return

        assert interaction.guild is not None
        await interaction.response.defer()

        if await self.container.playback_service.stop(interaction.guild.id):
            await interaction.followup.send(DiscordUIMessages.SUCCESS_STOPPED)
        else:
            await interaction.followup.send(DiscordUIMessages.STATE_NOTHING_PLAYING, ephemeral=True)

    # ─────────────────────────────────────────────────────────────────
    # Leave
    # ─────────────────────────────────────────────────────────────────

    @app_commands.command(name="leave", description="Disconnect the bot from the voice channel.")
    async def leave(self, interaction: discord.Interaction) -> None:
        if await get_voice_channel(interaction, DiscordUIMessages.STATE_NOT_IN_VOICE_LEAVE) is None:
            return

        assert interaction.guild is not None
        await interaction.response.defer()

        if await self.container.playback_service.leave(interaction.guild.id):
            await interaction.followup.send(DiscordUIMessages.SUCCESS_DISCONNECTED)
        else:
            await interaction.followup.send(
                DiscordUIMessages.STATE_NOT_IN_VOICE_BOT, ephemeral=True
            )


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(PlaybackCog(bot, container))
