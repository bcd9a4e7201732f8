"""Slash-command cog for the queue: view and skip."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from discord_soundcloud_player.domain.shared.messages import DiscordUIMessages, ErrorMessages
from discord_soundcloud_player.infrastructure.discord.guards.voice_guards import (
    get_voice_channel,
    send_ephemeral,
)
from discord_soundcloud_player.infrastructure.discord.services.notifier import SOUNDCLOUD_ORANGE
from discord_soundcloud_player.utils.reply import format_queue_listing

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


class QueueCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @app_commands.command(name="queue", description="Show the song queue.")
    async def queue(self, interaction: discord.Interaction) -> None:
        if interaction.guild is None:
            await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
            return

        queue_info = self.container.playback_service.get_queue(interaction.guild.id)

        if queue_info.total_tracks == 0:
            await interaction.response.send_message(
                DiscordUIMessages.STATE_QUEUE_EMPTY, ephemeral=True
            )
            return

        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_QUEUE,
            description=format_queue_listing(queue_info.tracks),
            color=SOUNDCLOUD_ORANGE,
        )
        await interaction.response.send_message(embed=embed)

    @app_commands.command(name="skip", description="Skip the current song.")
    async def skip(self, interaction: discord.Interaction) -> None:
        if await get_voice_channel(interaction, DiscordUIMessages.STATE_NOT_IN_VOICE_SKIP) is None:
            return

        assert interaction.guild is not None
        await interaction.response.defer()

        if await self.container.playback_service.skip(interaction.guild.id):
            await interaction.followup.send(DiscordUIMessages.SUCCESS_SKIPPED)
        else:
            await interaction.followup.send(DiscordUIMessages.STATE_NO_SONG_TO_SKIP, ephemeral=True)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(QueueCog(bot, container))
