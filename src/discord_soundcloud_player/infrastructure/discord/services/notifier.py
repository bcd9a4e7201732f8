"""Notifier implementation that posts now-playing embeds to a guild text channel."""

from __future__ import annotations

import logging
from typing import Final

import discord

from discord_soundcloud_player.application.interfaces.notifier import Notifier
from discord_soundcloud_player.domain.music.entities import Track
from discord_soundcloud_player.domain.shared.datetime_utils import utcnow
from discord_soundcloud_player.domain.shared.messages import DiscordUIMessages, LogTemplates
from discord_soundcloud_player.infrastructure.discord.views.track_link_view import TrackLinkView
from discord_soundcloud_player.utils.reply import truncate

logger = logging.getLogger(__name__)

SOUNDCLOUD_ORANGE: Final[int] = 0xFF7700
EMBED_TITLE_LIMIT: Final[int] = 256


class DiscordNotifier(Notifier):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    @staticmethod
    def build_now_playing_embed(track: Track) -> discord.Embed:
        embed = discord.Embed(
            title=DiscordUIMessages.EMBED_NOW_PLAYING,
            description=f"[{truncate(track.title, EMBED_TITLE_LIMIT)}]({track.permalink_url})",
            color=SOUNDCLOUD_ORANGE,
            timestamp=utcnow(),
        )
        embed.set_author(name=track.author)
        embed.set_footer(
            text=DiscordUIMessages.EMBED_DURATION_FOOTER.format(duration=track.duration_formatted)
        )
        if track.thumbnail_url:
            embed.set_thumbnail(url=track.thumbnail_url)
        return embed

    async def _resolve_channel(self, channel_id: int) -> discord.abc.Messageable | None:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            channel = await self._bot.fetch_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            logger.warning(LogTemplates.NOTIFY_CHANNEL_MISSING, channel_id)
            return None
        return channel

    async def announce(self, text_channel_id: int, track: Track) -> None:
        channel = await self._resolve_channel(text_channel_id)
        if channel is None:
            return
        await channel.send(
            embed=self.build_now_playing_embed(track),
            view=TrackLinkView(track.permalink_url),
        )

    async def announce_gave_up(self, text_channel_id: int, failures: int) -> None:
        channel = await self._resolve_channel(text_channel_id)
        if channel is None:
            return
        await channel.send(DiscordUIMessages.EMBED_GAVE_UP.format(failures=failures))
