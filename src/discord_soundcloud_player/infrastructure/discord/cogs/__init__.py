"""Discord cogs - command handlers."""

from discord_soundcloud_player.infrastructure.discord.cogs.playback_cog import PlaybackCog
from discord_soundcloud_player.infrastructure.discord.cogs.queue_cog import QueueCog

__all__ = [
    "PlaybackCog",
    "QueueCog",
]
