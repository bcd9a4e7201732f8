"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cogs, adapters, notifier)
- Audio (yt-dlp SoundCloud resolver, oEmbed enricher, FFmpeg player)
"""

from discord_soundcloud_player.infrastructure.discord.adapters.voice_adapter import (
    DiscordVoiceAdapter,
)
from discord_soundcloud_player.infrastructure.discord.bot import create_bot

__all__ = [
    "create_bot",
    "DiscordVoiceAdapter",
]
