"""Voice channel guard functions for Discord cogs."""

from discord_soundcloud_player.infrastructure.discord.guards.voice_guards import (
    can_join_and_speak,
    ensure_can_join,
    get_member,
    get_voice_channel,
    send_ephemeral,
)

__all__ = [
    "can_join_and_speak",
    "ensure_can_join",
    "get_member",
    "get_voice_channel",
    "send_ephemeral",
]
