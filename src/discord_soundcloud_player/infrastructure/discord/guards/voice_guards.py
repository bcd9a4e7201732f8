"""Reusable voice-channel guard functions for Discord slash commands.

These are free functions that accept explicit dependencies rather than relying
on a specific cog instance, making them usable from any cog.
"""

from __future__ import annotations

import discord

from discord_soundcloud_player.domain.shared.messages import DiscordUIMessages


async def send_ephemeral(interaction: discord.Interaction, message: str) -> None:
    """Send an ephemeral message, handling both fresh and already-responded interactions."""
    if interaction.response.is_done():
        await interaction.followup.send(message, ephemeral=True)
    else:
        await interaction.response.send_message(message, ephemeral=True)


async def get_member(interaction: discord.Interaction) -> discord.Member | None:
    """Validate that the interaction comes from a guild member. Returns None with error on failure."""
    if not interaction.guild:
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    user = interaction.user
    if not isinstance(user, discord.Member):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_SERVER_ONLY)
        return None

    return user


async def get_voice_channel(
    interaction: discord.Interaction, not_in_voice_message: str
) -> discord.VoiceChannel | discord.StageChannel | None:
    """Return the requester's voice channel, or reply with ``not_in_voice_message``."""
    member = await get_member(interaction)
    if member is None:
        return None

    if not member.voice or not member.voice.channel:
        await send_ephemeral(interaction, not_in_voice_message)
        return None

    return member.voice.channel


def can_join_and_speak(
    channel: discord.VoiceChannel | discord.StageChannel, me: discord.Member
) -> bool:
    permissions = channel.permissions_for(me)
    return permissions.connect and permissions.speak


async def ensure_can_join(
    interaction: discord.Interaction,
    channel: discord.VoiceChannel | discord.StageChannel,
) -> bool:
    """Check the bot may connect and speak in the channel. Returns False with error on failure."""
    assert interaction.guild is not None

    me = interaction.guild.me
    if me is None or not can_join_and_speak(channel, me):
        await send_ephemeral(interaction, DiscordUIMessages.STATE_MISSING_PERMISSIONS)
        return False

    return True
