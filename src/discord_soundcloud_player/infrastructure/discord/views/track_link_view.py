"""
Track Link View

Provides a link button that opens the current track on SoundCloud.
"""

from __future__ import annotations

import discord

from discord_soundcloud_player.domain.shared.messages import DiscordUIMessages


class TrackLinkView(discord.ui.View):
    """A view with a single link button to the track's SoundCloud page."""

    def __init__(self, permalink_url: str, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)

        self.permalink_url = permalink_url
        self.add_item(
            discord.ui.Button(
                style=discord.ButtonStyle.link,
                label=DiscordUIMessages.BUTTON_OPEN_IN_SOUNDCLOUD,
                url=permalink_url,
            )
        )
