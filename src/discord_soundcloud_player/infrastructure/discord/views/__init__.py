"""Discord UI views and components."""

from __future__ import annotations

from discord_soundcloud_player.infrastructure.discord.views.track_link_view import TrackLinkView

__all__ = [
    "TrackLinkView",
]
