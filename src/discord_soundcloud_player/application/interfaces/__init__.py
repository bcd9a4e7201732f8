"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from discord_soundcloud_player.application.interfaces.notifier import Notifier
from discord_soundcloud_player.application.interfaces.track_resolver import (
    MetadataEnricher,
    TrackResolver,
)
from discord_soundcloud_player.application.interfaces.voice_adapter import (
    PlayerHandle,
    VoiceAdapter,
    VoiceConnection,
)

__all__ = [
    "MetadataEnricher",
    "Notifier",
    "PlayerHandle",
    "TrackResolver",
    "VoiceAdapter",
    "VoiceConnection",
]
