"""
Shared Domain Kernel

Contains exceptions, message catalogues and constrained types shared across the package.
"""

from discord_soundcloud_player.domain.shared.exceptions import (
    CacheMissError,
    DomainError,
    InvalidOperationError,
    MetadataEnrichmentError,
    PlaybackCancelledError,
    PlaybackFailedError,
    ProviderUnavailableError,
    ResolutionError,
    TrackNotFoundError,
    UnsupportedSourceError,
    UserPreconditionError,
    VoiceConnectionError,
)

__all__ = [
    "DomainError",
    "UserPreconditionError",
    "InvalidOperationError",
    "ResolutionError",
    "TrackNotFoundError",
    "ProviderUnavailableError",
    "UnsupportedSourceError",
    "VoiceConnectionError",
    "PlaybackFailedError",
    "PlaybackCancelledError",
    "MetadataEnrichmentError",
    "CacheMissError",
]
