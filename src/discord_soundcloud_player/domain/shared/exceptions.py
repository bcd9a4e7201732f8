"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


# ── Requester preconditions ────────────────────────────────────────────


class UserPreconditionError(DomainError):
    """Raised when the requester cannot perform an action in the current context."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message, code=code or "USER_PRECONDITION")


class InvalidOperationError(UserPreconditionError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


# ── Track resolution ───────────────────────────────────────────────────


class ResolutionError(DomainError):
    """Raised when a query, URL or stream cannot be resolved by the provider."""

    def __init__(self, message: str, query: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code or "RESOLUTION_ERROR")
        self.query = query


class TrackNotFoundError(ResolutionError):
    """Raised when the provider has no track for the query."""

    def __init__(self, query: str, message: str | None = None) -> None:
        super().__init__(message or f"No track found for '{query}'", query=query, code="NOT_FOUND")


class ProviderUnavailableError(ResolutionError):
    """Raised when the provider fails or cannot be reached."""

    def __init__(self, query: str | None = None, message: str | None = None) -> None:
        super().__init__(
            message or "Track provider is unavailable", query=query, code="PROVIDER_UNAVAILABLE"
        )


class UnsupportedSourceError(ResolutionError):
    """Raised when a URL does not belong to the supported provider."""

    def __init__(self, query: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Unsupported source: '{query}'", query=query, code="UNSUPPORTED_SOURCE"
        )


# ── Voice and playback ─────────────────────────────────────────────────


class VoiceConnectionError(DomainError):
    """Raised when joining a voice channel fails."""

    def __init__(self, guild_id: int, channel_id: int, message: str | None = None) -> None:
        msg = message or f"Could not join voice channel {channel_id} in guild {guild_id}"
        super().__init__(msg, code="VOICE_CONNECTION_ERROR")
        self.guild_id = guild_id
        self.channel_id = channel_id


class PlaybackFailedError(DomainError):
    """Raised when the audio player refuses to start a source."""

    def __init__(self, title: str, message: str | None = None) -> None:
        super().__init__(message or f"Could not start playback of '{title}'", code="PLAYBACK_FAILED")
        self.title = title


class PlaybackCancelledError(DomainError):
    """Raised when a pending play request was overtaken by stop or leave."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        super().__init__(
            message or f"Pending play request cancelled in guild {guild_id}",
            code="PLAYBACK_CANCELLED",
        )
        self.guild_id = guild_id


# ── Best-effort / ephemeral ────────────────────────────────────────────


class MetadataEnrichmentError(DomainError):
    """Raised when display metadata lookup fails. Never surfaced to users."""

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"Metadata lookup failed for {url}", code="ENRICHMENT_FAILED")
        self.url = url


class CacheMissError(DomainError):
    """Raised when a search selection is absent, expired or out of range."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Search selection is no longer available", code="CACHE_MISS")
