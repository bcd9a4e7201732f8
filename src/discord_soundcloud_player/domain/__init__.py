# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, messages and constrained types
- music/: Track, queue and playback session state machine
"""

from discord_soundcloud_player.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
