"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from collections.abc import Iterable
from functools import cache
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from ..domain.music.entities import Track

EMBED_DESCRIPTION_LIMIT: Final[int] = 2048
ELLIPSIS: Final[str] = "..."


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def truncate_description(text: str, limit: int = EMBED_DESCRIPTION_LIMIT) -> str:
    """Fit text into an embed description: over the limit keeps ``limit - 3`` chars plus ``...``."""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def format_queue_listing(tracks: Iterable[Track]) -> str:
    """Numbered ``"{n}. {title}"`` lines, the playing track first."""
    lines = [f"{n}. {track.title}" for n, track in enumerate(tracks, start=1)]
    return truncate_description("\n".join(lines))
