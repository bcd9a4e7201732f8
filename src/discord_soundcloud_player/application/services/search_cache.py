"""Short-lived store of search candidates awaiting a follow-up selection.

Entries are keyed by guild and requester, consumed by the first successful
selection, overwritten by the next search under the same key, and expire
after a TTL. The cache is bounded; the oldest entries are evicted first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ...domain.music.entities import Track
from ...domain.music.value_objects import SearchCacheKey
from ...domain.shared.datetime_utils import monotonic
from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_ENTRIES = 1000


@dataclass(frozen=True)
class SearchCacheEntry:
    key: SearchCacheKey
    candidates: tuple[Track, ...]
    query: str
    created_at: float


class SearchCache:
    """In-memory candidate lists. Synchronous, so selections are first-committer-wins."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[SearchCacheKey, SearchCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def put(self, key: SearchCacheKey, candidates: Iterable[Track], query: str) -> None:
        """Store candidates for a key, replacing any previous entry."""
        self._entries.pop(key, None)
        entry = SearchCacheEntry(
            key=key,
            candidates=tuple(candidates),
            query=query,
            created_at=self._clock(),
        )
        self._entries[key] = entry
        logger.debug(LogTemplates.CACHE_STORED, len(entry.candidates), key.guild_id, key.user_id)
        self._enforce_capacity()

    def take_by_index(self, key: SearchCacheKey, index: int) -> Track | None:
        """Consume the entry and return the selected candidate, or None on a miss.

        A miss is an absent or expired key, or an index outside the candidate list.
        """
        entry = self._entries.get(key)
        if entry is not None and self._is_expired(entry):
            del self._entries[key]
            entry = None

        if entry is None or not 0 <= index < len(entry.candidates):
            logger.debug(LogTemplates.CACHE_MISS, key.guild_id, key.user_id, index)
            return None

        del self._entries[key]
        logger.debug(LogTemplates.CACHE_TAKEN, index, key.guild_id, key.user_id)
        return entry.candidates[index]

    def prune_expired(self) -> int:
        expired = [k for k, entry in self._entries.items() if self._is_expired(entry)]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_PRUNED, len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def _is_expired(self, entry: SearchCacheEntry) -> bool:
        return self._clock() - entry.created_at >= self._ttl

    def _enforce_capacity(self) -> None:
        if len(self._entries) <= self._max_entries:
            return
        self.prune_expired()
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return
        # dicts keep insertion order and put() re-inserts, so the head is the oldest entry
        for k in list(self._entries)[:overflow]:
            del self._entries[k]
        logger.debug(LogTemplates.CACHE_EVICTED, overflow)
