"""Search Application Service - autocomplete suggestions and query resolution."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Final

from ...domain.music.value_objects import SearchCacheKey
from ...domain.shared.exceptions import CacheMissError, ResolutionError, TrackNotFoundError
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ...utils.reply import truncate
from .playback_models import SearchSuggestion

if TYPE_CHECKING:
    from ...config.settings import PlaybackSettings
    from ...domain.music.entities import Track
    from ..interfaces.track_resolver import TrackResolver
    from .search_cache import SearchCache

logger = logging.getLogger(__name__)

SELECTION_PREFIX: Final[str] = "pick:"
CHOICE_MAX_LENGTH: Final[int] = 100
URL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://", re.IGNORECASE)


def selection_token(index: int) -> str:
    return f"{SELECTION_PREFIX}{index}"


def parse_selection_token(value: str) -> int | None:
    """Return the candidate index encoded in an autocomplete value, if it is one."""
    if not value.startswith(SELECTION_PREFIX):
        return None
    raw = value[len(SELECTION_PREFIX) :]
    if not raw.isdigit():
        return None
    return int(raw)


class SearchApplicationService:
    """Turns what a requester typed (or picked) into exactly one track."""

    def __init__(
        self,
        *,
        track_resolver: TrackResolver,
        search_cache: SearchCache,
        settings: PlaybackSettings,
    ) -> None:
        self._resolver = track_resolver
        self._cache = search_cache
        self._settings = settings

    async def suggest(
        self, guild_id: DiscordSnowflake, user_id: DiscordSnowflake, query: str
    ) -> list[SearchSuggestion]:
        """Autocomplete for the play command.

        Blank input yields nothing. Other short input yields a single hint whose
        value is the typed text. A provider URL is echoed back as-is. Anything
        else is searched and the candidates are cached for selection.
        """
        text = query.strip()
        min_chars = self._settings.autocomplete_min_chars

        if not text:
            return []
        if len(text) <= min_chars:
            hint = DiscordUIMessages.AUTOCOMPLETE_MIN_CHARS.format(min_chars=min_chars)
            return [SearchSuggestion(name=hint, value=text)]

        if self._resolver.is_provider_url(text):
            # choice values are capped at 100 characters; longer links are submitted as typed
            if len(text) > CHOICE_MAX_LENGTH:
                return []
            return [SearchSuggestion(name=text, value=text)]

        try:
            candidates = await self._resolver.search(text, self._settings.search_result_limit)
        except ResolutionError as exc:
            logger.warning(LogTemplates.AUTOCOMPLETE_FAILED, text, exc)
            return []

        candidates = candidates[: self._settings.search_result_limit]
        if not candidates:
            return []

        self._cache.put(SearchCacheKey(guild_id, user_id), candidates, text)
        return [
            SearchSuggestion(name=self.format_choice(track), value=selection_token(index))
            for index, track in enumerate(candidates)
        ]

    async def resolve_query(
        self, guild_id: DiscordSnowflake, user_id: DiscordSnowflake, query: str
    ) -> Track:
        """Resolve a selection token, a URL, or free text to a single track.

        Raises:
            CacheMissError: The selection refers to results that expired or were consumed.
            ResolutionError: The provider could not resolve the query.
        """
        text = query.strip()

        index = parse_selection_token(text)
        if index is not None:
            track = self._cache.take_by_index(SearchCacheKey(guild_id, user_id), index)
            if track is None:
                raise CacheMissError()
            return track

        if self._resolver.is_provider_url(text) or URL_PATTERN.match(text):
            return await self._resolver.resolve_url(text)

        results = await self._resolver.search(text, 1)
        if not results:
            raise TrackNotFoundError(text)
        return results[0]

    @staticmethod
    def format_choice(track: Track) -> str:
        label = DiscordUIMessages.AUTOCOMPLETE_CHOICE.format(
            title=track.title, author=track.author, duration=track.duration_formatted
        )
        return truncate(label, CHOICE_MAX_LENGTH)
