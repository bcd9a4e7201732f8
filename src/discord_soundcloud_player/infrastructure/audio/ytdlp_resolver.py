"""TrackResolver implementation using yt-dlp's SoundCloud extractor."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, cast

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from discord_soundcloud_player.application.interfaces.track_resolver import TrackResolver
from discord_soundcloud_player.config.settings import AudioSettings, SoundCloudSettings
from discord_soundcloud_player.domain.music.entities import UNKNOWN_ARTIST, Track
from discord_soundcloud_player.domain.music.value_objects import StreamSource
from discord_soundcloud_player.domain.shared.exceptions import (
    ProviderUnavailableError,
    TrackNotFoundError,
    UnsupportedSourceError,
)
from discord_soundcloud_player.domain.shared.messages import ErrorMessages, LogTemplates
from discord_soundcloud_player.infrastructure.audio.models import (
    AudioFormatInfo,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

# yt-dlp's SoundCloud extractor reads its client id from this cache slot.
CLIENT_ID_CACHE_SECTION = "soundcloud"
CLIENT_ID_CACHE_KEY = "client_id"


class SoundCloudResolver(TrackResolver):

    def __init__(
        self,
        settings: SoundCloudSettings | None = None,
        audio_settings: AudioSettings | None = None,
    ) -> None:
        self._settings = settings or SoundCloudSettings()
        self._audio_settings = audio_settings or AudioSettings()
        self._client_id = self._settings.client_id.get_secret_value()

        self._base_opts = YtDlpOpts(format=self._audio_settings.ytdlp_format)
        logger.info(LogTemplates.YTDLP_CONFIGURED, self._base_opts.format)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_search_opts(self) -> YtDlpOpts:
        return self._get_opts(extract_flat="in_playlist")

    def _open(self, opts: YtDlpOpts) -> YoutubeDL:
        ydl = YoutubeDL(params=cast(Any, opts.model_dump()))
        if self._client_id:
            ydl.cache.store(CLIENT_ID_CACHE_SECTION, CLIENT_ID_CACHE_KEY, self._client_id)
        return ydl

    # ── Conversion ─────────────────────────────────────────────────────

    def _info_to_track(self, info: YtDlpTrackInfo) -> Track | None:
        permalink = info.page_url
        if not permalink:
            logger.debug(LogTemplates.YTDLP_NO_STREAM_URL, info.title)
            return None

        return Track(
            title=info.title[:500],
            source_url=permalink,
            permalink_url=permalink,
            duration_seconds=info.duration or 0,
            thumbnail_url=info.thumbnail,
            author=info.uploader or UNKNOWN_ARTIST,
        )

    @staticmethod
    def _extract_stream(info: YtDlpTrackInfo) -> StreamSource | None:
        # full extraction puts the selected format's direct url at the top level
        if info.url and info.url != info.webpage_url:
            return StreamSource(url=info.url, http_headers=info.http_headers)
        fmt = SoundCloudResolver._pick_format(info.formats)
        if fmt is None or fmt.url is None:
            return None
        return StreamSource(url=fmt.url, http_headers=fmt.http_headers)

    @staticmethod
    def _pick_format(formats: list[AudioFormatInfo]) -> AudioFormatInfo | None:
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if not audio_formats:
            return None
        # yt-dlp sorts formats worst to best
        progressive = [f for f in audio_formats if f.protocol in ("http", "https")]
        return (progressive or audio_formats)[-1]

    @staticmethod
    def _parse_info(data: dict[str, Any]) -> YtDlpTrackInfo:
        return YtDlpTrackInfo.model_validate(data)

    # ── Blocking yt-dlp calls (run in a worker thread) ────────────────

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        try:
            with self._open(self._get_opts()) as ydl:
                data = ydl.extract_info(url, download=False)
        except DownloadError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, url)
            raise ProviderUnavailableError(query=url, message=str(exc)) from exc

        if not isinstance(data, dict):
            return None

        entries = data.get("entries")
        if entries is not None:
            # a set or profile link: take the first track
            first = next((e for e in entries if isinstance(e, dict)), None)
            return self._parse_info(dict(first)) if first else None

        return self._parse_info(dict(data))

    def _search_sync(self, query: str, limit: int) -> list[YtDlpTrackInfo]:
        try:
            search_query = f"scsearch{limit}:{query}"
            with self._open(self._get_search_opts()) as ydl:
                data = ydl.extract_info(search_query, download=False)
        except DownloadError as exc:
            logger.warning(LogTemplates.YTDLP_FAILED_SEARCH, query)
            raise ProviderUnavailableError(query=query, message=str(exc)) from exc

        if not isinstance(data, dict):
            return []

        entries = data.get("entries") or []
        if not isinstance(entries, list):
            entries = list(entries)

        return [self._parse_info(dict(e)) for e in entries if isinstance(e, dict)]

    # ── TrackResolver ──────────────────────────────────────────────────

    async def resolve_url(self, url: str) -> Track:
        if not self.is_provider_url(url):
            raise UnsupportedSourceError(url, ErrorMessages.NOT_A_SOUNDCLOUD_URL.format(url=url))

        info = await asyncio.to_thread(self._extract_info_sync, url)
        track = self._info_to_track(info) if info is not None else None
        if track is None:
            raise TrackNotFoundError(url)
        return track

    async def search(self, query: str, limit: int) -> list[Track]:
        results = await asyncio.to_thread(self._search_sync, query, limit)

        tracks: list[Track] = []
        for info in results:
            track = self._info_to_track(info)
            if track is not None:
                tracks.append(track)
        return tracks

    async def open_stream(self, track: Track) -> StreamSource:
        info = await asyncio.to_thread(self._extract_info_sync, track.source_url)
        source = self._extract_stream(info) if info is not None else None
        if source is None:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, track.title)
            raise TrackNotFoundError(
                track.source_url, ErrorMessages.NO_STREAM_URL_FOR_TRACK.format(title=track.title)
            )
        return source

    def is_provider_url(self, query: str) -> bool:
        return self._settings.url_pattern in query.lower()
