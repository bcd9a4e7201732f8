"""Audio infrastructure - yt-dlp SoundCloud resolver, oEmbed enricher and FFmpeg player."""

from discord_soundcloud_player.infrastructure.audio.ffmpeg_player import (
    FFmpegConfig,
    FFmpegPlayer,
    FFmpegPlayerHandle,
)
from discord_soundcloud_player.infrastructure.audio.models import (
    AudioFormatInfo,
    YtDlpOpts,
    YtDlpTrackInfo,
)
from discord_soundcloud_player.infrastructure.audio.oembed_enricher import OEmbedEnricher
from discord_soundcloud_player.infrastructure.audio.ytdlp_resolver import SoundCloudResolver

__all__ = [
    "AudioFormatInfo",
    "FFmpegConfig",
    "FFmpegPlayer",
    "FFmpegPlayerHandle",
    "OEmbedEnricher",
    "SoundCloudResolver",
    "YtDlpOpts",
    "YtDlpTrackInfo",
]
