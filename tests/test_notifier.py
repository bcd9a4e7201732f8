"""Tests for DiscordNotifier and the now-playing embed."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_soundcloud_player.domain.shared.messages import DiscordUIMessages
from discord_soundcloud_player.infrastructure.discord.services.notifier import (
    SOUNDCLOUD_ORANGE,
    DiscordNotifier,
)
from discord_soundcloud_player.infrastructure.discord.views.track_link_view import TrackLinkView

TEXT_CHANNEL_ID = 444


@pytest.fixture
def text_channel():
    channel = MagicMock(spec=discord.TextChannel)
    channel.send = AsyncMock()
    return channel


@pytest.fixture
def bot(text_channel):
    b = MagicMock()
    b.get_channel = MagicMock(return_value=text_channel)
    b.fetch_channel = AsyncMock(return_value=text_channel)
    return b


class TestNowPlayingEmbed:
    def test_embed_fields(self, track_factory):
        track = track_factory("Example Track", duration=185, author="Real Artist").with_metadata(
            thumbnail_url="https://i1.sndcdn.com/artworks-abc-t500x500.jpg"
        )

        embed = DiscordNotifier.build_now_playing_embed(track)

        assert embed.title == DiscordUIMessages.EMBED_NOW_PLAYING
        assert embed.description == f"[Example Track]({track.permalink_url})"
        assert embed.color.value == SOUNDCLOUD_ORANGE
        assert embed.author.name == "Real Artist"
        assert embed.footer.text == "Duration: 3:05"
        assert embed.thumbnail.url == track.thumbnail_url
        assert embed.timestamp is not None

    def test_embed_without_thumbnail(self, sample_track):
        embed = DiscordNotifier.build_now_playing_embed(sample_track)

        assert embed.thumbnail.url is None
        assert embed.author.name == "Unknown artist"


class TestAnnounce:
    @pytest.mark.asyncio
    async def test_announce_sends_embed_with_link(self, bot, text_channel, sample_track):
        await DiscordNotifier(bot).announce(TEXT_CHANNEL_ID, sample_track)

        bot.get_channel.assert_called_once_with(TEXT_CHANNEL_ID)
        kwargs = text_channel.send.call_args.kwargs
        assert isinstance(kwargs["embed"], discord.Embed)
        view = kwargs["view"]
        assert isinstance(view, TrackLinkView)
        button = view.children[0]
        assert button.url == sample_track.permalink_url
        assert button.label == DiscordUIMessages.BUTTON_OPEN_IN_SOUNDCLOUD

    @pytest.mark.asyncio
    async def test_uncached_channel_is_fetched(self, bot, text_channel, sample_track):
        bot.get_channel.return_value = None

        await DiscordNotifier(bot).announce(TEXT_CHANNEL_ID, sample_track)

        bot.fetch_channel.assert_awaited_once_with(TEXT_CHANNEL_ID)
        text_channel.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_non_messageable_channel_is_skipped(self, bot, sample_track):
        bot.get_channel.return_value = MagicMock(spec=discord.CategoryChannel)

        await DiscordNotifier(bot).announce(TEXT_CHANNEL_ID, sample_track)

    @pytest.mark.asyncio
    async def test_announce_gave_up(self, bot, text_channel):
        await DiscordNotifier(bot).announce_gave_up(TEXT_CHANNEL_ID, 5)

        text_channel.send.assert_awaited_once_with(
            DiscordUIMessages.EMBED_GAVE_UP.format(failures=5)
        )
