"""
Unit Tests for Application Settings Configuration

Tests for:
- Default values for every settings section
- Loading from environment variables (flat credentials and nested sections)
- Custom validators (log level, snowflake IDs)
- Range validation
- Settings caching and clearing
"""

import pytest
from pydantic import SecretStr, ValidationError

from discord_soundcloud_player.config.settings import (
    DEFAULT_SOUNDCLOUD_CLIENT_ID,
    AudioSettings,
    DiscordSettings,
    PlaybackSettings,
    Settings,
    SoundCloudSettings,
    clear_settings_cache,
    get_settings,
)

ENV_VARS = (
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "DISCORD_TOKEN",
    "SOUNDCLOUD_CLIENT_ID",
    "DISCORD__TOKEN",
    "DISCORD__SYNC_ON_STARTUP",
    "DISCORD__TEST_GUILD_IDS",
    "AUDIO__DEFAULT_VOLUME",
    "PLAYBACK__MAX_CONSECUTIVE_FAILURES",
    "PLAYBACK__CACHE_TTL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Section defaults
# =============================================================================


class TestSectionDefaults:
    def test_discord_defaults(self):
        discord = DiscordSettings()

        assert discord.token.get_secret_value() == ""
        assert discord.sync_on_startup is True
        assert discord.test_guild_ids == ()

    def test_soundcloud_defaults(self):
        sc = SoundCloudSettings()

        assert sc.client_id.get_secret_value() == DEFAULT_SOUNDCLOUD_CLIENT_ID
        assert sc.oembed_url == "https://soundcloud.com/oembed"
        assert sc.url_pattern == "soundcloud.com"

    def test_audio_defaults(self):
        audio = AudioSettings()

        assert audio.default_volume == 0.5
        assert audio.ffmpeg_options["options"] == "-vn"
        assert "-reconnect 1" in audio.ffmpeg_options["before_options"]
        assert audio.ytdlp_format == "bestaudio/best"

    def test_playback_defaults(self):
        playback = PlaybackSettings()

        assert playback.max_consecutive_failures == 5
        assert playback.search_result_limit == 15
        assert playback.autocomplete_min_chars == 2
        assert playback.search_cache_ttl_seconds == 300
        assert playback.search_cache_max_entries == 1000

    def test_sections_are_frozen(self):
        with pytest.raises(ValidationError):
            PlaybackSettings().max_consecutive_failures = 3


class TestValidation:
    def test_guild_ids_list_becomes_tuple(self):
        assert DiscordSettings(test_guild_ids=[1, 2]).test_guild_ids == (1, 2)

    def test_guild_ids_must_be_positive(self):
        with pytest.raises(ValidationError):
            DiscordSettings(test_guild_ids=[0])

    @pytest.mark.parametrize("volume", [-0.1, 2.1])
    def test_volume_range(self, volume):
        with pytest.raises(ValidationError):
            AudioSettings(default_volume=volume)

    def test_failure_bound_must_be_positive(self):
        with pytest.raises(ValidationError):
            PlaybackSettings(max_consecutive_failures=0)

    def test_search_limit_capped_at_autocomplete_maximum(self):
        with pytest.raises(ValidationError):
            PlaybackSettings(search_result_limit=26)

    def test_cache_ttl_alias(self):
        assert PlaybackSettings(cache_ttl=60).search_cache_ttl_seconds == 60

    def test_token_aliases(self):
        assert DiscordSettings(bot_token="abc").token.get_secret_value() == "abc"


# =============================================================================
# Settings loading
# =============================================================================


class TestSettingsLoading:
    def test_defaults_without_env(self):
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.discord.token.get_secret_value() == ""

    def test_flat_token_is_folded_into_discord_section(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "secret-token")

        settings = Settings(_env_file=None)

        assert settings.discord.token.get_secret_value() == "secret-token"

    def test_nested_token_wins_over_flat(self, monkeypatch):
        monkeypatch.setenv("DISCORD_TOKEN", "flat")
        monkeypatch.setenv("DISCORD__TOKEN", "nested")

        settings = Settings(_env_file=None)

        assert settings.discord.token.get_secret_value() == "nested"

    def test_flat_client_id_overrides_default(self, monkeypatch):
        monkeypatch.setenv("SOUNDCLOUD_CLIENT_ID", "my-client")

        settings = Settings(_env_file=None)

        assert settings.soundcloud.client_id.get_secret_value() == "my-client"

    def test_nested_sections_from_env(self, monkeypatch):
        monkeypatch.setenv("AUDIO__DEFAULT_VOLUME", "0.8")
        monkeypatch.setenv("PLAYBACK__MAX_CONSECUTIVE_FAILURES", "3")
        monkeypatch.setenv("DISCORD__SYNC_ON_STARTUP", "false")

        settings = Settings(_env_file=None)

        assert settings.audio.default_volume == 0.8
        assert settings.playback.max_consecutive_failures == 3
        assert settings.discord.sync_on_startup is False

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "staging")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_explicit_secret(self):
        settings = Settings(_env_file=None, discord_token=SecretStr("direct"))
        assert settings.discord.token.get_secret_value() == "direct"


class TestSettingsCache:
    def test_get_settings_is_cached(self, monkeypatch):
        monkeypatch.chdir("/")
        first = get_settings()
        assert get_settings() is first

        clear_settings_cache()
        assert get_settings() is not first
