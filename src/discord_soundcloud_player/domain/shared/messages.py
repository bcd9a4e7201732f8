"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_GUILD_ID = "Guild ID must be positive"
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"

    # Track Validation Errors
    EMPTY_TRACK_URL = "Track URL cannot be empty"

    # Session Errors
    INVALID_STATE_TRANSITION = "Cannot transition session from {current} to {target}"

    # Settings Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Audio/Stream Errors
    NO_STREAM_URL_FOR_TRACK = "No stream URL found for {title}"
    NOT_A_SOUNDCLOUD_URL = "Only SoundCloud links are supported: {url}"
    FFMPEG_REQUIRED = "ffmpeg was not found on PATH; it is required for audio playback"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Search Cache
    CACHE_STORED = "Stored %d search candidates for guild %s user %s"
    CACHE_TAKEN = "Consumed search selection %d for guild %s user %s"
    CACHE_MISS = "Search selection miss for guild %s user %s (index %s)"
    CACHE_EXPIRED_PRUNED = "Pruned %d expired search cache entries"
    CACHE_EVICTED = "Evicted %d search cache entries over capacity"

    # Voice/Audio Operations
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_FORCED_DISCONNECT = "Bot was removed from voice in guild %s, session torn down"
    VOICE_DISCONNECT_FAILED = "Failed to disconnect voice in guild %s: %r"
    GUILD_NOT_FOUND = "Guild %s not found"
    CHANNEL_NOT_VOICE = "Channel %s is not a voice channel"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback: %s"
    PLAYBACK_STALE_SIGNAL = "Ignoring %s signal from a detached player in guild %s"
    PLAYBACK_SIGNAL = "Player signalled %s in guild %s"
    PLAYBACK_SIGNAL_FAILED = "Handling player signal failed in guild %s: %s"
    PLAYBACK_GAVE_UP = "Giving up in guild %s after %d consecutive failures"
    PLAYBACK_CANCELLED = "Discarded resolved track '%s' in guild %s: session was stopped"

    # Track Operations
    TRACK_SKIPPED = "Skipped track: %s in guild %s"
    TRACK_DROPPED = "Dropped unplayable track '%s' in guild %s: %s"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued track '%s' at position %s in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"

    # Session/Guild Operations
    SESSION_CREATED = "Created playback session for guild %s"
    SESSION_TORN_DOWN = "Tore down playback session for guild %s"
    SESSIONS_SHUTDOWN = "Tore down %d active sessions on shutdown"

    # Notifications
    NOTIFY_FAILED = "Failed to announce track in guild %s: %r"
    NOTIFY_CHANNEL_MISSING = "Text channel %s is not messageable"

    # FFmpeg/Audio Resource Management
    FFMPEG_DISCORD_CLIENT_ERROR = "Discord client error: %s"

    # Resolution/Search
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_CONFIGURED = "yt-dlp SoundCloud resolver configured (format=%s)"
    AUTOCOMPLETE_FAILED = "Autocomplete search failed for %r: %s"
    RESOLUTION_FAILED = "Resolution failed for %r: %s"

    # Metadata enrichment
    OEMBED_FAILED = "oEmbed lookup failed for %s: %s"
    OEMBED_ENRICHED = "Enriched '%s' with oEmbed metadata"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord SoundCloud Player in {environment} mode"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SESSIONS_SHUTDOWN_ERROR = "Error tearing down sessions on shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
    FFMPEG_FOUND = "Using ffmpeg at %s"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %s success, %s failed"

    # Bot Command Sync
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"

    # Bot Error Handling
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    """

    # Success Messages
    SUCCESS_ADDED_TO_QUEUE = "Added **{title}** to the queue!"
    SUCCESS_SKIPPED = "Skipped the song!"
    SUCCESS_STOPPED = "Stopped the music and cleared the queue!"
    SUCCESS_PAUSED = "Paused the music!"
    SUCCESS_RESUMED = "Resumed the music!"
    SUCCESS_DISCONNECTED = "Disconnected from the voice channel!"

    # Precondition Messages
    STATE_NOT_IN_VOICE_PLAY = "You need to be in a voice channel to play music!"
    STATE_NOT_IN_VOICE_SKIP = "You need to be in a voice channel to skip songs!"
    STATE_NOT_IN_VOICE_STOP = "You need to be in a voice channel to stop the music!"
    STATE_NOT_IN_VOICE_PAUSE = "You need to be in a voice channel to pause the music!"
    STATE_NOT_IN_VOICE_RESUME = "You need to be in a voice channel to resume the music!"
    STATE_NOT_IN_VOICE_LEAVE = "You need to be in a voice channel to disconnect the bot!"
    STATE_MISSING_PERMISSIONS = "I need permissions to join and speak in your voice channel!"
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_NO_SONG_TO_SKIP = "There is no song to skip!"
    STATE_NOTHING_PLAYING = "There is nothing playing!"
    STATE_QUEUE_EMPTY = "There are no songs in the queue!"
    STATE_ALREADY_PLAYING = "The music is already playing!"
    STATE_NOT_IN_VOICE_BOT = "I am not in a voice channel!"

    # Error Messages
    ERROR_NO_SONGS_FOUND = "No songs found!"
    ERROR_JOINING_VOICE = "Error joining voice channel!"
    ERROR_PLAYING_SONG = "An error occurred while trying to play the song."
    ERROR_UNSUPPORTED_SOURCE = "Only SoundCloud links and searches are supported."
    ERROR_SELECTION_EXPIRED = "Those search results have expired, please search again."
    ERROR_REQUEST_CANCELLED = "Playback was stopped before your song could be queued."
    ERROR_OCCURRED = "An error occurred: {error}"

    # Autocomplete
    AUTOCOMPLETE_MIN_CHARS = "Type at least {min_chars} characters to search..."
    AUTOCOMPLETE_CHOICE = "{title} - {author} - {duration}"

    # Embeds
    EMBED_NOW_PLAYING = "\U0001f3b5 Now Playing"
    EMBED_QUEUE = "\U0001f3b5 Song Queue"
    EMBED_DURATION_FOOTER = "Duration: {duration}"
    EMBED_GAVE_UP = "Skipped {failures} tracks in a row that could not be played. Stopping playback."
    BUTTON_OPEN_IN_SOUNDCLOUD = "Open in SoundCloud"
