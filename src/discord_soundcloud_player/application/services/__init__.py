"""Application services orchestrating sessions, search and playback."""
