"""Discord bot that streams SoundCloud tracks into voice channels."""

__version__ = "0.1.0"
