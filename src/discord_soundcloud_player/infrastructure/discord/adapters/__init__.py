"""Adapters binding application ports to discord.py."""
