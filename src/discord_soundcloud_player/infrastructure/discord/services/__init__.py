"""Discord-facing services."""
