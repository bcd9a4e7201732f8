"""Discord integration: bot, cogs, adapters and views."""
