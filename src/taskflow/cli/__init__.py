"""Non-interactive command handlers."""
