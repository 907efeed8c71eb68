"""taskflow - terminal dashboard for a remote task server."""

__version__ = "0.1.0"
