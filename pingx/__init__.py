"""PingX: improved ping with colors."""

__version__ = "1.0.1"
