"""Sushe - turn a video URL into Telegram-ready files."""

__version__ = "0.1.0"
