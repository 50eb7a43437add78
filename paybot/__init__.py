"""Telegram bot for recording payments and reporting spending by category."""

__version__ = "0.1.0"