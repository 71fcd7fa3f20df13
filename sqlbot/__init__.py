"""SQLBot: natural-language questions to read-only SQL over Telegram."""

__version__ = "0.1.0"
