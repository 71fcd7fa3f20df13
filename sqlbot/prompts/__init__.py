"""Prompt templates."""

from sqlbot.prompts.loader import PromptLoader

__all__ = ["PromptLoader"]
