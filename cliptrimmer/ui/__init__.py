"""User interface for ClipTrimmer."""

from .i18n import SUPPORTED_LANGUAGES, Translator

__all__ = ["SUPPORTED_LANGUAGES", "Translator"]
