"""Category registry package."""

from money_notes.categories.icons import ICON_GLYPHS, SYSTEM_CATEGORIES
from money_notes.categories.registry import CategoryRegistry

__all__ = ["CategoryRegistry", "ICON_GLYPHS", "SYSTEM_CATEGORIES"]
