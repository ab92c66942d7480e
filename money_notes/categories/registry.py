"""
Category Registry

Merges the immutable system categories with the user's custom ones and
resolves category IDs and icon keys for display.

DESIGN DECISION: Custom-category mutations are persist-then-commit.
The new custom list is built, written to storage, and only swapped into
memory once the write succeeded. If the write fails the caller gets a
PersistenceError and the registry still matches what is on disk.
"""

from typing import Iterable, Mapping, Optional

import structlog

from money_notes.audit import AuditLogger
from money_notes.config import LedgerSettings, get_settings
from money_notes.errors import CorruptBlobError, NotFoundError, PersistenceError, ValidationError
from money_notes.categories.icons import ICON_GLYPHS, SYSTEM_CATEGORIES
from money_notes.ids import IdGenerator
from money_notes.models.audit import AuditEventBuilder, AuditEventType
from money_notes.models.bill import BillType
from money_notes.models.category import (
    CUSTOM_ID_PREFIX,
    Category,
    CategoryCreate,
    CategoryUpdate,
)
from money_notes.storage import KeyValueStore, StorageKeys, load_items, save_items


class CategoryRegistry:
    """
    System + custom categories for one application session.

    System categories are read-only; only custom ones can be added,
    updated or removed. Lookups never fail for display purposes:
    label_for() falls back to the configured "Other" label and glyph.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
        system_categories: Iterable[Category] = SYSTEM_CATEGORIES,
        icon_glyphs: Mapping[str, str] = ICON_GLYPHS,
        settings: Optional[LedgerSettings] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings()
        self._logger = structlog.get_logger(__name__)

        self._system: tuple[Category, ...] = tuple(system_categories)
        for category in self._system:
            if category.is_custom:
                raise ValueError(f"System category {category.id} is marked custom")
        self._system_index = {c.id: c for c in self._system}
        self._custom: list[Category] = []
        self._icons = dict(icon_glyphs)
        self._ids = IdGenerator(CUSTOM_ID_PREFIX)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> list[Category]:
        """
        Hydrate the custom set from storage.

        Raises:
            CorruptBlobError: If the stored blob is unreadable or holds
                entries outside the custom namespace
        """
        customs = load_items(self._storage, StorageKeys.CUSTOM_CATEGORIES.value, Category)
        seen: set[str] = set()
        for category in customs:
            if not category.is_custom:
                raise CorruptBlobError(f"Stored custom categories contain {category.id}")
            if category.id in seen:
                raise CorruptBlobError(f"Stored custom categories repeat {category.id}")
            seen.add(category.id)
            self._ids.reserve(category.id)

        self._custom = customs
        self._logger.info("custom_categories_loaded", count=len(customs))
        return list(customs)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def custom_categories(self) -> list[Category]:
        return list(self._custom)

    def find(self, category_id: str) -> Optional[Category]:
        """Look up any category by ID, or None."""
        category = self._system_index.get(category_id)
        if category is not None:
            return category
        for category in self._custom:
            if category.id == category_id:
                return category
        return None

    def resolve(self, category_id: str) -> Category:
        """
        Look up any category by ID.

        Raises:
            NotFoundError: If no system or custom category has this ID
        """
        category = self.find(category_id)
        if category is None:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    def list_categories(self, direction: Optional[BillType] = None) -> list[Category]:
        """
        Categories for one direction (or all), in display order.

        System categories come first in declared order, then custom ones
        in insertion order; the result is then sorted by sort_order.
        Python's sort is stable, so equal weights keep that order.
        """
        merged = [*self._system, *self._custom]
        if direction is not None:
            merged = [c for c in merged if c.type == direction]
        return sorted(merged, key=lambda c: c.sort_order)

    def is_system(self, category_id: str) -> bool:
        return category_id in self._system_index

    def available_icons(self) -> list[str]:
        """Icon keys a custom category may use."""
        return list(self._icons)

    def icon_for(self, icon_key: Optional[str]) -> str:
        """Glyph for an icon key, or the fallback glyph."""
        if icon_key is None:
            return self._settings.fallback_category_icon
        return self._icons.get(icon_key, self._settings.fallback_category_icon)

    def label_for(self, category_id: str) -> tuple[str, str]:
        """
        Display name and glyph for a category ID.

        Never raises - unknown IDs (e.g. a custom category deleted after
        bills were filed under it) get the fallback label and glyph.
        """
        category = self.find(category_id)
        if category is None:
            return self._settings.fallback_category_name, self._settings.fallback_category_icon
        return category.name, self.icon_for(category.icon)

    # ------------------------------------------------------------------
    # Mutations (custom categories only)
    # ------------------------------------------------------------------

    def add(self, payload: CategoryCreate) -> Category:
        """
        Create a custom category with a fresh ID.

        Raises:
            ValidationError: If the icon key is unknown
            PersistenceError: If the custom set could not be saved
        """
        self._check_icon(payload.icon)
        category = Category(
            id=self._ids.next_id(),
            name=payload.name,
            icon=payload.icon,
            type=payload.type,
            is_custom=True,
            sort_order=payload.sort_order,
        )
        self._commit([*self._custom, category])
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.CATEGORY_ADDED, category.id, category.name,
        ))
        return category

    def update(self, category_id: str, changes: CategoryUpdate) -> Category:
        """
        Apply a partial update to a custom category.

        Raises:
            NotFoundError: If the ID is unknown or names a system category
            ValidationError: If the new icon key is unknown
            PersistenceError: If the custom set could not be saved
        """
        index = self._custom_index(category_id)
        updates = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "icon" in updates:
            self._check_icon(updates["icon"])

        current = self._custom[index]
        updated = Category(**{**current.model_dump(), **updates})

        new_custom = list(self._custom)
        new_custom[index] = updated
        self._commit(new_custom)
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.CATEGORY_UPDATED, updated.id, updated.name,
        ))
        return updated

    def remove(self, category_id: str) -> Category:
        """
        Delete a custom category.

        Bills already filed under it keep the ID; statistics show them
        with the fallback label.

        Raises:
            NotFoundError: If the ID is unknown or names a system category
            PersistenceError: If the custom set could not be saved
        """
        index = self._custom_index(category_id)
        removed = self._custom[index]
        new_custom = self._custom[:index] + self._custom[index + 1:]
        self._commit(new_custom)
        self._audit.log(AuditEventBuilder.category_changed(
            AuditEventType.CATEGORY_REMOVED, removed.id, removed.name,
        ))
        return removed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _custom_index(self, category_id: str) -> int:
        if self.is_system(category_id):
            raise NotFoundError(f"System category {category_id} is read-only")
        for index, category in enumerate(self._custom):
            if category.id == category_id:
                return index
        raise NotFoundError(f"Custom category not found: {category_id}")

    def _check_icon(self, icon_key: str) -> None:
        if icon_key not in self._icons:
            raise ValidationError(f"Unknown icon key: {icon_key}")

    def _commit(self, new_custom: list[Category]) -> None:
        """Persist the new custom set, then make it current."""
        key = StorageKeys.CUSTOM_CATEGORIES.value
        try:
            save_items(self._storage, key, new_custom, Category)
        except PersistenceError as e:
            self._audit.log(AuditEventBuilder.persistence_failed(key, str(e)))
            raise
        self._custom = new_custom
