"""Lookup-or-create resolution of shared ingredient and type rows."""

import logging

from recipebook.errors import DuplicateRow
from recipebook.models.ingredient import IngredientMaster
from recipebook.models.recipe_type import RecipeType
from recipebook.services.row_store import RowStore

logger = logging.getLogger(__name__)


def normalize_name(value: str) -> str:
    """Natural key for master rows: trimmed and case-folded."""
    return value.strip().casefold()


def dedupe_names(values: list[str] | None) -> list[str]:
    """Trimmed, non-blank names, first occurrence wins, case-insensitive."""
    seen: set[str] = set()
    result = []
    for value in values or []:
        if value is None:
            continue
        name = value.strip()
        if not name:
            continue
        key = normalize_name(name)
        if key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


class LookupOrCreateResolver:
    """Find a master row by name or create it, returning its id.

    Names are matched on their normalized form, so "Tỏi", " tỏi " and "TỎI"
    all resolve to the same row. The first spelling seen is kept for display.
    """

    def __init__(self, rows: RowStore):
        self.rows = rows
        self.db = rows.db

    def resolve_ingredient(self, name: str) -> int:
        return self._resolve(IngredientMaster, "name", "normalized_name", name)

    def resolve_type(self, label: str) -> int:
        return self._resolve(RecipeType, "content", "normalized_content", label)

    def resolve_ingredients(self, names: list[str] | None) -> list[int]:
        """Resolve a submitted ingredient list to distinct ids, in order."""
        return _distinct([self.resolve_ingredient(n) for n in dedupe_names(names)])

    def resolve_types(self, labels: list[str] | None) -> list[int]:
        """Resolve a submitted type list to distinct ids, in order."""
        return _distinct([self.resolve_type(label) for label in dedupe_names(labels)])

    def _resolve(self, model, display_field: str, key_field: str, value: str) -> int:
        name = (value or "").strip()
        if not name:
            raise ValueError(f"{model.__tablename__}: name must not be blank")
        key = normalize_name(name)

        existing = self._find(model, key_field, key)
        if existing is not None:
            logger.debug(f"Found {model.__tablename__} {existing.id} for '{name}'")
            return existing.id

        row = model(**{display_field: name, key_field: key})
        try:
            created = self.rows.insert(row)
        except DuplicateRow:
            # Another request created it between our lookup and insert.
            existing = self._find(model, key_field, key)
            if existing is None:
                raise
            logger.info(f"Resolved {model.__tablename__} '{name}' after insert conflict")
            return existing.id

        logger.info(f"Created {model.__tablename__} {created.id} for '{name}'")
        return created.id

    def _find(self, model, key_field: str, key: str):
        return self.rows.first(self.db.query(model).filter(getattr(model, key_field) == key))


def _distinct(ids: list[int]) -> list[int]:
    return list(dict.fromkeys(ids))
