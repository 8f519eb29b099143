"""In-memory mapping store backed by a JSON seed document.

Seed layout:
  {
    "concept_maps": [ConceptMap, ...],
    "ayurveda_mappings": [row, ...],
    "siddha_mappings": [row, ...]
  }

Used for demo mode and tests. Rows are kept as plain dicts keyed by the
NAMASTE column headers, exactly as they would come out of the SQL tables.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from namaste_translate.exceptions import StoreUnavailable
from namaste_translate.schemas import ConceptMapDocument
from namaste_translate.store.base import GroupedQuery, SpecialtyCollection
from namaste_translate.store.matching import LiteralPattern

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = Path(__file__).parent.parent / "data" / "demo_seed.json"


class InMemoryMappingStore:
    """Read-only store over already-loaded documents and rows."""

    def __init__(
        self,
        concept_maps: list[dict[str, Any]] | None = None,
        tables: dict[str, list[dict[str, Any]]] | None = None,
    ):
        self._documents = [ConceptMapDocument.model_validate(d) for d in concept_maps or []]
        self._tables = {name: list(rows) for name, rows in (tables or {}).items()}

    @classmethod
    def from_seed(cls, data: dict[str, Any]) -> "InMemoryMappingStore":
        tables = {k: v for k, v in data.items() if k != "concept_maps" and isinstance(v, list)}
        return cls(concept_maps=data.get("concept_maps", []), tables=tables)

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "InMemoryMappingStore":
        """Load a seed file. Raises StoreUnavailable if it cannot be read."""
        seed_path = Path(path) if path else DEFAULT_SEED_PATH
        try:
            data = json.loads(seed_path.read_text(encoding="utf-8"))
            store = cls.from_seed(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error("Seed load failed | path=%s | %s", seed_path, str(e)[:200])
            raise StoreUnavailable(f"Mapping seed could not be loaded: {seed_path.name}") from e

        logger.info(
            "Seed loaded | path=%s | concept_maps=%d | tables=%s",
            seed_path, len(store._documents),
            {name: len(rows) for name, rows in store._tables.items()},
        )
        return store

    async def find_grouped_documents_matching(self, query: GroupedQuery) -> list[ConceptMapDocument]:
        return [doc for doc in self._documents if query.document_matches(doc)]

    async def list_grouped_documents(self) -> list[ConceptMapDocument]:
        return list(self._documents)

    async def find_flat_record_by_code(
        self, collection: SpecialtyCollection, code: str,
    ) -> dict[str, Any] | None:
        pattern = LiteralPattern(code)
        for row in self._rows(collection):
            if pattern.equals(_as_text(row.get(collection.code_field))):
                return dict(row)
        return None

    async def find_flat_record_by_any_field(
        self, collection: SpecialtyCollection, fields: tuple[str, ...], query: str,
    ) -> dict[str, Any] | None:
        pattern = LiteralPattern(query)
        for row in self._rows(collection):
            if any(pattern.contains(_as_text(row.get(f))) for f in fields):
                return dict(row)
        return None

    def _rows(self, collection: SpecialtyCollection) -> list[dict[str, Any]]:
        return self._tables.get(collection.table, [])


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
