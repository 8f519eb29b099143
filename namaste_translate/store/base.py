"""Mapping store contract and the specialty collection descriptors.

Three read operations are shared by every backend:
  - find_grouped_documents_matching(query): ConceptMap documents
  - find_flat_record_by_code(collection, code): exact code lookup
  - find_flat_record_by_any_field(collection, fields, query): substring lookup

Backends raise StoreUnavailable when the underlying store cannot be reached.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from namaste_translate.schemas import (
    AyurvedaRecord,
    ConceptMapDocument,
    ConceptMapElement,
    SiddhaRecord,
    SpecialtyRecord,
)
from namaste_translate.store.matching import LiteralPattern


@dataclass(frozen=True)
class SpecialtyCollection:
    """A flat NAMASTE mapping table and the fields the engine reads from it."""

    system: str
    table: str
    record_model: type[SpecialtyRecord]
    search_fields: tuple[str, ...]
    term_fields: tuple[str, ...]
    code_field: str = "NAMC_CODE"

    def preferred_term(self, record: dict[str, Any], fallback: str) -> str:
        """First non-empty term field of the record, else ``fallback``."""
        for field in self.term_fields:
            value = record.get(field)
            if value:
                return str(value)
        return fallback


AYURVEDA = SpecialtyCollection(
    system="AYURVEDA",
    table="ayurveda_mappings",
    record_model=AyurvedaRecord,
    search_fields=(
        "NAMC_term",
        "NAMC_term_diacritical",
        "NAMC_term_DEVANAGARI",
        "Name English",
        "Short_definition",
        "Long_definition",
    ),
    term_fields=("NAMC_term", "Name English"),
)

SIDDHA = SpecialtyCollection(
    system="SIDDHA",
    table="siddha_mappings",
    record_model=SiddhaRecord,
    search_fields=(
        "NAMC_TERM",
        "Tamil_term",
        "Short_definition",
        "Long_definition",
    ),
    term_fields=("NAMC_TERM", "Tamil_term"),
)

# Lookup precedence: first collection with a hit wins.
SPECIALTY_COLLECTIONS: tuple[SpecialtyCollection, ...] = (AYURVEDA, SIDDHA)


class GroupedQuery:
    """Partial, case-insensitive match on element code and/or display."""

    def __init__(self, code: str | None = None, name: str | None = None):
        self.code = LiteralPattern(code) if code else None
        self.name = LiteralPattern(name) if name else None

    def __repr__(self) -> str:
        return f"GroupedQuery(code={self.code!r}, name={self.name!r})"

    def element_matches(self, element: ConceptMapElement) -> bool:
        if self.code is not None and self.code.contains(element.code):
            return True
        if self.name is not None and self.name.contains(element.display):
            return True
        return False

    def document_matches(self, document: ConceptMapDocument) -> bool:
        return any(
            self.element_matches(element)
            for group in document.group
            for element in group.element
        )


class MappingStore(Protocol):
    """Read-only access to the ConceptMap and specialty collections."""

    async def find_grouped_documents_matching(
        self, query: GroupedQuery,
    ) -> list[ConceptMapDocument]: ...

    async def list_grouped_documents(self) -> list[ConceptMapDocument]: ...

    async def find_flat_record_by_code(
        self, collection: SpecialtyCollection, code: str,
    ) -> dict[str, Any] | None: ...

    async def find_flat_record_by_any_field(
        self, collection: SpecialtyCollection, fields: tuple[str, ...], query: str,
    ) -> dict[str, Any] | None: ...
