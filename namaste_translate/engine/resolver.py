"""Match Resolver: turns a code and/or name query into raw matches.

Two independent strategies:
  - grouped: partial match on ConceptMap element code/display, every target
    of every matching element becomes a RawMatch
  - flat: exact (code) or substring (name) lookup over the specialty
    collections, tried in SPECIALTY_COLLECTIONS order, first hit wins
"""

import logging
from dataclasses import dataclass
from typing import Any

from namaste_translate.exceptions import InvalidQuery, NotFound
from namaste_translate.schemas import ConceptMapDocument, RawMatch
from namaste_translate.store.base import (
    SPECIALTY_COLLECTIONS,
    GroupedQuery,
    MappingStore,
    SpecialtyCollection,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlatHit:
    """A specialty record and the collection it came from."""
    collection: SpecialtyCollection
    record: dict[str, Any]


def clean_query(value: str | None) -> str | None:
    """Trimmed text, or None when missing or blank."""
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def describe_query(code: str | None = None, name: str | None = None) -> str:
    parts = []
    if code:
        parts.append(f"code: {code}")
    if name:
        parts.append(f"name: {name}")
    return ", ".join(parts)


def collect_matches(
    documents: list[ConceptMapDocument], query: GroupedQuery,
) -> list[RawMatch]:
    """Raw matches in document → group → element → target order."""
    matches = []
    for document in documents:
        for group in document.group:
            for element in group.element:
                if not query.element_matches(element):
                    continue
                for target in element.target:
                    matches.append(RawMatch(
                        source_code=element.code,
                        source_display=element.display,
                        target_code=target.code,
                        target_display=target.display,
                        equivalence=target.equivalence,
                        comment=target.comment,
                    ))
    return matches


class MatchResolver:
    """Resolves queries against a MappingStore."""

    def __init__(
        self,
        store: MappingStore,
        collections: tuple[SpecialtyCollection, ...] = SPECIALTY_COLLECTIONS,
    ):
        self.store = store
        self.collections = collections

    # ── Grouped-document strategy ──

    async def resolve_grouped(
        self, code: str | None = None, name: str | None = None,
    ) -> list[RawMatch]:
        code, name = clean_query(code), clean_query(name)
        if code is None and name is None:
            raise InvalidQuery("Missing or invalid ?code or ?name parameter")

        label = describe_query(code, name)
        query = GroupedQuery(code=code, name=name)
        documents = await self.store.find_grouped_documents_matching(query)
        if not documents:
            raise NotFound(f"No ConceptMap found for {label}", query=label)

        matches = collect_matches(documents, query)
        if not matches:
            raise NotFound(f"No matching mappings found for {label}", query=label)

        logger.info(
            "Grouped resolve | %s | documents=%d | raw_matches=%d",
            label, len(documents), len(matches),
        )
        return matches

    # ── Flat-table strategy ──

    async def resolve_flat_by_code(self, code: str | None) -> FlatHit:
        code = clean_query(code)
        if code is None:
            raise InvalidQuery("Missing or invalid ?code parameter")

        for collection in self.collections:
            record = await self.store.find_flat_record_by_code(collection, code)
            if record is not None:
                logger.info("Flat resolve | system=%s | code=%s", collection.system, code)
                return FlatHit(collection=collection, record=record)

        raise NotFound(f"No record found for code: {code}", query=code)

    async def resolve_flat_by_name(self, name: str | None) -> FlatHit:
        name = clean_query(name)
        if name is None:
            raise InvalidQuery("Missing or invalid ?name parameter")

        for collection in self.collections:
            record = await self.store.find_flat_record_by_any_field(
                collection, collection.search_fields, name,
            )
            if record is not None:
                logger.info("Flat resolve | system=%s | name=%s", collection.system, name)
                return FlatHit(collection=collection, record=record)

        raise NotFound(f"No record found for name: {name}", query=name)
