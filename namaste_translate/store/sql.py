"""PostgreSQL mapping store (SQLAlchemy async).

Specialty lookups run in SQL with escaped patterns. ConceptMap documents
are few and deeply nested, so they are loaded whole and filtered in Python
with the same GroupedQuery used by the in-memory store.
"""

import logging
import time
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from namaste_translate.exceptions import StoreUnavailable
from namaste_translate.models import ConceptMapRecord
from namaste_translate.models.specialty_mappings import SPECIALTY_MODELS
from namaste_translate.schemas import ConceptMapDocument
from namaste_translate.store.base import GroupedQuery, SpecialtyCollection
from namaste_translate.store.matching import LiteralPattern

logger = logging.getLogger(__name__)

_UNAVAILABLE_ERRORS = (DBAPIError, InterfaceError, OperationalError, OSError)


class SqlMappingStore:
    """Read-only store over the concept_maps and specialty tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_grouped_documents_matching(self, query: GroupedQuery) -> list[ConceptMapDocument]:
        documents = await self.list_grouped_documents()
        return [doc for doc in documents if query.document_matches(doc)]

    async def list_grouped_documents(self) -> list[ConceptMapDocument]:
        stmt = select(ConceptMapRecord).order_by(ConceptMapRecord.created_at, ConceptMapRecord.name)
        rows = await self._scalars(stmt, "concept_maps")
        return [row.to_document() for row in rows]

    async def find_flat_record_by_code(
        self, collection: SpecialtyCollection, code: str,
    ) -> dict[str, Any] | None:
        model = SPECIALTY_MODELS[collection.table]
        pattern = LiteralPattern(code)
        stmt = (
            select(model)
            .where(pattern.equals_clause(model.column_for(collection.code_field)))
            .order_by(model.id)
            .limit(1)
        )
        rows = await self._scalars(stmt, collection.table)
        return rows[0].to_record() if rows else None

    async def find_flat_record_by_any_field(
        self, collection: SpecialtyCollection, fields: tuple[str, ...], query: str,
    ) -> dict[str, Any] | None:
        model = SPECIALTY_MODELS[collection.table]
        pattern = LiteralPattern(query)
        stmt = (
            select(model)
            .where(or_(*(pattern.contains_clause(model.column_for(f)) for f in fields)))
            .order_by(model.id)
            .limit(1)
        )
        rows = await self._scalars(stmt, collection.table)
        return rows[0].to_record() if rows else None

    async def _scalars(self, stmt, table: str) -> list:
        start = time.monotonic()
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = list(result.scalars().all())
        except _UNAVAILABLE_ERRORS as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Store query failed | table=%s | %dms | %s", table, elapsed_ms, str(e)[:200])
            raise StoreUnavailable("Terminology store is unavailable.") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.debug("Store query OK | table=%s | rows=%d | %dms", table, len(rows), elapsed_ms)
        return rows
