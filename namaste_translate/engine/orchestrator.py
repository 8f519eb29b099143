"""Translation Orchestrator: composes resolver, builder and enrichment.

Flat mode:    resolve (code | name) → enrich with the record's term → merge
Grouped mode: resolve (code and/or name) → dedupe → Parameters resource

Steps run sequentially within one request; nothing is shared between
requests beyond the store and enrichment client handles.
"""

import logging
import time

from namaste_translate.config import settings
from namaste_translate.engine.builder import build_flat_result, build_parameters
from namaste_translate.engine.resolver import FlatHit, MatchResolver, clean_query, describe_query
from namaste_translate.schemas import (
    ConceptMapDocument,
    ParametersResource,
    TranslationResult,
)
from namaste_translate.services.enrichment import EnrichmentClient
from namaste_translate.store.base import MappingStore

logger = logging.getLogger(__name__)


class TranslationOrchestrator:
    """Entry point for $translate requests."""

    def __init__(
        self,
        store: MappingStore,
        enrichment: EnrichmentClient | None = None,
        enrich: bool | None = None,
    ):
        self.store = store
        self.resolver = MatchResolver(store)
        self.enrichment = enrichment or EnrichmentClient()
        self.enrich = settings.enrichment_enabled if enrich is None else enrich

    async def translate_by_code(self, code: str | None) -> TranslationResult:
        start = time.monotonic()
        hit = await self.resolver.resolve_flat_by_code(code)
        result = await self._finish_flat(hit, fallback_term=clean_query(code) or "")
        logger.info(
            "Translate OK | system=%s | code=%s | %dms",
            result.system, hit.record.get(hit.collection.code_field), _elapsed_ms(start),
        )
        return result

    async def translate_by_name(self, name: str | None) -> TranslationResult:
        start = time.monotonic()
        hit = await self.resolver.resolve_flat_by_name(name)
        result = await self._finish_flat(hit, fallback_term=clean_query(name) or "")
        logger.info(
            "Translate OK | system=%s | name=%s | %dms",
            result.system, clean_query(name), _elapsed_ms(start),
        )
        return result

    async def translate_grouped(
        self, code: str | None = None, name: str | None = None,
    ) -> ParametersResource:
        start = time.monotonic()
        raw = await self.resolver.resolve_grouped(code, name)
        label = describe_query(clean_query(code), clean_query(name))
        resource = build_parameters(raw, label)
        logger.info(
            "Translate OK | grouped | %s | raw=%d unique=%d | %dms",
            label, len(raw), len(resource.parameter), _elapsed_ms(start),
        )
        return resource

    async def list_concept_maps(self) -> list[ConceptMapDocument]:
        return await self.store.list_grouped_documents()

    async def _finish_flat(
        self, hit: FlatHit, fallback_term: str,
    ) -> TranslationResult:
        result = build_flat_result(hit)
        if self.enrich:
            term = hit.collection.preferred_term(hit.record, fallback_term)
            result.enrichment = await self.enrichment.fetch_drug_info(term)
        return result


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
