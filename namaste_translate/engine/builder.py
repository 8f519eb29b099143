"""Deduplicator & Result Builder."""

from namaste_translate.engine.resolver import FlatHit
from namaste_translate.exceptions import NotFound
from namaste_translate.schemas import (
    AyurvedaTranslation,
    MatchParameter,
    ParametersResource,
    RawMatch,
    SiddhaTranslation,
    StructuredEnrichment,
    TranslationResult,
    UnstructuredEnrichment,
)

_RESULT_TYPES = {
    "AYURVEDA": AyurvedaTranslation,
    "SIDDHA": SiddhaTranslation,
}


def dedupe_matches(matches: list[RawMatch]) -> list[RawMatch]:
    """Keep the first match per (sourceCode, targetCode), preserving order."""
    seen = set()
    unique = []
    for match in matches:
        if match.dedup_key in seen:
            continue
        seen.add(match.dedup_key)
        unique.append(match)
    return unique


def build_parameters(matches: list[RawMatch], label: str = "") -> ParametersResource:
    unique = dedupe_matches(matches)
    if not unique:
        raise NotFound(f"No matching mappings found for {label}", query=label)
    return ParametersResource(
        parameter=[MatchParameter(**m.model_dump()) for m in unique],
    )


def build_flat_result(
    hit: FlatHit,
    enrichment: StructuredEnrichment | UnstructuredEnrichment | None = None,
) -> TranslationResult:
    result_type = _RESULT_TYPES[hit.collection.system]
    record = hit.collection.record_model.model_validate(hit.record)
    return result_type(record=record, enrichment=enrichment)
