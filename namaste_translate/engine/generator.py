"""Builds the Ayurveda terminology ConceptMap from the flat Ayurveda table."""

from typing import Any

from namaste_translate.schemas import (
    ConceptMapDocument,
    ConceptMapElement,
    ConceptMapGroup,
    ConceptMapTarget,
)

CONCEPT_MAP_URL = "http://namaste.ai/fhir/ConceptMap/ayurveda-terms"
SOURCE_SYSTEM = "NAMASTE-AYURVEDA"
GENERATED_COMMENT = "Generated from ayurveda_mappings (Sanskrit → English terminology)"


def element_from_row(row: dict[str, Any]) -> ConceptMapElement:
    return ConceptMapElement(
        code=row.get("NAMC_CODE") or "",
        display=row.get("Name English") or row.get("NAMC_term") or "",
        target=[
            ConceptMapTarget(
                code=row.get("NAMC_term") or "",
                display=row.get("NAMC_term_diacritical") or row.get("NAMC_term_DEVANAGARI") or "—",
                equivalence="related",
                comment=GENERATED_COMMENT,
            ),
        ],
    )


def build_ayurveda_concept_map(rows: list[dict[str, Any]]) -> ConceptMapDocument:
    """One ConceptMap with a single NAMASTE-AYURVEDA → English group."""
    return ConceptMapDocument(
        url=CONCEPT_MAP_URL,
        name="AyurvedaTerminology",
        title="Ayurveda Sanskrit-English Terminology Map",
        status="active",
        source_uri=SOURCE_SYSTEM,
        target_uri="English-Terminology",
        group=[
            ConceptMapGroup(
                source=SOURCE_SYSTEM,
                target="English",
                element=[element_from_row(row) for row in rows],
            ),
        ],
    )
