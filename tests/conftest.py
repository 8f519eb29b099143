"""Shared test fixtures and configuration."""

import os

import pytest

# Ensure we're in demo mode during tests (no real API keys)
os.environ.setdefault("ANTHROPIC_API_KEY", "")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("TRANSLATE_MODE", "flat")

from namaste_translate.engine.orchestrator import TranslationOrchestrator  # noqa: E402
from namaste_translate.schemas import (  # noqa: E402
    DrugEntry,
    DrugInformation,
    StructuredEnrichment,
)
from namaste_translate.store.memory import InMemoryMappingStore  # noqa: E402


class RecordingEnrichment:
    """Enrichment stand-in that remembers the terms it was asked about."""

    def __init__(self, result=None):
        self.terms: list[str] = []
        self.result = result or StructuredEnrichment(payload=DrugInformation(
            condition="Prameha",
            drugs=[DrugEntry(
                name="Nisha Amalaki",
                form="Tablet",
                uses="Glycaemic control",
                modern_equivalent="Metformin",
                modern_classification="Biguanide",
            )],
        ))

    async def fetch_drug_info(self, term: str):
        self.terms.append(term)
        return self.result


@pytest.fixture
def seed_data():
    """Small seed with a (sourceCode, targetCode) pair repeated across groups."""
    return {
        "concept_maps": [
            {
                "resourceType": "ConceptMap",
                "name": "AyurvedaTerminology",
                "url": "http://namaste.ai/fhir/ConceptMap/ayurveda-terms",
                "status": "active",
                "group": [
                    {
                        "source": "NAMASTE-AYURVEDA",
                        "target": "English",
                        "element": [
                            {
                                "code": "AAA1.1",
                                "display": "Diabetes-like urinary disorder",
                                "target": [
                                    {"code": "Prameha", "display": "prameha", "equivalence": "related",
                                     "comment": "generated"},
                                ],
                            },
                            {
                                "code": "EC-3",
                                "display": "Fever",
                                "target": [
                                    {"code": "Jvara", "display": "jvaraḥ", "equivalence": "related"},
                                    {"code": "MG26", "display": "Fever, unspecified", "equivalence": "equivalent"},
                                ],
                            },
                        ],
                    },
                    {
                        "source": "NAMASTE-AYURVEDA",
                        "target": "English-Synonyms",
                        "element": [
                            {
                                "code": "AAA1.1",
                                "display": "Prameha, urinary disorder",
                                "target": [
                                    {"code": "Prameha", "display": "prameha (dup)", "equivalence": "related"},
                                ],
                            },
                        ],
                    },
                ],
            },
            {
                "resourceType": "ConceptMap",
                "name": "NoTargets",
                "group": [
                    {
                        "source": "NAMASTE-AYURVEDA",
                        "target": "English",
                        "element": [{"code": "EMPTY-1", "display": "Orphan element", "target": []}],
                    },
                ],
            },
        ],
        "ayurveda_mappings": [
            {
                "NAMC_ID": "1",
                "NAMC_CODE": "AAA1.1",
                "NAMC_term": "Prameha",
                "NAMC_term_diacritical": "prameha",
                "NAMC_term_DEVANAGARI": "प्रमेह",
                "Name English": "Diabetes-like urinary disorder",
                "Short_definition": "Excessive and turbid urination.",
                "Long_definition": "Group of urinary disorders.",
            },
            {
                "NAMC_ID": "2",
                "NAMC_CODE": "ED-2.1",
                "Name English": "Jaundice",
                "Short_definition": "Yellow discolouration of skin and eyes.",
            },
            {
                "NAMC_ID": "3",
                "NAMC_CODE": "DUP-1",
                "NAMC_term": "Ayurveda duplicate",
            },
        ],
        "siddha_mappings": [
            {
                "NAMC_ID": "1",
                "NAMC_CODE": "SD1.2",
                "NAMC_TERM": "Mathumegam",
                "Tamil_term": "மதுமேகம்",
                "Short_definition": "Sweet urine disease.",
            },
            {
                "NAMC_ID": "2",
                "NAMC_CODE": "DUP-1",
                "NAMC_TERM": "Siddha duplicate",
            },
            {
                "NAMC_ID": "3",
                "NAMC_CODE": "SK4.0",
                "Tamil_term": "காமாலை",
            },
        ],
    }


@pytest.fixture
def store(seed_data):
    return InMemoryMappingStore.from_seed(seed_data)


@pytest.fixture
def enrichment():
    return RecordingEnrichment()


@pytest.fixture
def orchestrator(store, enrichment):
    return TranslationOrchestrator(store, enrichment=enrichment, enrich=True)
