"""Drug / treatment enrichment from the generative knowledge service.

One call per translation, never retried. Every failure is converted into an
UnstructuredEnrichment so the core translation is always delivered.
"""

import logging

from pydantic import ValidationError

from namaste_translate.config import settings
from namaste_translate.schemas import (
    DrugInformation,
    StructuredEnrichment,
    UnstructuredEnrichment,
)
from namaste_translate.services.llm_client import call_model, extract_json, load_prompt

logger = logging.getLogger(__name__)

PROMPT_NAME = "drug_information"

MSG_NO_KEY = "Enrichment API key not configured."
MSG_INVALID_JSON = "Invalid enrichment JSON."
MSG_INVALID_SHAPE = "Enrichment response did not match the expected structure."
MSG_TIMEOUT = "Enrichment service timed out."
MSG_ERROR = "Error fetching drug information."


def build_user_message(term: str) -> str:
    return f'Given the condition: "{term}"'


def parse_drug_information(text: str) -> StructuredEnrichment | UnstructuredEnrichment:
    """Strict parse, then balanced-brace fallback, then shape validation."""
    parsed = extract_json(text or "")
    if parsed is None:
        return UnstructuredEnrichment(diagnostic=MSG_INVALID_JSON)
    try:
        payload = DrugInformation.model_validate(parsed)
    except ValidationError as e:
        logger.warning("Enrichment shape invalid | errors=%d", e.error_count())
        return UnstructuredEnrichment(diagnostic=MSG_INVALID_SHAPE)
    return StructuredEnrichment(payload=payload)


class EnrichmentClient:
    """Fetches structured drug information for a matched term."""

    async def fetch_drug_info(self, term: str) -> StructuredEnrichment | UnstructuredEnrichment:
        if not settings.has_anthropic_key:
            return UnstructuredEnrichment(diagnostic=MSG_NO_KEY)

        try:
            text = await call_model(load_prompt(PROMPT_NAME), build_user_message(term))
        except TimeoutError:
            return UnstructuredEnrichment(diagnostic=MSG_TIMEOUT)
        except Exception as e:
            logger.error("Enrichment failed | term=%s | %s", term[:80], str(e)[:200])
            return UnstructuredEnrichment(diagnostic=MSG_ERROR)

        result = parse_drug_information(text)
        logger.info("Enrichment done | term=%s | structured=%s", term[:80], result.structured)
        return result
