#!/usr/bin/env python3
"""Real service verification script. Run with actual credentials.

Usage:
  1. Fill in ANTHROPIC_API_KEY (and STORE_BACKEND / DATABASE_URL) in .env
  2. Run: python scripts/verify_apis.py [CODE]

Steps:
  Step 1: Verify .env configuration
  Step 2: Mapping store reachable and populated
  Step 3: Translate by code without enrichment
  Step 4: Live enrichment call for the matched term
"""

import asyncio
import sys


def step_header(n: int, title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  Step {n}: {title}")
    print(f"{'='*60}\n")


def ok(msg: str) -> None:
    print(f"  ✅ {msg}")


def fail(msg: str) -> None:
    print(f"  ❌ {msg}")


def info(msg: str) -> None:
    print(f"  ℹ️  {msg}")


async def main(code: str) -> int:
    from namaste_translate.config import settings
    from namaste_translate.engine.orchestrator import TranslationOrchestrator
    from namaste_translate.exceptions import TranslationError
    from namaste_translate.main import build_store

    step_header(1, "Verify .env Configuration")
    if settings.anthropic_api_key:
        ok(f"ANTHROPIC_API_KEY: set ({settings.anthropic_api_key[:10]}...)")
    else:
        fail("ANTHROPIC_API_KEY: not set, enrichment will be unstructured")
    info(f"STORE_BACKEND={settings.store_backend} TRANSLATE_MODE={settings.translate_mode}")

    step_header(2, "Mapping Store")
    try:
        store = build_store()
        documents = await store.list_grouped_documents()
        ok(f"Store reachable | concept_maps={len(documents)}")
    except TranslationError as e:
        fail(e.message)
        return 1

    step_header(3, f"Translate by code: {code}")
    orchestrator = TranslationOrchestrator(store, enrich=False)
    try:
        result = await orchestrator.translate_by_code(code)
        ok(f"system={result.system} | fields={sorted(result.to_response())}")
    except TranslationError as e:
        fail(e.message)
        return 1

    step_header(4, "Live Enrichment")
    term = result.record.namc_term or code
    enrichment = await orchestrator.enrichment.fetch_drug_info(term)
    if enrichment.structured:
        ok(f"structured | drugs={len(enrichment.payload.drugs)}")
    else:
        fail(f"unstructured | {enrichment.diagnostic}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "AAA1.1")))
