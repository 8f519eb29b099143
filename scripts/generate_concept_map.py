#!/usr/bin/env python3
"""Generate the Ayurveda terminology ConceptMap from the Ayurveda table.

Usage:
  python scripts/generate_concept_map.py                 # rewrite the seed JSON (SEED_PATH or bundled)
  python scripts/generate_concept_map.py --sql           # replace ConceptMaps in PostgreSQL

Existing ConceptMaps are replaced by the generated one.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from sqlalchemy import delete, select

from namaste_translate.config import settings
from namaste_translate.engine.generator import build_ayurveda_concept_map
from namaste_translate.store.memory import DEFAULT_SEED_PATH

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("generate_concept_map")


def generate_into_seed(seed_path: Path) -> int:
    data = json.loads(seed_path.read_text(encoding="utf-8"))
    rows = data.get("ayurveda_mappings", [])
    if not rows:
        logger.warning("No mappings found in ayurveda_mappings")
        return 0

    logger.info("Found %d Ayurveda terminology entries", len(rows))
    concept_map = build_ayurveda_concept_map(rows)
    data["concept_maps"] = [concept_map.model_dump(by_alias=True, exclude_none=True)]
    seed_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    logger.info("ConceptMap written | path=%s", seed_path)
    return len(rows)


async def generate_into_database() -> int:
    from namaste_translate.database import close_db, get_session_factory, init_db
    from namaste_translate.models import AyurvedaMapping, ConceptMapRecord

    if not await init_db():
        logger.error("Database unavailable, nothing generated")
        return 0

    try:
        async with get_session_factory()() as session:
            result = await session.execute(select(AyurvedaMapping).order_by(AyurvedaMapping.id))
            rows = [row.to_record() for row in result.scalars().all()]
            if not rows:
                logger.warning("No mappings found in ayurveda_mappings")
                return 0

            logger.info("Found %d Ayurveda terminology entries", len(rows))
            concept_map = build_ayurveda_concept_map(rows)
            await session.execute(delete(ConceptMapRecord))
            session.add(ConceptMapRecord.from_document(concept_map))
            await session.commit()
            logger.info("ConceptMap successfully created")
            return len(rows)
    finally:
        await close_db()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--sql", action="store_true", help="write into PostgreSQL instead of the seed file")
    parser.add_argument("--seed", default=settings.seed_path or str(DEFAULT_SEED_PATH))
    args = parser.parse_args()

    if args.sql:
        count = asyncio.run(generate_into_database())
    else:
        count = generate_into_seed(Path(args.seed))
    return 0 if count else 1


if __name__ == "__main__":
    sys.exit(main())
