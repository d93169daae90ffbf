# vocab_backend/scripts/enrich_words.py
#
# Offline enrichment: fill placeholder words (or words not refreshed for
# N days) with a fixed pause between words to stay polite to the providers.
import argparse
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional

import httpx

from vocab_backend.app.core.config import config
from vocab_backend.app.core.errors import StoreUnavailableError
from vocab_backend.app.core.mongodb import MongoDB, close_mongodb, init_mongodb
from vocab_backend.app.main import build_services
from vocab_backend.app.models.word import WordRecord
from vocab_backend.app.services.enrichment_service import EnrichmentService

logger = logging.getLogger(__name__)


async def enrich_batch(
    service: EnrichmentService,
    records: Iterable[WordRecord],
    delay: float = 1.0,
    max_failures: int = 3,
    refresh: bool = False,
) -> Dict[str, int]:
    """
    Enrich each record once. Words whose dictionary lookup has failed
    `max_failures` times are deactivated and left as they are.
    """
    stats = {"processed": 0, "enriched": 0, "pending": 0, "deactivated": 0, "errors": 0}
    for record in records:
        stats["processed"] += 1
        logger.info(f"🔍 Enriching: {record.word}")
        try:
            if refresh or service.needs_definition(record):
                record = await service.enrich_definition(record)

            if not record.definition_ready and record.enrichment_failures >= max_failures:
                await service.deactivate(record)
                stats["deactivated"] += 1
            else:
                languages = list(service.languages) if refresh else None
                record = await service.enrich_translations(record, languages)
                stats["enriched" if record.definition_ready else "pending"] += 1
        except StoreUnavailableError as e:
            logger.error(f"❌ Failed to enrich {record.word}: {e.message}")
            stats["errors"] += 1

        if delay:
            await asyncio.sleep(delay)
    return stats


async def run(limit: int, delay: float, max_failures: int, stale_days: Optional[int]):
    init_mongodb(config.MONGODB_URL, config.MONGODB_DB_NAME)
    try:
        async with httpx.AsyncClient(follow_redirects=True) as client:
            query_service = build_services(MongoDB.get_database(), config, http_client=client)
            service = query_service.enrichment

            if stale_days is not None:
                before = datetime.now(timezone.utc) - timedelta(days=stale_days)
                records = await service.store.find_stale(before, limit)
                logger.info(f"📝 Found {len(records)} words not refreshed since {before:%Y-%m-%d}")
            else:
                records = await service.store.find_needing_enrichment(limit)
                logger.info(f"📝 Found {len(records)} words to enrich")

            stats = await enrich_batch(
                service, records, delay=delay, max_failures=max_failures, refresh=stale_days is not None
            )
        logger.info(f"🎉 Enrichment finished: {stats}")
    finally:
        close_mongodb()


def main():
    parser = argparse.ArgumentParser(description="Enrich placeholder words from the dictionary and translation providers")
    parser.add_argument("-n", "--limit", type=int, default=config.BATCH_SIZE,
                        help=f"words per run (default {config.BATCH_SIZE})")
    parser.add_argument("-d", "--delay", type=float, default=config.BATCH_DELAY_SECONDS,
                        help="seconds to wait between words")
    parser.add_argument("--max-failures", type=int, default=config.MAX_ENRICHMENT_FAILURES,
                        help="failed lookups before a word is deactivated")
    parser.add_argument("--stale-days", type=int, default=None,
                        help="refresh words whose lastFetched is older than this many days")
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
    asyncio.run(run(args.limit, args.delay, args.max_failures, args.stale_days))


if __name__ == "__main__":
    main()
