# vocab_backend/scripts/verify_enrichment.py
import argparse
import asyncio
import logging
from typing import Any, Dict

from vocab_backend.app.core.config import config
from vocab_backend.app.core.mongodb import MongoDB, close_mongodb, init_mongodb
from vocab_backend.app.models.word import Completeness, WordSource
from vocab_backend.app.services.word_store import PENDING_DEFINITION_QUERY, SORT_ALPHABETICAL, WordStore

logger = logging.getLogger(__name__)


async def collect_status(store: WordStore, samples: int = 3) -> Dict[str, Any]:
    total = await store.count()
    enriched = await store.count({
        "source": WordSource.ENRICHED.value,
        "completeness": {"$in": [Completeness.PARTIAL.value, Completeness.COMPLETE.value]},
    })
    complete = await store.count({"completeness": Completeness.COMPLETE.value})
    pending = await store.count(PENDING_DEFINITION_QUERY)
    inactive = await store.count({"isActive": False})
    sample, _ = await store.page({"source": WordSource.ENRICHED.value}, SORT_ALPHABETICAL, 1, samples)
    return {
        "total": total,
        "enriched": enriched,
        "complete": complete,
        "pending": pending,
        "inactive": inactive,
        "completion": round(enriched / total * 100, 1) if total else 0.0,
        "samples": sample,
    }


async def run(samples: int):
    init_mongodb(config.MONGODB_URL, config.MONGODB_DB_NAME)
    try:
        store = WordStore.from_database(MongoDB.get_database(), config.WORDS_COLLECTION)
        status = await collect_status(store, samples)
    finally:
        close_mongodb()

    print("📊 Enrichment Status:")
    print(f"   Total words: {status['total']}")
    print(f"   Enriched words: {status['enriched']} ({status['complete']} with all translations)")
    print(f"   Pending enrichment: {status['pending']}")
    print(f"   Inactive words: {status['inactive']}")
    print(f"   Completion: {status['completion']}%")

    print("\n🔍 Sample enriched words:")
    for record in status["samples"]:
        print(f"\n   Word: {record.word}")
        print(f"   Meaning: {record.meaning[:60]}...")
        print(f"   Example: {record.example[:60]}...")
        print(f"   Translations: {record.translations}")


def main():
    parser = argparse.ArgumentParser(description="Report how much of the word store has been enriched")
    parser.add_argument("-s", "--samples", type=int, default=3, help="sample words to print")
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
    asyncio.run(run(args.samples))


if __name__ == "__main__":
    main()
