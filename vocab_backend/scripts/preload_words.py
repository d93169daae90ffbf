# vocab_backend/scripts/preload_words.py
#
# Bulk-load a newline separated word list as placeholder records.
# Existing `preloaded` records are removed first; enriched/external words are kept.
import argparse
import asyncio
import logging
import re
from pathlib import Path
from typing import Iterator, List

from vocab_backend.app.core.config import config
from vocab_backend.app.core.mongodb import MongoDB, close_mongodb, ensure_word_indexes, init_mongodb
from vocab_backend.app.models.word import (
    PRELOAD_EXAMPLE,
    PRELOAD_MEANING,
    Completeness,
    WordRecord,
    WordSource,
)
from vocab_backend.app.services.word_store import SORT_FREQUENCY, WordStore

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"^[a-z]{2,20}$")
COMMON_ENDINGS = ("ing", "ed", "er", "es", "ly", "tion", "ment", "ness")
COMMON_PREFIXES = ("un", "re", "pre", "dis", "mis", "over")
BATCH_SIZE = 100


def frequency_score(word: str) -> int:
    """Rough commonness heuristic: shorter words and familiar affixes rank higher."""
    score = 100 - len(word) * 2
    if word.endswith(COMMON_ENDINGS):
        score += 20
    if word.startswith(COMMON_PREFIXES):
        score += 15
    return max(10, score)


def read_words(path: Path) -> Iterator[str]:
    seen = set()
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            word = line.strip().lower()
            if not WORD_PATTERN.match(word) or word in seen:
                continue
            seen.add(word)
            yield word


def build_preload_record(word: str) -> WordRecord:
    return WordRecord(
        word=word,
        meaning=PRELOAD_MEANING.format(word=word),
        example=PRELOAD_EXAMPLE.format(word=word),
        source=WordSource.PRELOADED,
        frequency=frequency_score(word),
        is_active=True,
        completeness=Completeness.PLACEHOLDER,
    )


async def preload(store: WordStore, path: Path, batch_size: int = BATCH_SIZE) -> int:
    deleted = await store.delete_by_source(WordSource.PRELOADED)
    logger.info(f"🧹 Cleared {deleted} existing preloaded words")

    count = 0
    batch: List[WordRecord] = []
    for word in read_words(path):
        batch.append(build_preload_record(word))
        if len(batch) >= batch_size:
            count += await store.insert_many(batch)
            logger.info(f"✅ Preloaded {count} words so far...")
            batch = []
    if batch:
        count += await store.insert_many(batch)
    return count


async def run(path: Path, batch_size: int):
    init_mongodb(config.MONGODB_URL, config.MONGODB_DB_NAME)
    try:
        db = MongoDB.get_database()
        await ensure_word_indexes(db, config.WORDS_COLLECTION)
        store = WordStore.from_database(db, config.WORDS_COLLECTION)

        count = await preload(store, path, batch_size)
        logger.info(f"🎉 Preloaded {count} words")
        logger.info(f"📊 Total words in DB: {await store.count()}")
        logger.info(f"📦 Preloaded words: {await store.count({'source': WordSource.PRELOADED.value})}")

        sample, _ = await store.page({"source": WordSource.PRELOADED.value}, SORT_FREQUENCY, 1, 5)
        for record in sample:
            logger.info(f"   {record.word} (frequency: {record.frequency})")
    finally:
        close_mongodb()


def main():
    parser = argparse.ArgumentParser(description="Preload a word list as placeholder records")
    parser.add_argument("-i", "--input", required=True, type=Path,
                        help="word list, one word per line")
    parser.add_argument("-b", "--batch-size", type=int, default=BATCH_SIZE,
                        help=f"insert batch size (default {BATCH_SIZE})")
    args = parser.parse_args()

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
    if not args.input.exists():
        parser.error(f"word list not found: {args.input}")
    asyncio.run(run(args.input, args.batch_size))


if __name__ == "__main__":
    main()
