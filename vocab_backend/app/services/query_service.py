# vocab_backend/app/services/query_service.py
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from vocab_backend.app.models.word import WordRecord, normalize_key
from vocab_backend.app.services.enrichment_service import EnrichmentService
from vocab_backend.app.services.word_store import (
    SORT_ALPHABETICAL,
    SORT_FREQUENCY,
    SORT_REVERSE,
    WordStore,
)

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "alphabetical": SORT_ALPHABETICAL,
    "word": SORT_ALPHABETICAL,
    "reverse": SORT_REVERSE,
    "frequency": SORT_FREQUENCY,
}


@dataclass
class WordPage:
    words: List[WordRecord]
    current_page: int
    total_pages: int
    total_words: int
    has_next_page: bool
    has_prev_page: bool


@dataclass
class DailySampleCache:
    """Process-wide sample of active words, regenerated once per UTC day."""

    records: List[WordRecord] = field(default_factory=list)
    generated_date: Optional[str] = None

    def is_fresh(self, today: str) -> bool:
        return self.generated_date == today and bool(self.records)


def _utc_today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class WordQueryService:
    def __init__(
        self,
        store: WordStore,
        enrichment: EnrichmentService,
        sample_cache: Optional[DailySampleCache] = None,
        today: Callable[[], str] = _utc_today,
    ):
        self.store = store
        self.enrichment = enrichment
        self.sample_cache = sample_cache if sample_cache is not None else DailySampleCache()
        self.today = today

    async def list_page(
        self,
        page: int = 1,
        page_size: int = 20,
        search: str = "",
        sort_by: str = "alphabetical",
    ) -> WordPage:
        page = max(page, 1)
        page_size = max(page_size, 1)
        query = {"isActive": True}
        if search:
            query["word"] = {"$regex": re.escape(search.strip()), "$options": "i"}
        sort = SORT_OPTIONS.get(sort_by, SORT_ALPHABETICAL)

        words, total = await self.store.page(query, sort, page, page_size)
        total_pages = math.ceil(total / page_size)
        return WordPage(
            words=words,
            current_page=page,
            total_pages=total_pages,
            total_words=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )

    async def search(self, query: str, limit: int = 20) -> List[WordRecord]:
        """
        Exact match first, then prefix matches in alphabetical order.

        Results are returned as stored; enrichment happens when a single
        word's details are requested.
        """
        key = normalize_key(query)
        if not key:
            return []
        results: List[WordRecord] = []
        exact = await self.store.get(key, active_only=True)
        if exact:
            results.append(exact)
        related = await self.store.find_by_prefix(key, limit, exclude_key=exact.word if exact else None)
        results.extend(related)
        return results

    async def daily_sample(self, n: int = 500) -> List[WordRecord]:
        today = self.today()
        cache = self.sample_cache
        if not cache.is_fresh(today):
            # concurrent callers may both regenerate on rollover; last one wins
            records = await self.store.random_sample(n)
            cache.records = records
            cache.generated_date = today
            logger.info(f"🎲 Regenerated daily sample for {today}: {len(records)} words")
        return cache.records

    async def word_details(self, word: str) -> WordRecord:
        record = await self.enrichment.ensure_enriched(word)
        missing = self.enrichment.missing_translations(record)
        if missing:
            record = await self.enrichment.enrich_translations(record, missing)
        return record
