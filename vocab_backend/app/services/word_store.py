# vocab_backend/app/services/word_store.py
"""
Word record store backed by a MongoDB collection (motor).

All writes are field-level ($set / $setOnInsert / $inc) so concurrent
requests for the same word never drop each other's fields.
"""
import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError

from vocab_backend.app.core.errors import StoreUnavailableError
from vocab_backend.app.models.word import (
    Completeness,
    WordRecord,
    WordSource,
    normalize_key,
)

logger = logging.getLogger(__name__)

SortSpec = List[Tuple[str, int]]

SORT_ALPHABETICAL: SortSpec = [("word", ASCENDING)]
SORT_REVERSE: SortSpec = [("word", DESCENDING)]
SORT_FREQUENCY: SortSpec = [("frequency", DESCENDING), ("word", ASCENDING)]

# records still waiting for a real definition (legacy documents have no completeness tag)
PENDING_DEFINITION_QUERY: Dict[str, Any] = {
    "$or": [
        {"completeness": Completeness.PLACEHOLDER.value},
        {"completeness": {"$exists": False}, "meaning": {"$regex": "^Definition (for|of) "}},
        {"completeness": {"$exists": False}, "meaning": {"$exists": False}},
    ],
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def _store_errors(operation: str, key: Optional[str] = None):
    try:
        yield
    except PyMongoError as e:
        target = f" '{key}'" if key else ""
        logger.error(f"❌ Store {operation}{target} failed: {e}")
        raise StoreUnavailableError(f"Word store unavailable during {operation}") from e


def _overlaps(path: str, others: Iterable[str]) -> bool:
    for other in others:
        if path == other or path.startswith(other + ".") or other.startswith(path + "."):
            return True
    return False


def _has_path(doc: Dict[str, Any], path: str) -> bool:
    node: Any = doc
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return False
        node = node[part]
    return True


class WordStore:
    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_database(cls, db, collection_name: str = "words") -> "WordStore":
        return cls(db[collection_name])

    # ==========================
    #        Point lookups
    # ==========================
    async def get(self, key: str, active_only: bool = False) -> Optional[WordRecord]:
        key = normalize_key(key)
        query: Dict[str, Any] = {"word": key}
        if active_only:
            query["isActive"] = True
        with _store_errors("get", key):
            doc = await self.collection.find_one(query)
        return WordRecord.from_document(doc) if doc else None

    async def upsert(
        self,
        key: str,
        fields: Optional[Dict[str, Any]] = None,
        defaults: Optional[Dict[str, Any]] = None,
        increments: Optional[Dict[str, int]] = None,
    ) -> WordRecord:
        """
        Merge `fields` into the record for `key`, creating it when absent.

        `fields` and `defaults` accept dotted paths ("translations.hi").
        `defaults` are only written where the path does not exist yet, so
        they never overwrite a value stored by another writer.
        """
        key = normalize_key(key)
        fields = dict(fields or {})
        increments = dict(increments or {})
        written = list(fields) + list(increments)
        defaults = {
            path: value
            for path, value in (defaults or {}).items()
            if not _overlaps(path, written)
        }
        # keep the most specific default when paths nest ("translations" vs "translations.te")
        defaults = {
            path: value
            for path, value in defaults.items()
            if not any(other.startswith(path + ".") for other in defaults)
        }

        # the filter supplies `word` on insert
        on_insert: Dict[str, Any] = {"createdAt": _utcnow()}
        on_insert.update(defaults)
        update: Dict[str, Any] = {"$setOnInsert": on_insert}
        if fields:
            update["$set"] = fields
        if increments:
            update["$inc"] = increments

        with _store_errors("upsert", key):
            doc = await self._find_one_and_upsert(key, update)
            filled = await self._fill_missing(key, doc, defaults)
            if filled:
                doc = await self.collection.find_one({"word": key})
        return WordRecord.from_document(doc)

    async def raise_completeness(self, key: str, completeness: Completeness) -> WordRecord:
        """
        Set the completeness tag only where the stored tag ranks lower,
        so a writer holding an older view can never downgrade it.
        """
        key = normalize_key(key)
        query = {
            "word": key,
            "$or": [
                {"completeness": {"$in": [None, *completeness.below()]}},
                {"completeness": {"$exists": False}},
            ],
        }
        with _store_errors("raise_completeness", key):
            doc = await self.collection.find_one_and_update(
                query, {"$set": {"completeness": completeness.value}}, return_document=ReturnDocument.AFTER
            )
            if doc is None:
                doc = await self.collection.find_one({"word": key})
        if doc is None:
            raise StoreUnavailableError(f"Word '{key}' disappeared during update")
        return WordRecord.from_document(doc)

    async def _find_one_and_upsert(self, key: str, update: Dict[str, Any]):
        try:
            return await self.collection.find_one_and_update(
                {"word": key}, update, upsert=True, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError:
            # lost the insert race to a concurrent upsert; the document exists now
            logger.debug(f"Concurrent insert of '{key}', retrying as update")
            return await self.collection.find_one_and_update(
                {"word": key}, update, upsert=True, return_document=ReturnDocument.AFTER
            )

    async def _fill_missing(self, key: str, doc: Dict[str, Any], defaults: Dict[str, Any]) -> int:
        filled = 0
        for path, value in defaults.items():
            if _has_path(doc, path):
                continue
            result = await self.collection.update_one(
                {"word": key, path: {"$exists": False}}, {"$set": {path: value}}
            )
            filled += result.modified_count
        return filled

    # ==========================
    #        Range queries
    # ==========================
    async def find_by_prefix(
        self, prefix: str, limit: int, exclude_key: Optional[str] = None
    ) -> List[WordRecord]:
        prefix = normalize_key(prefix)
        # keys are stored lowercase, so an anchored case-sensitive regex
        # is case-insensitive for callers and can use the word index
        condition: Dict[str, Any] = {"$regex": f"^{re.escape(prefix)}"}
        if exclude_key:
            condition["$ne"] = normalize_key(exclude_key)
        query = {"word": condition, "isActive": True}
        with _store_errors("find_by_prefix", prefix):
            docs = await self.collection.find(query).sort(SORT_ALPHABETICAL).limit(limit).to_list(length=limit)
        return [WordRecord.from_document(d) for d in docs]

    async def page(
        self,
        query: Dict[str, Any],
        sort: SortSpec,
        page: int,
        page_size: int,
    ) -> Tuple[List[WordRecord], int]:
        skip = (page - 1) * page_size
        with _store_errors("page"):
            cursor = self.collection.find(query).sort(sort).skip(skip).limit(page_size)
            docs = await cursor.to_list(length=page_size)
            total = await self.collection.count_documents(query)
        return [WordRecord.from_document(d) for d in docs], total

    async def random_sample(self, n: int) -> List[WordRecord]:
        pipeline = [{"$match": {"isActive": True}}, {"$sample": {"size": n}}]
        with _store_errors("random_sample"):
            docs = await self.collection.aggregate(pipeline).to_list(length=n)
        return [WordRecord.from_document(d) for d in docs]

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        with _store_errors("count"):
            return await self.collection.count_documents(query or {})

    # ==========================
    #        Batch support
    # ==========================
    async def find_needing_enrichment(self, limit: int) -> List[WordRecord]:
        query = {"isActive": True, **PENDING_DEFINITION_QUERY}
        with _store_errors("find_needing_enrichment"):
            docs = await self.collection.find(query).sort(SORT_FREQUENCY).limit(limit).to_list(length=limit)
        return [WordRecord.from_document(d) for d in docs]

    async def find_stale(self, before: datetime, limit: int) -> List[WordRecord]:
        query = {
            "isActive": True,
            "$or": [{"lastFetched": {"$lt": before}}, {"lastFetched": None}],
        }
        with _store_errors("find_stale"):
            docs = await self.collection.find(query).sort([("lastFetched", ASCENDING)]).limit(limit).to_list(length=limit)
        return [WordRecord.from_document(d) for d in docs]

    async def insert_many(self, records: Sequence[WordRecord]) -> int:
        """Unordered bulk insert; records whose key already exists are skipped."""
        if not records:
            return 0
        now = _utcnow()
        docs = []
        for r in records:
            doc = r.model_dump(by_alias=True, mode="python", exclude_none=True)
            doc["source"] = r.source.value
            if r.completeness is not None:
                doc["completeness"] = r.completeness.value
            doc.setdefault("createdAt", now)
            docs.append(doc)
        try:
            result = await self.collection.insert_many(docs, ordered=False)
            return len(result.inserted_ids)
        except BulkWriteError as e:
            inserted = e.details.get("nInserted", 0)
            logger.warning(f"⚠️ Bulk insert skipped {len(docs) - inserted} duplicate words")
            return inserted
        except PyMongoError as e:
            logger.error(f"❌ Store insert_many failed: {e}")
            raise StoreUnavailableError("Word store unavailable during insert_many") from e

    async def delete_by_source(self, source: WordSource) -> int:
        with _store_errors("delete_by_source"):
            result = await self.collection.delete_many({"source": source.value})
        return result.deleted_count
