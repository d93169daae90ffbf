"""
tests/conftest.py
Shared fixtures: an in-memory MongoDB (mongomock behind a motor-style
async facade) and scripted dictionary / translation providers.
"""
import asyncio

import mongomock
import pytest
from pymongo import ASCENDING
from pymongo.errors import ServerSelectionTimeoutError

from vocab_backend.app.models.word import WordRecord
from vocab_backend.app.services.definition_service import DefinitionResult
from vocab_backend.app.services.enrichment_service import EnrichmentService
from vocab_backend.app.services.query_service import WordQueryService
from vocab_backend.app.services.word_store import WordStore


# ========== motor-style async facade over mongomock ==========
class AsyncCursor:
    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, *args, **kwargs):
        self._cursor = self._cursor.sort(*args, **kwargs)
        return self

    def skip(self, n):
        self._cursor = self._cursor.skip(n)
        return self

    def limit(self, n):
        self._cursor = self._cursor.limit(n)
        return self

    async def to_list(self, length=None):
        docs = list(self._cursor)
        return docs if length is None else docs[:length]


class AsyncCollection:
    def __init__(self, collection):
        self.sync = collection

    def find(self, *args, **kwargs):
        return AsyncCursor(self.sync.find(*args, **kwargs))

    def aggregate(self, pipeline, **kwargs):
        return AsyncCursor(self.sync.aggregate(pipeline, **kwargs))

    def __getattr__(self, name):
        method = getattr(self.sync, name)

        async def call(*args, **kwargs):
            return method(*args, **kwargs)

        return call


class AsyncDatabase:
    def __init__(self, db):
        self.sync = db

    def __getitem__(self, name):
        return AsyncCollection(self.sync[name])


class BrokenCollection:
    """Every operation fails the way an unreachable server does."""

    def _fail(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("No servers found yet")

    find = _fail
    aggregate = _fail

    def __getattr__(self, name):
        async def call(*args, **kwargs):
            self._fail()

        return call


# ========== scripted providers ==========
class FakeDefinitionProvider:
    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.calls = []

    async def lookup(self, word):
        self.calls.append(word)
        await asyncio.sleep(0)
        result = self.entries.get(word)
        return result if result is not None else DefinitionResult.placeholder(word)


class FakeTranslator:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def translate(self, word, languages):
        languages = list(languages)
        self.calls.append((word, languages))
        await asyncio.sleep(0)
        return {lang: "" if lang in self.failing else f"{word}-{lang}" for lang in languages}


def make_definition(meaning="lasting for a very short time", **kwargs):
    values = dict(
        meaning=meaning,
        example="ephemeral fame",
        phonetic="/əˈfɛm(ə)ɹəl/",
        part_of_speech="adjective",
        synonyms=["fleeting", "transient"],
        antonyms=["permanent"],
        found=True,
    )
    values.update(kwargs)
    return DefinitionResult(**values)


@pytest.fixture
def mongo_db():
    client = mongomock.MongoClient(tz_aware=True)
    db = client["vocab_test"]
    db["words"].create_index([("word", ASCENDING)], unique=True)
    return AsyncDatabase(db)


@pytest.fixture
def raw_words(mongo_db):
    """Synchronous handle on the words collection for seeding / asserting."""
    return mongo_db.sync["words"]


@pytest.fixture
def store(mongo_db):
    return WordStore.from_database(mongo_db)


@pytest.fixture
def broken_store():
    return WordStore(BrokenCollection())


@pytest.fixture
def definitions():
    return FakeDefinitionProvider({"ephemeral": make_definition()})


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def enrichment(store, definitions, translator):
    return EnrichmentService(store, definitions, translator)


@pytest.fixture
def query_service(store, enrichment):
    return WordQueryService(store, enrichment)


@pytest.fixture
def seed_words(raw_words):
    def _seed(*words, **overrides):
        docs = []
        for i, word in enumerate(words):
            record = WordRecord(
                word=word,
                meaning=f"meaning of {word}",
                example=f"an example using {word}",
                part_of_speech="noun",
                frequency=overrides.get("frequency", i + 1),
                is_active=overrides.get("is_active", True),
            )
            doc = record.model_dump(by_alias=True, mode="json", exclude_none=True)
            docs.append(doc)
        raw_words.insert_many(docs)
        return docs

    return _seed
