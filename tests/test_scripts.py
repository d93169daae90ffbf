"""Tests for the preload / enrich / verify batch jobs."""
from conftest import FakeDefinitionProvider, FakeTranslator, make_definition
from vocab_backend.app.models.word import Completeness, WordSource
from vocab_backend.app.services.enrichment_service import EnrichmentService
from vocab_backend.scripts.enrich_words import enrich_batch
from vocab_backend.scripts.preload_words import build_preload_record, frequency_score, preload, read_words
from vocab_backend.scripts.verify_enrichment import collect_status


def test_frequency_score():
    assert frequency_score("cat") == 94
    assert frequency_score("running") == 106
    assert frequency_score("undo") == 107
    assert frequency_score("a" * 50) == 10


def test_read_words_filters_and_dedupes(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("Apple\napple\nx\nwell-known\n\nbanana\n42\n", encoding="utf-8")
    assert list(read_words(path)) == ["apple", "banana"]


def test_build_preload_record():
    record = build_preload_record("cat")
    assert record.meaning == "Definition for cat"
    assert record.example == 'Example sentence with "cat"'
    assert record.source is WordSource.PRELOADED
    assert record.completeness is Completeness.PLACEHOLDER
    assert not record.definition_ready


async def test_preload_replaces_previous_preload_only(store, seed_words, tmp_path):
    seed_words("apple")
    await store.insert_many([build_preload_record("old")])
    path = tmp_path / "words.txt"
    path.write_text("apple\npear\nplum\nfig\n", encoding="utf-8")

    inserted = await preload(store, path, batch_size=2)

    assert inserted == 3
    assert await store.get("old") is None
    assert (await store.get("apple")).source is WordSource.EXTERNAL
    assert (await store.get("plum")).source is WordSource.PRELOADED


async def test_enrich_batch_enriches_and_deactivates(store, raw_words):
    await store.insert_many([build_preload_record("ephemeral"), build_preload_record("qwzx")])
    raw_words.update_one({"word": "qwzx"}, {"$set": {"enrichmentFailures": 2}})
    service = EnrichmentService(
        store, FakeDefinitionProvider({"ephemeral": make_definition()}), FakeTranslator()
    )

    records = await store.find_needing_enrichment(10)
    stats = await enrich_batch(service, records, delay=0, max_failures=3)

    assert stats == {"processed": 2, "enriched": 1, "pending": 0, "deactivated": 1, "errors": 0}
    ephemeral = await store.get("ephemeral")
    assert ephemeral.completeness is Completeness.COMPLETE
    assert ephemeral.source is WordSource.ENRICHED
    qwzx = await store.get("qwzx")
    assert qwzx.is_active is False
    assert qwzx.enrichment_failures == 3
    assert await store.find_needing_enrichment(10) == []


async def test_enrich_batch_counts_store_errors(broken_store, store):
    await store.insert_many([build_preload_record("cat")])
    record = await store.get("cat")
    service = EnrichmentService(broken_store, FakeDefinitionProvider(), FakeTranslator())

    stats = await enrich_batch(service, [record], delay=0)
    assert stats["errors"] == 1
    assert stats["processed"] == 1


async def test_collect_status(store, enrichment, seed_words):
    await store.insert_many([build_preload_record("cat"), build_preload_record("dog")])
    await enrichment.ensure_enriched("ephemeral")

    status = await collect_status(store, samples=3)

    assert status["total"] == 3
    assert status["enriched"] == 1
    assert status["complete"] == 1
    assert status["pending"] == 2
    assert status["inactive"] == 0
    assert status["completion"] == 33.3
    assert [r.word for r in status["samples"]] == ["ephemeral"]
