"""Tests for listing, search, the daily sample and word details."""
from conftest import FakeTranslator
from vocab_backend.app.services.enrichment_service import EnrichmentService
from vocab_backend.app.services.query_service import WordQueryService


async def test_search_puts_exact_match_first(query_service, seed_words):
    seed_words("apt", "apply", "apple", "ap", "banana")
    results = await query_service.search("ap")
    assert [r.word for r in results] == ["ap", "apple", "apply", "apt"]


async def test_search_without_exact_match(query_service, seed_words):
    seed_words("apple", "apply")
    results = await query_service.search("APP")
    assert [r.word for r in results] == ["apple", "apply"]


async def test_search_blank_query_returns_nothing(query_service, seed_words):
    seed_words("apple")
    assert await query_service.search("   ") == []


async def test_search_respects_limit_and_skips_inactive(query_service, seed_words):
    seed_words("cab", "cad", "cam", "can", "cap")
    seed_words("car", is_active=False)
    results = await query_service.search("ca", limit=3)
    assert [r.word for r in results] == ["cab", "cad", "cam"]


async def test_list_page_math(query_service, seed_words):
    seed_words(*[f"word{i:02d}" for i in range(45)])
    page = await query_service.list_page(page=3, page_size=20)
    assert len(page.words) == 5
    assert page.current_page == 3
    assert page.total_pages == 3
    assert page.total_words == 45
    assert page.has_next_page is False
    assert page.has_prev_page is True


async def test_list_page_search_is_case_insensitive_substring(query_service, seed_words):
    seed_words("apple", "pineapple", "grape", "banana")
    page = await query_service.list_page(search="APP")
    assert [w.word for w in page.words] == ["apple", "pineapple"]
    assert page.total_pages == 1


async def test_list_page_escapes_search(query_service, seed_words):
    seed_words("apple", "a.b")
    page = await query_service.list_page(search=".")
    assert [w.word for w in page.words] == ["a.b"]


async def test_list_page_empty_collection(query_service):
    page = await query_service.list_page()
    assert page.words == []
    assert page.total_pages == 0
    assert page.has_next_page is False
    assert page.has_prev_page is False


async def test_list_page_sort_by_frequency(query_service, seed_words):
    seed_words("alpha", "beta", "gamma")
    page = await query_service.list_page(sort_by="frequency")
    assert [w.word for w in page.words] == ["gamma", "beta", "alpha"]


async def test_daily_sample_is_stable_within_a_day(store, enrichment, seed_words):
    seed_words(*[f"word{i:02d}" for i in range(30)])
    day = {"value": "2024-05-01"}
    service = WordQueryService(store, enrichment, today=lambda: day["value"])

    first = await service.daily_sample(10)
    second = await service.daily_sample(10)
    assert len(first) == 10
    assert [r.word for r in first] == [r.word for r in second]

    day["value"] = "2024-05-02"
    third = await service.daily_sample(10)
    assert service.sample_cache.generated_date == "2024-05-02"
    assert len(third) == 10


async def test_daily_sample_excludes_inactive(query_service, seed_words):
    seed_words("one", "two")
    seed_words("hidden", is_active=False)
    sample = await query_service.daily_sample(50)
    assert sorted(r.word for r in sample) == ["one", "two"]


async def test_word_details_retries_missing_translations_once(store, definitions):
    translator = FakeTranslator(failing={"te"})
    service = WordQueryService(store, EnrichmentService(store, definitions, translator))

    record = await service.word_details("ephemeral")

    assert translator.calls == [("ephemeral", ["es", "hi", "te"]), ("ephemeral", ["te"])]
    assert record.translations["te"] == ""
    assert record.translations["es"] == "ephemeral-es"


async def test_word_details_for_complete_record(query_service, definitions, translator):
    await query_service.word_details("ephemeral")
    record = await query_service.word_details("ephemeral")
    assert definitions.calls == ["ephemeral"]
    assert len(translator.calls) == 1
    assert record.to_response()["translations"] == {
        "es": "ephemeral-es",
        "hi": "ephemeral-hi",
        "te": "ephemeral-te",
    }
