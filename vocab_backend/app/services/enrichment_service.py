# vocab_backend/app/services/enrichment_service.py
"""
Word enrichment: fill in the definition and translations of a stored word
from the external providers and persist what came back.

Definitions and translations are gated and persisted independently, so an
outage of one provider never blocks the other. Provider failures are
absorbed (placeholders / empty strings); only store failures propagate.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from vocab_backend.app.core.errors import InvalidWordError
from vocab_backend.app.models.word import (
    TARGET_LANGUAGES,
    WordRecord,
    WordSource,
    evaluate_completeness,
    normalize_key,
)
from vocab_backend.app.services.definition_service import DefinitionProvider
from vocab_backend.app.services.translation_service import TranslationProvider
from vocab_backend.app.services.word_store import WordStore

logger = logging.getLogger(__name__)


class EnrichmentService:
    def __init__(
        self,
        store: WordStore,
        definitions: DefinitionProvider,
        translator: TranslationProvider,
        languages: Sequence[str] = TARGET_LANGUAGES,
    ):
        self.store = store
        self.definitions = definitions
        self.translator = translator
        self.languages = tuple(languages)

    # ==========================
    #        Predicates
    # ==========================
    def needs_definition(self, record: WordRecord) -> bool:
        return not record.definition_ready

    def missing_translations(self, record: WordRecord) -> List[str]:
        return record.missing_translations(self.languages)

    def needs_enrichment(self, record: WordRecord) -> bool:
        if self.needs_definition(record):
            return True
        return all(not record.translations.get(lang) for lang in self.languages)

    # ==========================
    #        Entry point
    # ==========================
    async def ensure_enriched(self, word: str) -> WordRecord:
        key = normalize_key(word)
        if not key:
            raise InvalidWordError("Word not found")

        record = await self.store.get(key)
        if record is None:
            record = WordRecord(word=key, source=WordSource.EXTERNAL)

        if self.needs_definition(record):
            record = await self.enrich_definition(record)

        missing = self.missing_translations(record)
        if missing:
            record = await self.enrich_translations(record, missing)
        return record

    # ==========================
    #        Steps
    # ==========================
    async def enrich_definition(self, record: WordRecord) -> WordRecord:
        result = await self.definitions.lookup(record.word)

        if result.found:
            fields: Dict[str, Any] = dict(result.as_fields())
            fields.update({
                "source": WordSource.ENRICHED.value,
                "isActive": True,
                "lastFetched": _utcnow(),
                "enrichmentFailures": 0,
            })
            saved = await self.store.upsert(record.word, fields, defaults=self._record_defaults(record))
            logger.info(f"💾 Saved definition for '{record.word}'")
            return await self._settle_completeness(saved, definition_ready=True)

        # placeholders only land where nothing is stored yet, a real
        # meaning written earlier is never replaced
        defaults = self._record_defaults(record)
        defaults.update(result.as_fields())
        saved = await self.store.upsert(
            record.word, defaults=defaults, increments={"enrichmentFailures": 1}
        )
        logger.info(f"⚠️ No definition for '{record.word}' (failures: {saved.enrichment_failures})")
        return await self._settle_completeness(saved, saved.definition_ready)

    async def enrich_translations(
        self, record: WordRecord, languages: Optional[Iterable[str]] = None
    ) -> WordRecord:
        languages = list(languages) if languages is not None else self.missing_translations(record)
        if not languages:
            return record

        results = await self.translator.translate(record.word, languages)
        succeeded = {lang: text for lang, text in results.items() if text}
        failed = [lang for lang in languages if not results.get(lang)]

        fields: Dict[str, Any] = {f"translations.{lang}": text for lang, text in succeeded.items()}
        if succeeded:
            fields["lastFetched"] = _utcnow()

        defaults = {f"translations.{lang}": "" for lang in failed}
        defaults.update(self._record_defaults(record))
        saved = await self.store.upsert(record.word, fields, defaults=defaults)
        if failed:
            logger.info(f"🌍 '{record.word}' translated to {sorted(succeeded)}, failed {failed}")
        else:
            logger.info(f"🌍 '{record.word}' translated to {sorted(succeeded)}")
        return await self._settle_completeness(saved, saved.definition_ready)

    async def deactivate(self, record: WordRecord) -> WordRecord:
        logger.warning(f"🚫 Deactivating '{record.word}' after {record.enrichment_failures} failed lookups")
        return await self.store.upsert(record.word, {"isActive": False})

    async def _settle_completeness(self, saved: WordRecord, definition_ready: bool) -> WordRecord:
        # computed from the document as written, never from the caller's copy
        target = evaluate_completeness(definition_ready, saved.translations, self.languages)
        if saved.completeness is not None and saved.completeness.value not in target.below():
            return saved
        return await self.store.raise_completeness(saved.word, target)

    def _record_defaults(self, record: WordRecord) -> Dict[str, Any]:
        """Fields a first-time record needs so it is well formed once stored."""
        return {
            "meaning": "",
            "example": "",
            "phonetic": "",
            "partOfSpeech": "",
            "synonyms": [],
            "antonyms": [],
            "translations": {},
            "source": record.source.value,
            "frequency": record.frequency,
            "isActive": True,
            "enrichmentFailures": 0,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
