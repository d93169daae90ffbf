# vocab_backend/app/models/word.py
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Languages every record is expected to carry; fr/de only exist on old documents
TARGET_LANGUAGES = ("es", "hi", "te")
HISTORICAL_LANGUAGES = ("fr", "de")
MAX_RELATED_WORDS = 5

# Bulk preload placeholders
PRELOAD_MEANING = "Definition for {word}"
PRELOAD_EXAMPLE = 'Example sentence with "{word}"'
# Dictionary fallback placeholders
FALLBACK_MEANING = "Definition of {word}"
FALLBACK_EXAMPLE = 'Example with "{word}"'


class WordSource(str, Enum):
    PRELOADED = "preloaded"
    ENRICHED = "enriched"
    EXTERNAL = "external"


class Completeness(str, Enum):
    PLACEHOLDER = "placeholder"   # no real definition stored yet
    PARTIAL = "partial"           # real definition, translations missing
    COMPLETE = "complete"

    def below(self) -> List[str]:
        """Stored values that rank lower than this one."""
        order = list(Completeness)
        return [c.value for c in order[:order.index(self)]]


def normalize_key(word: Optional[str]) -> str:
    return (word or "").strip().lower()


def is_placeholder_meaning(word: str, meaning: Optional[str]) -> bool:
    if not meaning:
        return True
    return meaning in (PRELOAD_MEANING.format(word=word), FALLBACK_MEANING.format(word=word))


def is_placeholder_example(word: str, example: Optional[str]) -> bool:
    if not example:
        return True
    return example in (PRELOAD_EXAMPLE.format(word=word), FALLBACK_EXAMPLE.format(word=word))


def evaluate_completeness(
    definition_ready: bool,
    translations: Dict[str, str],
    languages: Iterable[str] = TARGET_LANGUAGES,
) -> Completeness:
    if not definition_ready:
        return Completeness.PLACEHOLDER
    if all(translations.get(lang) for lang in languages):
        return Completeness.COMPLETE
    return Completeness.PARTIAL


class WordRecord(BaseModel):
    """
    One document of the `words` collection.

    Field names are snake_case in Python and camelCase in MongoDB / JSON
    (partOfSpeech, lastFetched, isActive ...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    word: str
    meaning: str = ""
    example: str = ""
    phonetic: str = ""
    part_of_speech: str = ""
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    translations: Dict[str, str] = Field(default_factory=dict)
    source: WordSource = WordSource.EXTERNAL
    frequency: int = 1
    last_fetched: Optional[datetime] = None
    is_active: bool = True
    completeness: Optional[Completeness] = None
    enrichment_failures: int = 0
    created_at: Optional[datetime] = None

    @field_validator("meaning", "example", "phonetic", "part_of_speech", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("synonyms", "antonyms", mode="before")
    @classmethod
    def _cap_related(cls, v):
        if not v:
            return []
        return [str(w) for w in v if w][:MAX_RELATED_WORDS]

    @field_validator("translations", mode="before")
    @classmethod
    def _clean_translations(cls, v):
        if not v:
            return {}
        return {lang: (text or "") for lang, text in dict(v).items()}

    @field_validator("last_fetched", "created_at")
    @classmethod
    def _assume_utc(cls, v):
        # pymongo hands back naive datetimes unless the client is tz_aware
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "WordRecord":
        return cls.model_validate({k: v for k, v in doc.items() if k != "_id"})

    @property
    def definition_ready(self) -> bool:
        """True once a real (provider supplied) definition has been stored."""
        if self.completeness is not None:
            return self.completeness != Completeness.PLACEHOLDER
        # documents written before the completeness tag existed
        return not (
            is_placeholder_meaning(self.word, self.meaning)
            or is_placeholder_example(self.word, self.example)
            or not self.part_of_speech
        )

    def missing_translations(self, languages: Iterable[str] = TARGET_LANGUAGES) -> List[str]:
        return [lang for lang in languages if not self.translations.get(lang)]

    def to_response(self, languages: Iterable[str] = TARGET_LANGUAGES) -> Dict[str, Any]:
        """JSON-safe dict with every target language present (empty when unknown)."""
        data = self.model_dump(by_alias=True, mode="json", exclude={"enrichment_failures", "created_at"})
        translations = {lang: "" for lang in languages}
        translations.update(self.translations)
        data["translations"] = translations
        return data
