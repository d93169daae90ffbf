# vocab_backend/app/services/definition_service.py
"""
Dictionary lookup against dictionaryapi.dev (or any service speaking
the same `/entries/en/{word}` format).
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from vocab_backend.app.models.word import FALLBACK_EXAMPLE, FALLBACK_MEANING, MAX_RELATED_WORDS

logger = logging.getLogger(__name__)


@dataclass
class DefinitionResult:
    meaning: str
    example: str
    phonetic: str = ""
    part_of_speech: str = ""
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)
    found: bool = False

    @classmethod
    def placeholder(cls, word: str) -> "DefinitionResult":
        return cls(
            meaning=FALLBACK_MEANING.format(word=word),
            example=FALLBACK_EXAMPLE.format(word=word),
        )

    def as_fields(self) -> Dict[str, Any]:
        return {
            "meaning": self.meaning,
            "example": self.example,
            "phonetic": self.phonetic,
            "partOfSpeech": self.part_of_speech,
            "synonyms": self.synonyms,
            "antonyms": self.antonyms,
        }


def _first(items: Any) -> Optional[Dict[str, Any]]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def _related(primary: Any, fallback: Any) -> List[str]:
    words = primary if isinstance(primary, list) and primary else fallback
    if not isinstance(words, list):
        return []
    return [w for w in words if isinstance(w, str) and w][:MAX_RELATED_WORDS]


def parse_entries(word: str, payload: Any) -> DefinitionResult:
    """
    Take the first entry, first meaning, first definition.
    Raises ValueError when the payload has no usable definition.
    """
    entry = _first(payload)
    if entry is None:
        raise ValueError("no entries in dictionary response")
    meaning = _first(entry.get("meanings"))
    definition = _first(meaning.get("definitions")) if meaning else None
    text = (definition or {}).get("definition")
    if not isinstance(text, str) or not text.strip():
        raise ValueError("first meaning has no definition")

    phonetic = entry.get("phonetic") or ""
    if not phonetic:
        for p in entry.get("phonetics") or []:
            if isinstance(p, dict) and p.get("text"):
                phonetic = p["text"]
                break

    part_of_speech = meaning.get("partOfSpeech") or ""
    if not isinstance(part_of_speech, str):
        raise ValueError(f"partOfSpeech is not a string: {part_of_speech!r}")

    example = definition.get("example")
    return DefinitionResult(
        meaning=text.strip(),
        example=example.strip() if isinstance(example, str) and example.strip() else FALLBACK_EXAMPLE.format(word=word),
        phonetic=phonetic if isinstance(phonetic, str) else "",
        part_of_speech=part_of_speech,
        synonyms=_related(meaning.get("synonyms"), definition.get("synonyms")),
        antonyms=_related(meaning.get("antonyms"), definition.get("antonyms")),
        found=True,
    )


class DefinitionProvider:
    def __init__(self, client: httpx.AsyncClient, base_url: str, timeout: float = 10.0):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def lookup(self, word: str) -> DefinitionResult:
        """Never raises: any failure yields the placeholder result."""
        url = f"{self.base_url}/entries/en/{quote(word, safe='')}"
        try:
            response = await asyncio.wait_for(
                self.client.get(url, timeout=self.timeout), timeout=self.timeout
            )
            response.raise_for_status()
            return parse_entries(word, response.json())
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                logger.info(f"📡 Dictionary has no entry for '{word}'")
            else:
                logger.warning(f"📡 Dictionary HTTP error for '{word}': {e}")
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            logger.warning(f"📡 Dictionary request failed for '{word}': {e!r}")
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"📡 Malformed dictionary payload for '{word}': {e}")
        return DefinitionResult.placeholder(word)
