# vocab_backend/app/services/translation_service.py
"""
Per-language word translation.

Each target language is its own request; all of them run concurrently
and a failing language only produces an empty string for itself.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

import httpx

logger = logging.getLogger(__name__)


class TranslationProvider(ABC):
    name = "base"
    default_url = ""

    def __init__(self, client: httpx.AsyncClient, url: str = "", timeout: float = 10.0):
        self.client = client
        self.url = url or self.default_url
        self.timeout = timeout

    async def translate(self, word: str, languages: Iterable[str]) -> Dict[str, str]:
        languages = list(dict.fromkeys(languages))
        results = await asyncio.gather(*(self._translate_safe(word, lang) for lang in languages))
        return dict(zip(languages, results))

    async def _translate_safe(self, word: str, lang: str) -> str:
        try:
            text = await asyncio.wait_for(self.translate_one(word, lang), timeout=self.timeout)
        except httpx.HTTPStatusError as e:
            logger.warning(f"🌍 {self.name} {lang} HTTP {e.response.status_code} for '{word}'")
            return ""
        except (httpx.HTTPError, asyncio.TimeoutError) as e:
            logger.warning(f"🌍 {self.name} {lang} request failed for '{word}': {e!r}")
            return ""
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"🌍 {self.name} {lang} malformed response for '{word}': {e}")
            return ""
        return text.strip() if isinstance(text, str) else ""

    @abstractmethod
    async def translate_one(self, word: str, lang: str) -> str:
        """Translate one word into `lang`; errors are handled by the caller."""


class LibreTranslateProvider(TranslationProvider):
    name = "libretranslate"
    default_url = "https://libretranslate.com/translate"

    def __init__(self, client: httpx.AsyncClient, url: str = "", timeout: float = 10.0, api_key: str = ""):
        super().__init__(client, url, timeout)
        self.api_key = api_key

    async def translate_one(self, word: str, lang: str) -> str:
        body: Dict[str, Any] = {"q": word, "source": "en", "target": lang, "format": "text"}
        if self.api_key:
            body["api_key"] = self.api_key
        response = await self.client.post(self.url, json=body, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"unexpected response body: {data!r:.80}")
        return data["translatedText"]


class MyMemoryProvider(TranslationProvider):
    name = "mymemory"
    default_url = "https://api.mymemory.translated.net/get"

    async def translate_one(self, word: str, lang: str) -> str:
        params = {"q": word, "langpair": f"en|{lang}"}
        response = await self.client.get(self.url, params=params, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"unexpected response body: {data!r:.80}")
        status = data.get("responseStatus", 200)
        if str(status) != "200":
            raise ValueError(f"responseStatus {status}: {data.get('responseDetails')}")
        return data["responseData"]["translatedText"]


PROVIDERS = {
    LibreTranslateProvider.name: LibreTranslateProvider,
    MyMemoryProvider.name: MyMemoryProvider,
}


def build_translation_provider(config, client: httpx.AsyncClient, url: Optional[str] = None) -> TranslationProvider:
    name = config.TRANSLATION_PROVIDER.lower()
    if name not in PROVIDERS:
        raise ValueError(f"Unknown TRANSLATION_PROVIDER '{config.TRANSLATION_PROVIDER}'")
    url = url or config.TRANSLATION_API_URL
    if name == MyMemoryProvider.name:
        return MyMemoryProvider(client, url, config.PROVIDER_TIMEOUT_SECONDS)
    return LibreTranslateProvider(
        client, url, config.PROVIDER_TIMEOUT_SECONDS, api_key=config.TRANSLATION_API_KEY
    )
