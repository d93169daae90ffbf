# vocab_backend/app/main.py
import logging
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from fastapi_cache.backends.redis import RedisBackend
import redis.asyncio as aioredis

from vocab_backend.app.api import words
from vocab_backend.app.core.config import config as default_config
from vocab_backend.app.core.errors import StoreUnavailableError, VocabError
from vocab_backend.app.core.mongodb import close_mongodb, ensure_word_indexes, init_mongodb, MongoDB
from vocab_backend.app.services.definition_service import DefinitionProvider
from vocab_backend.app.services.enrichment_service import EnrichmentService
from vocab_backend.app.services.query_service import DailySampleCache, WordQueryService
from vocab_backend.app.services.translation_service import TranslationProvider, build_translation_provider
from vocab_backend.app.services.word_store import WordStore

logger = logging.getLogger(__name__)


def init_response_cache(redis_url: str = ""):
    """fastapi-cache2 on Redis when configured, otherwise in process memory."""
    if redis_url:
        try:
            r = aioredis.from_url(redis_url, encoding="utf8", decode_responses=True)
            FastAPICache.init(RedisBackend(r), prefix="fastapi-cache")
            logger.info(f"✅ fastapi-cache initialized with Redis: {redis_url}")
            return
        except Exception as e:
            logger.warning(f"⚠️ Redis init failed ({e}), fallback to InMemory cache.")
    FastAPICache.init(InMemoryBackend(), prefix="fastapi-cache")


def build_services(
    db,
    settings=default_config,
    http_client: Optional[httpx.AsyncClient] = None,
    definition_provider: Optional[DefinitionProvider] = None,
    translation_provider: Optional[TranslationProvider] = None,
) -> WordQueryService:
    """Wire store -> providers -> enrichment -> query service."""
    store = WordStore.from_database(db, settings.WORDS_COLLECTION)
    if definition_provider is None:
        definition_provider = DefinitionProvider(
            http_client, settings.DICTIONARY_API_URL, settings.PROVIDER_TIMEOUT_SECONDS
        )
    if translation_provider is None:
        translation_provider = build_translation_provider(settings, http_client)
    enrichment = EnrichmentService(
        store, definition_provider, translation_provider, settings.TARGET_LANGUAGES
    )
    return WordQueryService(store, enrichment, DailySampleCache())


def get_app(
    db=None,
    settings=default_config,
    definition_provider: Optional[DefinitionProvider] = None,
    translation_provider: Optional[TranslationProvider] = None,
):
    app = FastAPI(title="Vocabulary API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(words.router, prefix="/words")
    # the mobile client calls the /api prefix
    app.include_router(words.router, prefix="/api/words", include_in_schema=False)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        logger.error(f"❌ {request.url.path}: {exc.message}")
        return JSONResponse(status_code=500, content={"message": exc.message})

    @app.exception_handler(VocabError)
    async def vocab_error_handler(request: Request, exc: VocabError):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Request validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=422, content={"detail": exc.errors()})

    @app.on_event("startup")
    async def startup_event():
        database = db
        if database is None:
            init_mongodb(settings.MONGODB_URL, settings.MONGODB_DB_NAME)
            database = MongoDB.get_database()
        try:
            await ensure_word_indexes(database, settings.WORDS_COLLECTION)
        except Exception as e:
            logger.warning(f"⚠️ Index creation failed: {e}")

        init_response_cache(settings.REDIS_URL)

        app.state.settings = settings
        app.state.http_client = httpx.AsyncClient(follow_redirects=True)
        app.state.query_service = build_services(
            database,
            settings,
            http_client=app.state.http_client,
            definition_provider=definition_provider,
            translation_provider=translation_provider,
        )
        logger.info("✅ Vocabulary services ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.http_client.aclose()
        if db is None:
            close_mongodb()

    @app.get("/")
    def health_check():
        return {"status": "running"}

    return app
