# vocab_backend/app/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _as_list(value: str):
    return [v.strip() for v in value.split(",") if v.strip()]


class Config:
    MONGODB_URL = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
    MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "vocab_app")
    WORDS_COLLECTION = os.getenv("WORDS_COLLECTION", "words")

    # External providers
    DICTIONARY_API_URL = os.getenv("DICTIONARY_API_URL", "https://api.dictionaryapi.dev/api/v2")
    TRANSLATION_PROVIDER = os.getenv("TRANSLATION_PROVIDER", "libretranslate")
    TRANSLATION_API_URL = os.getenv("TRANSLATION_API_URL", "")
    TRANSLATION_API_KEY = os.getenv("TRANSLATION_API_KEY", "")
    PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
    TARGET_LANGUAGES = _as_list(os.getenv("TARGET_LANGUAGES", "es,hi,te"))

    # Query & batch jobs
    DAILY_SAMPLE_SIZE = int(os.getenv("DAILY_SAMPLE_SIZE", "500"))
    BATCH_SIZE = int(os.getenv("BATCH_SIZE", "500"))
    BATCH_DELAY_SECONDS = float(os.getenv("BATCH_DELAY_SECONDS", "1.0"))
    MAX_ENRICHMENT_FAILURES = int(os.getenv("MAX_ENRICHMENT_FAILURES", "3"))

    # Response cache; empty REDIS_URL keeps the cache in process memory
    REDIS_URL = os.getenv("REDIS_URL", "")

    CORS_ORIGINS = _as_list(os.getenv("CORS_ORIGINS", "*"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


config = Config()
