# vocab_backend/app/models/__init__.py
from .word import (
    TARGET_LANGUAGES,
    HISTORICAL_LANGUAGES,
    Completeness,
    WordRecord,
    WordSource,
    evaluate_completeness,
    normalize_key,
)

__all__ = [
    "TARGET_LANGUAGES",
    "HISTORICAL_LANGUAGES",
    "Completeness",
    "WordRecord",
    "WordSource",
    "evaluate_completeness",
    "normalize_key",
]
