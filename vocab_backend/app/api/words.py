# vocab_backend/app/api/words.py
from fastapi import APIRouter, Depends, Query, Request
from fastapi_cache.decorator import cache

from vocab_backend.app.schemas.word import MessageOut, WordListOut, WordOut, WordPageOut
from vocab_backend.app.services.query_service import WordQueryService

router = APIRouter(tags=["words"])

NS_WORDS_LIST = "words:list"


def get_query_service(request: Request) -> WordQueryService:
    return request.app.state.query_service


# ✅ Paginated listing
# GET /words?limit=20&page=2&search=app&sortBy=frequency
@router.get("", response_model=WordPageOut)
@cache(expire=60, namespace=NS_WORDS_LIST)
async def list_words(
    limit: int = Query(20, ge=1, le=100),
    page: int = Query(1, ge=1),
    search: str = "",
    sort_by: str = Query("alphabetical", alias="sortBy"),
    service: WordQueryService = Depends(get_query_service),
):
    result = await service.list_page(page=page, page_size=limit, search=search, sort_by=sort_by)
    return {
        "words": [w.to_response() for w in result.words],
        "currentPage": result.current_page,
        "totalPages": result.total_pages,
        "totalWords": result.total_words,
        "hasNextPage": result.has_next_page,
        "hasPrevPage": result.has_prev_page,
    }


# ✅ Daily "useful words" sample
@router.get("/useful", response_model=WordListOut)
async def useful_words(request: Request, service: WordQueryService = Depends(get_query_service)):
    words = await service.daily_sample(request.app.state.settings.DAILY_SAMPLE_SIZE)
    return {"words": [w.to_response() for w in words]}


# ✅ Fast search: exact match first, then prefix matches
# GET /words/search?q=app&limit=20
@router.get("/search", response_model=WordListOut)
async def search_words(
    q: str = "",
    limit: int = Query(20, ge=1, le=100),
    service: WordQueryService = Depends(get_query_service),
):
    # stored data only; /words/{word} fills in anything missing
    words = await service.search(q, limit)
    return {"words": [w.to_response() for w in words]}


# ✅ Word details, enriched on demand
@router.get("/{word}", response_model=WordOut, responses={404: {"model": MessageOut}, 500: {"model": MessageOut}})
async def word_details(word: str, service: WordQueryService = Depends(get_query_service)):
    record = await service.word_details(word)
    return record.to_response()
