# vocab_backend/app/schemas/word.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WordOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    word: str
    meaning: str = ""
    example: str = ""
    phonetic: str = ""
    part_of_speech: str = ""
    synonyms: List[str] = Field(default_factory=list)
    antonyms: List[str] = Field(default_factory=list)
    translations: Dict[str, str] = Field(default_factory=dict)
    source: str = "external"
    frequency: int = 1
    last_fetched: Optional[datetime] = None
    is_active: bool = True
    completeness: Optional[str] = None


class WordListOut(BaseModel):
    words: List[WordOut]


class WordPageOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    words: List[WordOut]
    current_page: int
    total_pages: int
    total_words: int
    has_next_page: bool
    has_prev_page: bool


class MessageOut(BaseModel):
    message: str
