from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class CommentaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    book: Optional[str] = None
    chapter: Optional[int] = None
    verse: Optional[int] = None
    verse_text: Optional[str] = Field(default=None, alias="verseText")
    tier: str = "surface"
    generate_audio: bool = Field(default=False, alias="generateAudio")
    voice: str = "onyx"
