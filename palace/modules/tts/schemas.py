from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class TextToSpeechRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Blank text is answered with {"error": ...} by the service rather than a 422
    text: str = ""
    voice: Optional[str] = None
    provider: Optional[str] = None
    book: Optional[str] = None
    chapter: Optional[int] = None
    verse: Optional[int] = None
    use_cache: bool = Field(default=True, alias="useCache")


class Voice(BaseModel):
    id: str
    name: str
    description: str


class VoiceCatalogResponse(BaseModel):
    openai: List[Voice]
    elevenlabs: List[Voice]
    speechify: List[Voice]
