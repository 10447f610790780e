from fastapi import APIRouter, Depends
from palace.database.supabase_client import get_service_supabase
from palace.modules.tts.schemas import TextToSpeechRequest, VoiceCatalogResponse
from palace.modules.tts.service import TextToSpeechService
from palace.modules.tts.voices import list_voices
from supabase import Client

router = APIRouter(prefix="/functions", tags=["text-to-speech"])


def get_tts_service(supabase: Client = Depends(get_service_supabase)) -> TextToSpeechService:
    return TextToSpeechService(supabase)


@router.post("/text-to-speech")
def text_to_speech(
    request: TextToSpeechRequest,
    service: TextToSpeechService = Depends(get_tts_service)
):
    """Returns {audioUrl, cached} for cached verse audio, otherwise {audioContent} as base64 mp3"""
    return service.synthesize(request)


@router.get("/text-to-speech/voices", response_model=VoiceCatalogResponse)
async def get_voices():
    return list_voices()
