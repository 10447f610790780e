from fastapi import APIRouter, Depends
from palace.core.llm_gateway import ChatCompletionClient
from palace.database.supabase_client import get_service_supabase
from palace.modules.commentary.schemas import CommentaryRequest
from palace.modules.commentary.service import CommentaryService, get_commentary_llm
from supabase import Client

router = APIRouter(prefix="/functions", tags=["commentary"])


def get_commentary_service(
    llm: ChatCompletionClient = Depends(get_commentary_llm),
    supabase: Client = Depends(get_service_supabase)
) -> CommentaryService:
    return CommentaryService(llm, supabase)


@router.post("/generate-audio-commentary")
def generate_audio_commentary(
    request: CommentaryRequest,
    service: CommentaryService = Depends(get_commentary_service)
):
    """Tiered verse commentary (surface, intermediate, scholarly) with optional narration"""
    return service.generate(request)
