from fastapi import APIRouter, Depends
from palace.core.llm_gateway import ChatCompletionClient, get_chat_client
from palace.database.supabase_client import get_service_supabase
from palace.modules.sermons.schemas import SermonStarterRequest
from palace.modules.sermons.service import SermonStarterService
from supabase import Client

router = APIRouter(prefix="/functions", tags=["sermons"])


def get_sermon_service(
    llm: ChatCompletionClient = Depends(get_chat_client),
    supabase: Client = Depends(get_service_supabase)
) -> SermonStarterService:
    return SermonStarterService(llm, supabase)


@router.post("/generate-sermon-starter")
def generate_sermon_starter(
    request: SermonStarterRequest,
    service: SermonStarterService = Depends(get_sermon_service)
):
    """Discovery-based sermon spark; saved to sermon_starters when topicId is given"""
    return service.generate(request)
