from fastapi import APIRouter, Depends
from palace.core.llm_gateway import ChatCompletionClient, get_chat_client
from palace.modules.analysis.schemas import AnalyzeVideoRequest
from palace.modules.analysis.service import VideoAnalysisService

router = APIRouter(prefix="/functions", tags=["analysis"])


def get_analysis_service(llm: ChatCompletionClient = Depends(get_chat_client)) -> VideoAnalysisService:
    return VideoAnalysisService(llm)


@router.post("/analyze-critic-video")
def analyze_critic_video(
    request: AnalyzeVideoRequest,
    service: VideoAnalysisService = Depends(get_analysis_service)
):
    return service.analyze(request.video_url)
