from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class AnalyzeVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_url: Optional[str] = Field(default=None, alias="videoUrl")
