from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class SermonStarterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: Optional[str] = None
    level: Optional[str] = None
    topic_id: Optional[str] = Field(default=None, alias="topicId")
    anchor_scriptures: Optional[List[str]] = Field(default=None, alias="anchorScriptures")
    category: Optional[str] = None
    current_event_type: Optional[str] = Field(default=None, alias="currentEventType")
    generate_series: bool = Field(default=False, alias="generateSeries")
    series_length: Optional[int] = Field(default=None, alias="seriesLength")
    pt_rooms: Optional[List[str]] = Field(default=None, alias="ptRooms")
    room_labels: Optional[List[str]] = Field(default=None, alias="roomLabels")
