from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from app.models.video import VideoCategory
from app.schemas.user import UserSummary, ChannelSummary


class VideoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None  # comma-delimited


class VideoResponse(BaseModel):
    id: int
    ownerId: int
    owner: Optional[UserSummary] = None
    title: str
    description: Optional[str] = None
    videoUrl: str
    thumbnailUrl: str
    duration: float = 0
    views: int = 0
    category: VideoCategory
    tags: List[str] = []
    likes: int = 0
    dislikes: int = 0
    createdAt: datetime
    updatedAt: datetime
    
    class Config:
        from_attributes = True


class VideoDetail(VideoResponse):
    owner: Optional[ChannelSummary] = None
    hasLiked: Optional[bool] = None
    hasDisliked: Optional[bool] = None


class ViewCount(BaseModel):
    views: int
