from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from app.schemas.user import UserSummary


class CommentCreate(BaseModel):
    content: Optional[str] = None
    parentCommentId: Optional[int] = None


class CommentUpdate(BaseModel):
    content: Optional[str] = None


class CommentResponse(BaseModel):
    id: int
    videoId: int
    userId: int
    user: Optional[UserSummary] = None
    parentId: Optional[int] = None
    content: str
    likes: int = 0
    dislikes: int = 0
    replies: List[int] = []
    createdAt: datetime
    updatedAt: datetime
    
    class Config:
        from_attributes = True
