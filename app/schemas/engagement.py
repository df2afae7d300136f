from pydantic import BaseModel


class EngagementCounts(BaseModel):
    likes: int = 0
    dislikes: int = 0


class EngagementStatus(BaseModel):
    liked: bool = False
    disliked: bool = False
