from app.schemas.user import (
    UserCreate, UserUpdate, UserSummary, ChannelSummary, UserProfile, UserResponse, Token
)
from app.schemas.video import VideoUpdate, VideoResponse, VideoDetail, ViewCount
from app.schemas.comment import CommentCreate, CommentUpdate, CommentResponse
from app.schemas.engagement import EngagementCounts, EngagementStatus
from app.schemas.subscription import SubscriptionStatus, MessageResponse

__all__ = [
    "UserCreate", "UserUpdate", "UserSummary", "ChannelSummary", "UserProfile", "UserResponse",
    "Token",
    "VideoUpdate", "VideoResponse", "VideoDetail", "ViewCount",
    "CommentCreate", "CommentUpdate", "CommentResponse",
    "EngagementCounts", "EngagementStatus",
    "SubscriptionStatus", "MessageResponse"
]
