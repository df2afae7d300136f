from app.models.user import User
from app.models.video import Video
from app.models.comment import Comment
from app.models.subscription import Subscription
from app.models.reaction import Reaction

__all__ = [
    "User", "Video", "Comment", "Subscription", "Reaction"
]
