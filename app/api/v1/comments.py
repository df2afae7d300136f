from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.schemas.comment import CommentResponse, CommentUpdate
from app.schemas.engagement import EngagementCounts, EngagementStatus
from app.schemas.subscription import MessageResponse
from app.api.deps import get_current_user
from app.services import comment_service
from app.services.engagement import comment_engagement

router = APIRouter()


@router.get("/{comment_id}/replies", response_model=List[CommentResponse])
def get_replies(comment_id: int, db: Session = Depends(get_db)):
    return comment_service.list_replies(db, comment_id)


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: int,
    comment_update: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_service.update_comment(db, comment_id, current_user, comment_update.content)


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    comment_service.delete_comment(db, comment_id, current_user)
    return MessageResponse(message="Comment deleted successfully")


# ===== LIKES =====

@router.post("/{comment_id}/like", response_model=EngagementCounts)
def like_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_engagement.like(db, comment_id, current_user.id)


@router.delete("/{comment_id}/unlike", response_model=EngagementCounts)
def unlike_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_engagement.unlike(db, comment_id, current_user.id)


@router.post("/{comment_id}/dislike", response_model=EngagementCounts)
def dislike_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_engagement.dislike(db, comment_id, current_user.id)


@router.delete("/{comment_id}/undislike", response_model=EngagementCounts)
def undislike_comment(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_engagement.undislike(db, comment_id, current_user.id)


@router.get("/{comment_id}/like-status", response_model=EngagementStatus)
def get_like_status(
    comment_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_engagement.status(db, comment_id, current_user.id)
