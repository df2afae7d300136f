"""
Comments on videos with one level of replies.

A reply's ``parentId`` is the only stored link between a reply and its
parent; reply lists are always read back from it.
"""
import logging
from collections import defaultdict
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import InvalidInput, PersistenceError
from app.models.comment import Comment
from app.models.user import User
from app.models.video import Video
from app.schemas.comment import CommentResponse
from app.schemas.user import UserSummary
from app.services.base import commit, ensure_owner_or_admin, get_or_404
from app.services.engagement import comment_engagement

logger = logging.getLogger(__name__)

CONTENT_MAX_LENGTH = 1000


def serialize_comments(db: Session, comments: List[Comment]) -> List[CommentResponse]:
    comment_ids = [comment.id for comment in comments]
    counts = comment_engagement.counts_for(db, comment_ids)
    
    replies = defaultdict(list)
    if comment_ids:
        rows = db.query(Comment.parentId, Comment.id).filter(
            Comment.parentId.in_(comment_ids)
        ).order_by(Comment.createdAt, Comment.id).all()
        for parent_id, reply_id in rows:
            replies[parent_id].append(reply_id)
    
    responses = []
    for comment in comments:
        comment_response = CommentResponse(
            id=comment.id,
            videoId=comment.videoId,
            userId=comment.userId,
            user=UserSummary.model_validate(comment.user) if comment.user else None,
            parentId=comment.parentId,
            content=comment.content,
            likes=counts[comment.id].likes,
            dislikes=counts[comment.id].dislikes,
            replies=replies[comment.id],
            createdAt=comment.createdAt,
            updatedAt=comment.updatedAt
        )
        responses.append(comment_response)
    return responses


def _clean_content(content: Optional[str]) -> str:
    content = (content or "").strip()
    if not content:
        raise InvalidInput("Comment content is required")
    if len(content) > CONTENT_MAX_LENGTH:
        raise InvalidInput(f"Comment must be at most {CONTENT_MAX_LENGTH} characters")
    return content


def list_video_comments(db: Session, video_id: int) -> List[CommentResponse]:
    """Top-level comments of a video, newest first."""
    get_or_404(db, Video, video_id, "Video not found")
    comments = db.query(Comment).options(joinedload(Comment.user)).filter(
        Comment.videoId == video_id,
        Comment.parentId.is_(None)
    ).order_by(desc(Comment.createdAt), desc(Comment.id)).all()
    return serialize_comments(db, comments)


def list_replies(db: Session, comment_id: int) -> List[CommentResponse]:
    """Replies to a comment in conversation order, oldest first."""
    get_or_404(db, Comment, comment_id, "Comment not found")
    replies = db.query(Comment).options(joinedload(Comment.user)).filter(
        Comment.parentId == comment_id
    ).order_by(Comment.createdAt, Comment.id).all()
    return serialize_comments(db, replies)


def create_comment(
    db: Session,
    video_id: int,
    user: User,
    content: Optional[str],
    parent_id: Optional[int] = None
) -> CommentResponse:
    content = _clean_content(content)
    get_or_404(db, Video, video_id, "Video not found")
    
    if parent_id is not None:
        parent = get_or_404(db, Comment, parent_id, "Parent comment not found")
        if parent.videoId != video_id:
            raise InvalidInput("Parent comment belongs to a different video")
        if parent.parentId is not None:
            raise InvalidInput("Cannot reply to a reply")
    
    db_comment = Comment(
        userId=user.id,
        videoId=video_id,
        parentId=parent_id,
        content=content
    )
    db.add(db_comment)
    commit(db, "add comment")
    db.refresh(db_comment)
    
    return serialize_comments(db, [db_comment])[0]


def update_comment(db: Session, comment_id: int, user: User, content: Optional[str]) -> CommentResponse:
    content = _clean_content(content)
    comment = get_or_404(db, Comment, comment_id, "Comment not found")
    ensure_owner_or_admin(comment.userId, user, "Not authorized to update this comment")
    
    comment.content = content
    commit(db, "update comment")
    db.refresh(comment)
    
    return serialize_comments(db, [comment])[0]


def delete_comment(db: Session, comment_id: int, user: User) -> int:
    """
    Delete a comment. A top-level comment takes its replies with it.
    Returns the number of comments removed.
    """
    comment = get_or_404(db, Comment, comment_id, "Comment not found")
    ensure_owner_or_admin(comment.userId, user, "Not authorized to delete this comment")
    
    doomed = [comment.id]
    if comment.parentId is None:
        doomed.extend(row[0] for row in db.query(Comment.id).filter(Comment.parentId == comment.id).all())
    
    try:
        comment_engagement.clear(db, doomed)
        db.query(Comment).filter(Comment.parentId == comment.id).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.id == comment.id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete comment %s", comment_id)
        raise PersistenceError("Failed to delete comment")
    
    logger.info("Comment %s deleted by user %s (%d replies)", comment_id, user.id, len(doomed) - 1)
    return len(doomed)
