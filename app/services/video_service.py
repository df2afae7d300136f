"""
Video catalog: listing, search, recommendations, and the video lifecycle.
"""
import logging
import re
from typing import List, Optional
from sqlalchemy import String, cast, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from app.core.config import settings
from app.core.exceptions import InvalidInput, NotFound, PersistenceError
from app.models.comment import Comment
from app.models.reaction import ReactionKind
from app.models.user import User
from app.models.video import Video
from app.schemas.user import ChannelSummary, UserSummary
from app.schemas.video import VideoDetail, VideoResponse, VideoUpdate
from app.services.base import commit, ensure_owner_or_admin, get_or_404
from app.services.engagement import comment_engagement, video_engagement
from app.services.subscription_service import subscriber_count
from app.utils.parsing import Pagination, find_category, parse_category, parse_tags

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 5000

# Relevance weight per matched field
SEARCH_WEIGHTS = {"title": 3.0, "tags": 2.0, "description": 1.0}

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def serialize_videos(db: Session, videos: List[Video]) -> List[VideoResponse]:
    counts = video_engagement.counts_for(db, [video.id for video in videos])
    responses = []
    for video in videos:
        video_response = VideoResponse.model_validate(video)
        video_response.owner = UserSummary.model_validate(video.owner) if video.owner else None
        video_response.likes = counts[video.id].likes
        video_response.dislikes = counts[video.id].dislikes
        responses.append(video_response)
    return responses


def _base_query(db: Session):
    return db.query(Video).options(joinedload(Video.owner))


def _newest_first(query):
    return query.order_by(desc(Video.createdAt), desc(Video.id))


def list_videos(db: Session, pagination: Pagination) -> List[VideoResponse]:
    videos = _newest_first(_base_query(db)).offset(pagination.skip).limit(pagination.limit).all()
    return serialize_videos(db, videos)


def list_by_category(db: Session, category: str, pagination: Pagination) -> List[VideoResponse]:
    matched = find_category(category)
    if matched is None:
        return []
    
    videos = _newest_first(
        _base_query(db).filter(Video.category == matched)
    ).offset(pagination.skip).limit(pagination.limit).all()
    return serialize_videos(db, videos)


def list_by_owner(db: Session, owner_id: int) -> List[VideoResponse]:
    videos = _newest_first(_base_query(db).filter(Video.ownerId == owner_id)).all()
    return serialize_videos(db, videos)


def list_liked_videos(db: Session, user: User) -> List[VideoResponse]:
    liked_ids = video_engagement.liked_target_ids(db, user.id)
    videos = _newest_first(_base_query(db).filter(Video.id.in_(liked_ids))).all()
    return serialize_videos(db, videos)


def _tokenize(text: Optional[str]) -> List[str]:
    return _TOKEN_RE.findall(text.lower()) if text else []


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def relevance_score(video: Video, terms: List[str]) -> float:
    """
    Weighted count of field tokens matching a query term.
    A token matches when it equals the term or extends it ("tutorials" for "tutorial").
    """
    fields = {
        "title": _tokenize(video.title),
        "tags": _tokenize(" ".join(video.tags or [])),
        "description": _tokenize(video.description),
    }
    score = 0.0
    for field, tokens in fields.items():
        for term in terms:
            matches = sum(1 for token in tokens if token.startswith(term))
            score += SEARCH_WEIGHTS[field] * matches
    return score


def search_videos(db: Session, query: Optional[str]) -> List[VideoResponse]:
    if not query or not query.strip():
        raise InvalidInput("Search query is required")
    
    terms = list(dict.fromkeys(_tokenize(query)))
    if not terms:
        return []
    
    conditions = []
    for term in terms:
        pattern = f"%{_escape_like(term)}%"
        conditions.extend([
            Video.title.ilike(pattern, escape="\\"),
            Video.description.ilike(pattern, escape="\\"),
            cast(Video.tags, String).ilike(pattern, escape="\\"),
        ])
    candidates = _base_query(db).filter(or_(*conditions)).all()
    
    scored = []
    for video in candidates:
        score = relevance_score(video, terms)
        if score > 0:
            scored.append((score, video))
    scored.sort(key=lambda item: (-item[0], -item[1].views, -item[1].id))
    
    return serialize_videos(db, [video for _, video in scored[:settings.SEARCH_LIMIT]])


def get_video(db: Session, video_id: int, viewer: Optional[User] = None) -> VideoDetail:
    video = get_or_404(db, Video, video_id, "Video not found")
    
    video_detail = VideoDetail.model_validate(video)
    video_detail.owner = ChannelSummary(
        id=video.owner.id,
        username=video.owner.username,
        avatarUrl=video.owner.avatarUrl,
        subscriberCount=subscriber_count(db, video.owner.id)
    )
    counts = video_engagement.counts(db, video.id)
    video_detail.likes = counts.likes
    video_detail.dislikes = counts.dislikes
    
    if viewer is not None:
        kind = video_engagement.kinds_for_user(db, [video.id], viewer.id).get(video.id)
        video_detail.hasLiked = kind == ReactionKind.like
        video_detail.hasDisliked = kind == ReactionKind.dislike
    
    return video_detail


def recommended_videos(db: Session, video_id: int) -> List[VideoResponse]:
    """
    Same-category videos by popularity, topped up with globally popular
    videos only when fewer than RECOMMENDED_MIN_SAME_CATEGORY were found.
    """
    video = get_or_404(db, Video, video_id, "Video not found")
    limit = settings.RECOMMENDED_LIMIT
    
    recommended = _base_query(db).filter(
        Video.id != video.id,
        Video.category == video.category
    ).order_by(desc(Video.views), desc(Video.createdAt), desc(Video.id)).limit(limit).all()
    
    if len(recommended) < settings.RECOMMENDED_MIN_SAME_CATEGORY:
        excluded = [video.id] + [v.id for v in recommended]
        popular = _base_query(db).filter(
            Video.id.notin_(excluded)
        ).order_by(desc(Video.views), desc(Video.id)).limit(limit - len(recommended)).all()
        recommended.extend(popular)
    
    return serialize_videos(db, recommended)


def increment_view(db: Session, video_id: int) -> int:
    updated = db.query(Video).filter(Video.id == video_id).update(
        {Video.views: Video.views + 1},
        synchronize_session=False
    )
    if not updated:
        db.rollback()
        raise NotFound("Video not found")
    commit(db, "record view")
    
    return db.query(Video.views).filter(Video.id == video_id).scalar()


def _validate_text(title: Optional[str], description: Optional[str]):
    if title is not None:
        title = title.strip()
        if not title:
            raise InvalidInput("Title is required")
        if len(title) > TITLE_MAX_LENGTH:
            raise InvalidInput(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    if description is not None:
        description = description.strip()
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise InvalidInput(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return title, description


def create_video(
    db: Session,
    owner: User,
    title: Optional[str],
    video_url: str,
    thumbnail_url: str,
    description: Optional[str] = None,
    duration: Optional[float] = None,
    category: Optional[str] = None,
    tags: Optional[str] = None
) -> VideoResponse:
    if owner is None:
        raise InvalidInput("Video owner is required")
    if not video_url or not thumbnail_url:
        raise InvalidInput("Video and thumbnail files are required")
    if title is None:
        raise InvalidInput("Title is required")
    title, description = _validate_text(title, description)
    
    db_video = Video(
        ownerId=owner.id,
        title=title,
        description=description or None,
        videoUrl=video_url,
        thumbnailUrl=thumbnail_url,
        duration=max(float(duration or 0), 0.0),
        category=parse_category(category),
        tags=parse_tags(tags)
    )
    db.add(db_video)
    commit(db, "save video record")
    db.refresh(db_video)
    
    logger.info("Video %s created by user %s", db_video.id, owner.id)
    return serialize_videos(db, [db_video])[0]


def update_video(db: Session, video_id: int, user: User, video_update: VideoUpdate) -> VideoResponse:
    video = get_or_404(db, Video, video_id, "Video not found")
    ensure_owner_or_admin(video.ownerId, user, "Not authorized to update this video")
    
    title, description = _validate_text(video_update.title, video_update.description)
    category = None
    if video_update.category is not None:
        category = find_category(video_update.category)
        if category is None:
            raise InvalidInput("Invalid category")
    
    if title is not None:
        video.title = title
    if description is not None:
        video.description = description
    if category is not None:
        video.category = category
    if video_update.tags is not None:
        video.tags = parse_tags(video_update.tags)
    
    commit(db, "update video")
    db.refresh(video)
    return serialize_videos(db, [video])[0]


def delete_video(db: Session, video_id: int, user: User) -> None:
    """Delete a video with its comments and every reaction on either, in one transaction."""
    video = get_or_404(db, Video, video_id, "Video not found")
    ensure_owner_or_admin(video.ownerId, user, "Not authorized to delete this video")
    
    try:
        comment_ids = [row[0] for row in db.query(Comment.id).filter(Comment.videoId == video.id).all()]
        comment_engagement.clear(db, comment_ids)
        # Replies first so no row points at a deleted parent
        db.query(Comment).filter(
            Comment.videoId == video.id,
            Comment.parentId.isnot(None)
        ).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.videoId == video.id).delete(synchronize_session=False)
        video_engagement.clear(db, [video.id])
        db.delete(video)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to delete video %s", video_id)
        raise PersistenceError("Failed to delete video")
    
    logger.info("Video %s deleted by user %s with %d comments", video_id, user.id, len(comment_ids))
