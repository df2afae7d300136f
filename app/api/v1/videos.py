from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import DomainError, InvalidInput
from app.database import get_db
from app.models.user import User
from app.schemas.comment import CommentCreate, CommentResponse
from app.schemas.engagement import EngagementCounts, EngagementStatus
from app.schemas.subscription import MessageResponse
from app.schemas.video import VideoDetail, VideoResponse, VideoUpdate, ViewCount
from app.api.deps import get_current_user, get_optional_user
from app.services import comment_service, video_service
from app.services.engagement import video_engagement
from app.utils.parsing import parse_pagination
from app.utils.uploads import THUMBNAILS, VIDEOS, storage
from app.utils.validators import validate_image_file_extension, validate_video_file_extension
from app.utils.video_processing import probe_duration

router = APIRouter()


@router.get("/", response_model=List[VideoResponse])
def list_videos(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return video_service.list_videos(db, parse_pagination(page, limit))


@router.get("/category/{category}", response_model=List[VideoResponse])
def list_videos_by_category(
    category: str,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db)
):
    return video_service.list_by_category(db, category, parse_pagination(page, limit))


@router.get("/search", response_model=List[VideoResponse])
def search_videos(q: Optional[str] = None, db: Session = Depends(get_db)):
    return video_service.search_videos(db, q)


@router.get("/user/{user_id}", response_model=List[VideoResponse])
def get_user_videos(user_id: int, db: Session = Depends(get_db)):
    return video_service.list_by_owner(db, user_id)


@router.get("/{video_id}", response_model=VideoDetail)
def get_video(
    video_id: int,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db)
):
    return video_service.get_video(db, video_id, viewer=current_user)


@router.get("/{video_id}/recommended", response_model=List[VideoResponse])
def get_recommended_videos(video_id: int, db: Session = Depends(get_db)):
    return video_service.recommended_videos(db, video_id)


@router.post("/{video_id}/view", response_model=ViewCount)
def increment_view(video_id: int, db: Session = Depends(get_db)):
    return ViewCount(views=video_service.increment_view(db, video_id))


@router.post("/", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    title: str = Form(None),
    description: str = Form(None),
    category: str = Form(None),
    tags: str = Form(None),
    video: UploadFile = File(None),
    thumbnail: UploadFile = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if video is None or thumbnail is None:
        raise InvalidInput("Video and thumbnail files are required")
    if not validate_video_file_extension(video.filename):
        raise InvalidInput("Only video files are allowed!")
    if not validate_image_file_extension(thumbnail.filename):
        raise InvalidInput("Only image files are allowed for thumbnails!")
    
    video_url = await storage.save(video, VIDEOS, settings.MAX_VIDEO_SIZE)
    try:
        thumbnail_url = await storage.save(thumbnail, THUMBNAILS, settings.MAX_IMAGE_SIZE)
    except DomainError:
        storage.remove(video_url)
        raise
    
    duration = probe_duration(storage.path_for(video_url))
    
    try:
        return video_service.create_video(
            db,
            owner=current_user,
            title=title,
            description=description,
            video_url=video_url,
            thumbnail_url=thumbnail_url,
            duration=duration,
            category=category,
            tags=tags
        )
    except DomainError:
        # Cleanup uploaded files if the record was not saved
        storage.remove(video_url)
        storage.remove(thumbnail_url)
        raise


@router.put("/{video_id}", response_model=VideoResponse)
def update_video(
    video_id: int,
    video_update: VideoUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_service.update_video(db, video_id, current_user, video_update)


@router.delete("/{video_id}", response_model=MessageResponse)
def delete_video(
    video_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    video_service.delete_video(db, video_id, current_user)
    return MessageResponse(message="Video deleted successfully")


# ===== LIKES =====

@router.post("/{video_id}/like", response_model=EngagementCounts)
def like_video(
    video_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_engagement.like(db, video_id, current_user.id)


@router.delete("/{video_id}/unlike", response_model=EngagementCounts)
def unlike_video(
    video_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_engagement.unlike(db, video_id, current_user.id)


@router.post("/{video_id}/dislike", response_model=EngagementCounts)
def dislike_video(
    video_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_engagement.dislike(db, video_id, current_user.id)


@router.delete("/{video_id}/undislike", response_model=EngagementCounts)
def undislike_video(
    video_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_engagement.undislike(db, video_id, current_user.id)


@router.get("/{video_id}/like-status", response_model=EngagementStatus)
def get_like_status(
    video_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_engagement.status(db, video_id, current_user.id)


# ===== COMMENTS =====

@router.get("/{video_id}/comments", response_model=List[CommentResponse])
def get_video_comments(video_id: int, db: Session = Depends(get_db)):
    return comment_service.list_video_comments(db, video_id)


@router.post("/{video_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    video_id: int,
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return comment_service.create_comment(
        db,
        video_id,
        current_user,
        comment_data.content,
        parent_id=comment_data.parentCommentId
    )
