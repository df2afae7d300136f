from typing import List
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import DomainError, InvalidInput
from app.database import get_db
from app.models.user import User
from app.schemas.user import ChannelSummary, UserProfile, UserResponse, UserUpdate
from app.schemas.subscription import MessageResponse, SubscriptionStatus
from app.schemas.video import VideoResponse
from app.api.deps import get_current_user
from app.services import subscription_service, user_service, video_service
from app.utils.uploads import PROFILES, storage
from app.utils.validators import validate_image_file_extension

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_service.get_own_profile(db, current_user)


@router.get("/subscriptions", response_model=List[ChannelSummary])
def get_subscriptions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return subscription_service.list_subscriptions(db, current_user)


@router.get("/liked-videos", response_model=List[VideoResponse])
def get_liked_videos(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return video_service.list_liked_videos(db, current_user)


@router.get("/history", response_model=List[VideoResponse])
def get_watch_history(current_user: User = Depends(get_current_user)):
    # Views are counted, not recorded per user
    return []


@router.put("/profile", response_model=UserResponse)
def update_user_profile(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return user_service.update_profile(db, current_user, user_update)


@router.post("/profile-picture", response_model=UserResponse)
async def upload_profile_picture(
    profilePicture: UploadFile = File(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if profilePicture is None:
        raise InvalidInput("No file uploaded")
    if not validate_image_file_extension(profilePicture.filename):
        raise InvalidInput("Only image files are allowed!")
    
    previous = current_user.avatarUrl
    avatar_url = await storage.save(profilePicture, PROFILES, settings.MAX_IMAGE_SIZE)
    try:
        profile = user_service.update_avatar(db, current_user, avatar_url)
    except DomainError:
        storage.remove(avatar_url)
        raise
    if previous and previous.startswith(storage.url_prefix):
        storage.remove(previous)
    return profile


@router.post("/subscribe/{channel_id}", response_model=MessageResponse)
def subscribe(
    channel_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    subscription_service.subscribe(db, current_user, channel_id)
    return MessageResponse(message="Subscribed successfully")


@router.delete("/unsubscribe/{channel_id}", response_model=MessageResponse)
def unsubscribe(
    channel_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    subscription_service.unsubscribe(db, current_user, channel_id)
    return MessageResponse(message="Unsubscribed successfully")


@router.get("/check-subscription/{channel_id}", response_model=SubscriptionStatus)
def check_subscription(
    channel_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return SubscriptionStatus(isSubscribed=subscription_service.is_subscribed(db, current_user, channel_id))


@router.get("/{user_id}", response_model=UserProfile)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_profile(db, user_id)
