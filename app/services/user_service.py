"""
Accounts and public profiles.
"""
import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session
from app.core.exceptions import Conflict, InvalidInput, Unauthenticated
from app.core.security import hash_password, verify_password
from app.models.user import User, UserStatus
from app.schemas.user import UserCreate, UserProfile, UserResponse, UserUpdate
from app.services.base import commit, get_or_404
from app.services.subscription_service import subscriber_count, subscription_count
from app.utils.validators import validate_username

logger = logging.getLogger(__name__)


def register_user(db: Session, user_data: UserCreate) -> User:
    if not validate_username(user_data.username):
        raise InvalidInput("Username may only contain letters, digits, underscores and dashes")
    
    existing = db.query(User).filter(
        or_(User.username == user_data.username, User.email == user_data.email)
    ).first()
    if existing is not None:
        field = "Username" if existing.username == user_data.username else "Email"
        raise Conflict(f"{field} already in use")
    
    db_user = User(
        email=user_data.email,
        username=user_data.username,
        password=hash_password(user_data.password)
    )
    db.add(db_user)
    commit(db, "register user", on_integrity_error=Conflict("Username or email already in use"))
    db.refresh(db_user)
    
    logger.info("User %s registered", db_user.id)
    return db_user


def authenticate_user(db: Session, username: str, password: str) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user is None or not verify_password(password, user.password):
        raise Unauthenticated("Incorrect username or password")
    if user.status == UserStatus.blocked:
        raise Unauthenticated("Account is blocked")
    return user


def get_profile(db: Session, user_id: int) -> UserProfile:
    user = get_or_404(db, User, user_id, "User not found")
    profile = UserProfile.model_validate(user)
    profile.subscriberCount = subscriber_count(db, user.id)
    return profile


def get_own_profile(db: Session, user: User) -> UserResponse:
    response = UserResponse.model_validate(user)
    response.subscriberCount = subscriber_count(db, user.id)
    response.subscriptionCount = subscription_count(db, user.id)
    return response


def update_profile(db: Session, user: User, user_update: UserUpdate) -> UserResponse:
    username = user_update.username
    if username is not None and username != user.username:
        if not validate_username(username):
            raise InvalidInput("Username may only contain letters, digits, underscores and dashes")
        taken = db.query(User.id).filter(User.username == username, User.id != user.id).first()
        if taken is not None:
            raise Conflict("Username already taken")
        user.username = username
    
    if user_update.bio is not None:
        user.bio = user_update.bio
    
    commit(db, "update profile", on_integrity_error=Conflict("Username already taken"))
    db.refresh(user)
    return get_own_profile(db, user)


def update_avatar(db: Session, user: User, avatar_url: str) -> UserResponse:
    user.avatarUrl = avatar_url
    commit(db, "update profile picture")
    db.refresh(user)
    return get_own_profile(db, user)
