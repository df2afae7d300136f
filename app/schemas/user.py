from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class UserStatus(str, Enum):
    active = "active"
    blocked = "blocked"


class UserBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=72)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    bio: Optional[str] = Field(None, max_length=1000)


class UserSummary(BaseModel):
    id: int
    username: str
    avatarUrl: Optional[str] = None
    
    class Config:
        from_attributes = True


class ChannelSummary(UserSummary):
    subscriberCount: int = 0


class UserProfile(BaseModel):
    id: int
    username: str
    avatarUrl: Optional[str] = None
    bio: Optional[str] = None
    createdAt: datetime
    subscriberCount: int = 0
    
    class Config:
        from_attributes = True


class UserResponse(UserProfile):
    email: str
    role: UserRole
    status: UserStatus
    subscriptionCount: int = 0


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
