from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Enum, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base
import enum


class UserRole(str, enum.Enum):
    user = "user"
    admin = "admin"


class UserStatus(str, enum.Enum):
    active = "active"
    blocked = "blocked"


class User(Base):
    __tablename__ = "Users"
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    avatarUrl = Column(String(500))
    bio = Column(Text)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.user)
    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.active)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
    updatedAt = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    videos = relationship("Video", back_populates="owner", foreign_keys="Video.ownerId")
    comments = relationship("Comment", back_populates="user")
    
    # Subscription edges
    subscribedTo = relationship(
        "Subscription",
        foreign_keys="Subscription.subscriberId",
        back_populates="subscriber",
        cascade="all, delete-orphan"
    )
    subscribers = relationship(
        "Subscription",
        foreign_keys="Subscription.channelId",
        back_populates="channel",
        cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
