from sqlalchemy import Column, BigInteger, Integer, Float, String, DateTime, ForeignKey, Enum, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base
import enum


class VideoCategory(str, enum.Enum):
    entertainment = "Entertainment"
    music = "Music"
    sports = "Sports"
    gaming = "Gaming"
    education = "Education"
    science_technology = "Science & Technology"
    travel = "Travel"
    news = "News"
    comedy = "Comedy"
    vlogs = "Vlogs"
    documentaries = "Documentaries"
    food = "Food"
    fashion = "Fashion"
    beauty = "Beauty"
    pets_animals = "Pets & Animals"


DEFAULT_CATEGORY = VideoCategory.entertainment


class Video(Base):
    __tablename__ = "Videos"
    __table_args__ = (
        CheckConstraint("duration >= 0", name="ck_videos_duration_non_negative"),
        CheckConstraint("views >= 0", name="ck_videos_views_non_negative"),
    )
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    ownerId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(5000))
    videoUrl = Column(String(500), nullable=False)
    thumbnailUrl = Column(String(500), nullable=False)
    duration = Column(Float, nullable=False, default=0)
    views = Column(BigInteger, nullable=False, default=0)
    category = Column(
        Enum(VideoCategory, values_callable=lambda e: [c.value for c in e]),
        nullable=False,
        default=DEFAULT_CATEGORY,
        index=True
    )
    tags = Column(JSON, nullable=False, default=list)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updatedAt = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    owner = relationship("User", back_populates="videos", foreign_keys=[ownerId])
    comments = relationship("Comment", back_populates="video")
