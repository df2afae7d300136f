from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class Comment(Base):
    __tablename__ = "Comments"
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    videoId = Column(BigInteger, ForeignKey("Videos.id", ondelete="CASCADE"), nullable=False, index=True)
    userId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), nullable=False)
    # Authoritative thread link; NULL for top-level comments
    parentId = Column(BigInteger, ForeignKey("Comments.id", ondelete="CASCADE"), index=True)
    content = Column(String(1000), nullable=False)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updatedAt = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="comments")
    video = relationship("Video", back_populates="comments")
