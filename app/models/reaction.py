from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, Enum, Index
from datetime import datetime
from app.database import Base
import enum


class ReactionTargetType(str, enum.Enum):
    video = "video"
    comment = "comment"


class ReactionKind(str, enum.Enum):
    like = "like"
    dislike = "dislike"


class Reaction(Base):
    """One row per (user, target): a user is in the likes set or the dislikes set, never both."""
    __tablename__ = "Reactions"
    __table_args__ = (
        Index("ix_reactions_target", "targetType", "targetId", "kind"),
    )
    
    userId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), primary_key=True)
    targetType = Column(Enum(ReactionTargetType), primary_key=True)
    targetId = Column(BigInteger, primary_key=True)
    kind = Column(Enum(ReactionKind), nullable=False)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
