from sqlalchemy import Column, BigInteger, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class Subscription(Base):
    __tablename__ = "Subscriptions"
    __table_args__ = (
        CheckConstraint("subscriberId <> channelId", name="ck_subscriptions_no_self"),
    )
    
    subscriberId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), primary_key=True, index=True)
    channelId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), primary_key=True, index=True)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    # Relationships
    subscriber = relationship("User", foreign_keys=[subscriberId], back_populates="subscribedTo")
    channel = relationship("User", foreign_keys=[channelId], back_populates="subscribers")
