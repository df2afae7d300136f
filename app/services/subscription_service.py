"""
Subscription edges between users.

Each edge is one ``Subscription`` row keyed by (subscriber, channel); the
"subscribers" and "subscribed to" views of a user are both queries over it.
"""
import logging
from typing import Dict, Iterable, List
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import AlreadyExists, NotFound, PersistenceError, SelfSubscription
from app.models.subscription import Subscription
from app.models.user import User
from app.schemas.user import ChannelSummary
from app.services.base import commit, get_or_404

logger = logging.getLogger(__name__)


def subscriber_count(db: Session, user_id: int) -> int:
    return db.query(func.count(Subscription.subscriberId)).filter(
        Subscription.channelId == user_id
    ).scalar()


def subscription_count(db: Session, user_id: int) -> int:
    return db.query(func.count(Subscription.channelId)).filter(
        Subscription.subscriberId == user_id
    ).scalar()


def subscriber_counts(db: Session, user_ids: Iterable[int]) -> Dict[int, int]:
    user_ids = list(user_ids)
    if not user_ids:
        return {}
    rows = db.query(Subscription.channelId, func.count(Subscription.subscriberId)).filter(
        Subscription.channelId.in_(user_ids)
    ).group_by(Subscription.channelId).all()
    counts = {user_id: 0 for user_id in user_ids}
    counts.update(dict(rows))
    return counts


def _get_channel(db: Session, channel_id: int) -> User:
    return get_or_404(db, User, channel_id, "Channel not found")


def _edge(db: Session, subscriber_id: int, channel_id: int):
    return db.query(Subscription).filter(
        Subscription.subscriberId == subscriber_id,
        Subscription.channelId == channel_id
    )


def subscribe(db: Session, user: User, channel_id: int) -> None:
    if channel_id == user.id:
        raise SelfSubscription("Cannot subscribe to your own channel")
    
    _get_channel(db, channel_id)
    
    already_subscribed = AlreadyExists("Already subscribed to this channel")
    if _edge(db, user.id, channel_id).first() is not None:
        raise already_subscribed
    
    db.add(Subscription(subscriberId=user.id, channelId=channel_id))
    # A concurrent subscribe loses on the primary key
    commit(db, "subscribe", on_integrity_error=already_subscribed)
    logger.info("User %s subscribed to channel %s", user.id, channel_id)


def unsubscribe(db: Session, user: User, channel_id: int) -> None:
    _get_channel(db, channel_id)
    
    try:
        removed = _edge(db, user.id, channel_id).delete(synchronize_session=False)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to unsubscribe user %s from channel %s", user.id, channel_id)
        raise PersistenceError("Failed to unsubscribe")
    
    if not removed:
        db.rollback()
        raise NotFound("Not subscribed to this channel")
    
    commit(db, "unsubscribe")
    logger.info("User %s unsubscribed from channel %s", user.id, channel_id)


def is_subscribed(db: Session, user: User, channel_id: int) -> bool:
    _get_channel(db, channel_id)
    return _edge(db, user.id, channel_id).first() is not None


def list_subscriptions(db: Session, user: User) -> List[ChannelSummary]:
    channels = db.query(User).join(
        Subscription, Subscription.channelId == User.id
    ).filter(
        Subscription.subscriberId == user.id
    ).order_by(Subscription.createdAt, User.id).all()
    
    counts = subscriber_counts(db, [channel.id for channel in channels])
    return [
        ChannelSummary(
            id=channel.id,
            username=channel.username,
            avatarUrl=channel.avatarUrl,
            subscriberCount=counts[channel.id]
        )
        for channel in channels
    ]
