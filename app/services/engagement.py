"""
Like/dislike handling shared by videos and comments.

A user's reaction to a target is stored as a single ``Reaction`` row keyed by
(user, target type, target id), so membership in the likes set and the
dislikes set is mutually exclusive at the storage level. Switching from
dislike to like is an update of that one row.
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from app.core.exceptions import AlreadyInDesiredState, Conflict, PersistenceError
from app.models.comment import Comment
from app.models.reaction import Reaction, ReactionKind, ReactionTargetType
from app.models.video import Video
from app.schemas.engagement import EngagementCounts, EngagementStatus
from app.services.base import get_or_404

logger = logging.getLogger(__name__)


class EngagementPolicy:
    """Maintains the likes/dislikes sets of one kind of target."""

    def __init__(self, target_type: ReactionTargetType, model, label: str):
        self.target_type = target_type
        self.model = model
        self.label = label

    def get_target(self, db: Session, target_id: int):
        return get_or_404(db, self.model, target_id, f"{self.label} not found")

    def like(self, db: Session, target_id: int, user_id: int) -> EngagementCounts:
        return self._add(db, target_id, user_id, ReactionKind.like)

    def unlike(self, db: Session, target_id: int, user_id: int) -> EngagementCounts:
        return self._remove(db, target_id, user_id, ReactionKind.like)

    def dislike(self, db: Session, target_id: int, user_id: int) -> EngagementCounts:
        return self._add(db, target_id, user_id, ReactionKind.dislike)

    def undislike(self, db: Session, target_id: int, user_id: int) -> EngagementCounts:
        return self._remove(db, target_id, user_id, ReactionKind.dislike)

    def status(self, db: Session, target_id: int, user_id: int) -> EngagementStatus:
        self.get_target(db, target_id)
        kind = self._current_kind(db, target_id, user_id)
        return EngagementStatus(
            liked=kind == ReactionKind.like,
            disliked=kind == ReactionKind.dislike
        )

    def counts(self, db: Session, target_id: int) -> EngagementCounts:
        return self.counts_for(db, [target_id]).get(target_id, EngagementCounts())

    def counts_for(self, db: Session, target_ids: Iterable[int]) -> Dict[int, EngagementCounts]:
        target_ids = list(target_ids)
        if not target_ids:
            return {}
        rows = db.query(Reaction.targetId, Reaction.kind, func.count()).filter(
            Reaction.targetType == self.target_type,
            Reaction.targetId.in_(target_ids)
        ).group_by(Reaction.targetId, Reaction.kind).all()
        
        counts = {target_id: EngagementCounts() for target_id in target_ids}
        for target_id, kind, total in rows:
            if kind == ReactionKind.like:
                counts[target_id].likes = total
            else:
                counts[target_id].dislikes = total
        return counts

    def kinds_for_user(self, db: Session, target_ids: Iterable[int], user_id: int) -> Dict[int, ReactionKind]:
        target_ids = list(target_ids)
        if not target_ids:
            return {}
        rows = db.query(Reaction.targetId, Reaction.kind).filter(
            Reaction.userId == user_id,
            Reaction.targetType == self.target_type,
            Reaction.targetId.in_(target_ids)
        ).all()
        return {target_id: kind for target_id, kind in rows}

    def liked_target_ids(self, db: Session, user_id: int):
        """Query of target ids the user currently likes, for use as a subquery."""
        return db.query(Reaction.targetId).filter(
            Reaction.userId == user_id,
            Reaction.targetType == self.target_type,
            Reaction.kind == ReactionKind.like
        )

    def clear(self, db: Session, target_ids: Iterable[int]) -> int:
        """Drop every reaction on the given targets. Does not commit."""
        target_ids = list(target_ids)
        if not target_ids:
            return 0
        return db.query(Reaction).filter(
            Reaction.targetType == self.target_type,
            Reaction.targetId.in_(target_ids)
        ).delete(synchronize_session=False)

    def _key(self, target_id: int, user_id: int):
        return (
            Reaction.userId == user_id,
            Reaction.targetType == self.target_type,
            Reaction.targetId == target_id,
        )

    def _current_kind(self, db: Session, target_id: int, user_id: int) -> Optional[ReactionKind]:
        row = db.query(Reaction.kind).filter(*self._key(target_id, user_id)).first()
        return row[0] if row else None

    def _add(self, db: Session, target_id: int, user_id: int, kind: ReactionKind) -> EngagementCounts:
        self.get_target(db, target_id)
        
        reaction = db.query(Reaction).filter(*self._key(target_id, user_id)).with_for_update().first()
        if reaction is not None and reaction.kind == kind:
            raise AlreadyInDesiredState(f"{self.label} already {kind.value}d")
        
        if reaction is None:
            db.add(Reaction(
                userId=user_id,
                targetType=self.target_type,
                targetId=target_id,
                kind=kind
            ))
        else:
            # Moves the user from the opposite set in the same write
            reaction.kind = kind
            reaction.createdAt = datetime.utcnow()
        
        try:
            db.commit()
        except (IntegrityError, StaleDataError):
            # Another request changed this user's reaction between our read and write
            db.rollback()
            if self._current_kind(db, target_id, user_id) == kind:
                raise AlreadyInDesiredState(f"{self.label} already {kind.value}d")
            raise Conflict("Reaction changed concurrently, please retry")
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to %s %s %s", kind.value, self.target_type.value, target_id)
            raise PersistenceError(f"Failed to {kind.value} {self.label.lower()}")
        
        return self.counts(db, target_id)

    def _remove(self, db: Session, target_id: int, user_id: int, kind: ReactionKind) -> EngagementCounts:
        self.get_target(db, target_id)
        
        try:
            removed = db.query(Reaction).filter(
                *self._key(target_id, user_id),
                Reaction.kind == kind
            ).delete(synchronize_session=False)
            if removed:
                db.commit()
            else:
                db.rollback()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to un%s %s %s", kind.value, self.target_type.value, target_id)
            raise PersistenceError(f"Failed to un{kind.value} {self.label.lower()}")
        
        return self.counts(db, target_id)


video_engagement = EngagementPolicy(ReactionTargetType.video, Video, "Video")
comment_engagement = EngagementPolicy(ReactionTargetType.comment, Comment, "Comment")
