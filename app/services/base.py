"""
Helpers shared by the service layer: commit handling and ownership checks.
"""
import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import DomainError, Forbidden, NotFound, PersistenceError
from app.models.user import User

logger = logging.getLogger(__name__)


def commit(db: Session, action: str, on_integrity_error: DomainError = None) -> None:
    """
    Commit the unit of work or roll it back entirely.
    Storage errors are logged and surfaced as PersistenceError; an
    integrity violation is surfaced as ``on_integrity_error`` when given.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if on_integrity_error is not None:
            raise on_integrity_error
        logger.exception("Integrity error while trying to %s", action)
        raise PersistenceError(f"Failed to {action}")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while trying to %s", action)
        raise PersistenceError(f"Failed to {action}")


def get_or_404(db: Session, model, entity_id: int, message: str):
    entity = db.query(model).filter(model.id == entity_id).first()
    if entity is None:
        raise NotFound(message)
    return entity


def ensure_owner_or_admin(owner_id: int, user: User, message: str) -> None:
    if owner_id != user.id and not user.is_admin:
        raise Forbidden(message)
