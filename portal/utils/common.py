"""
Common helpers shared by services and routes.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.utils.errors import PersistenceError
from portal.utils.logger import configure_logging

logger = configure_logging()


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_format(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO string with Z suffix."""
    if dt is None:
        return None
    return dt.isoformat() + "Z"


def round_marks(value: float) -> float:
    """Marks and scores are reported with two decimals."""
    return round(float(value), 2)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block once, or roll all of it back.
    Store failures surface as PersistenceError; other exceptions propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("transaction rolled back")
        raise PersistenceError() from exc
    except BaseException:
        db.rollback()
        raise
