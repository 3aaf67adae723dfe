from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from src.catalog.core.exceptions import ConflictError, StoreError


@contextmanager
def store_errors(session: Session, action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into catalog store errors.

    The session is rolled back before the domain error is raised.
    """
    try:
        yield
    except IntegrityError as e:
        session.rollback()
        logger.warning("Constraint violation while {}: {}", action, e.orig)
        raise ConflictError(f"Error {action}: {e.orig}") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Store failure while {}: {}", action, e)
        raise StoreError(f"Error {action}: {e}") from e
