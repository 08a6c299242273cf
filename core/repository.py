"""Repository helpers for the append-only event and symptom tables.

Rows are only ever inserted and read; there is no update or delete path.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from typing import TypeVar, Generic, Type, List
from database.models import Base

T = TypeVar('T', bound=Base)


class AppendOnlyRepository(Generic[T]):
    """Generic repository over one append-only table.

    Attributes:
        model: SQLAlchemy model class to operate on.
        session: Database session for executing queries.
    """

    def __init__(self, model: Type[T], session: Session):
        self.model = model
        self.session = session

    def append(self, obj: T) -> T:
        """Add, commit and refresh a new row.

        Args:
            obj: Model instance to persist.

        Returns:
            The persisted object with its generated id.
        """
        return save(self.session, obj)

    def between(self, start: datetime, end: datetime, *criteria) -> List[T]:
        """Return rows with `start <= timestamp <= end`, oldest first.

        Args:
            start: Inclusive lower bound.
            end: Inclusive upper bound.
            criteria: Extra filters (e.g. a name match).
        """
        return (
            self.session.query(self.model)
            .filter(self.model.timestamp >= start, self.model.timestamp <= end, *criteria)
            .order_by(self.model.timestamp, self.model.id)
            .all()
        )

    def where(self, *criteria) -> List[T]:
        """Return all rows matching `criteria`, oldest first."""
        return (
            self.session.query(self.model)
            .filter(*criteria)
            .order_by(self.model.timestamp, self.model.id)
            .all()
        )


def save(session: Session, obj: Base) -> Base:
    """Convenience function to add, commit and refresh an object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj
