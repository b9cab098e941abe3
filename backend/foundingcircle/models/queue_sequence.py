"""Queue Sequence ORM — single-row counter backing queue-number assignment.

Invariants:
    - One row per named sequence; "founding_members" holds the current member count
    - value is only changed inside the same transaction that inserts or deletes a member
    - Updating the row takes a row lock held until commit: admissions and removals
      serialise on it

Design Decisions:
    - Counter row over COUNT(*)+1: a plain count-then-insert hands out duplicate
      numbers under concurrent admissions
    - Counter row over a DB SEQUENCE: sequences never go backwards, but removal
      compacts the queue and the next admission must reuse N
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from foundingcircle.db.base import Base


MEMBER_SEQUENCE = "founding_members"


class QueueSequence(Base):
    """Named counter row."""
    __tablename__ = "queue_sequences"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
