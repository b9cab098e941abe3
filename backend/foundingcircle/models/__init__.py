"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from foundingcircle.models.member import FoundingMember  # noqa: F401
from foundingcircle.models.queue_sequence import QueueSequence  # noqa: F401
