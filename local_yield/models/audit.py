"""
Append-only admin action log.

Rows are written once and never updated or deleted; the ORM listeners
below reject any attempt to do so.
"""

from sqlalchemy import JSON, Column, Enum, ForeignKey, String, event

from local_yield.models.base import BaseModel, TimestampMixin
from local_yield.models.enums import AdminAction

__all__ = ["AdminActionLog", "AppendOnlyViolation"]


class AppendOnlyViolation(RuntimeError):
    """Raised when code tries to mutate a written audit record."""


class AdminActionLog(BaseModel, TimestampMixin):

    __tablename__ = "admin_action_logs"

    performed_by_id = Column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    action = Column(
        Enum(AdminAction, native_enum=False, length=32),
        nullable=False,
        index=True,
    )
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(36), nullable=False, index=True)
    details = Column(JSON, nullable=False, default=dict)


@event.listens_for(AdminActionLog, "before_update")
def _reject_update(mapper, connection, target):
    raise AppendOnlyViolation(f"Audit record {target.id} is append-only")


@event.listens_for(AdminActionLog, "before_delete")
def _reject_delete(mapper, connection, target):
    raise AppendOnlyViolation(f"Audit record {target.id} cannot be deleted")
