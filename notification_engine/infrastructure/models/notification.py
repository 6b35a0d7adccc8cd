"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.sql import expression

from notification_engine.infrastructure.database import Base
from notification_engine.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_unread", "user_id", "is_read", "created_at"),
        Index("ix_notification_pending", "delivered_at", "snoozed_until"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    organization_id = Column(String(64), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    action_url = Column(String(500), nullable=True)
    action_label = Column(String(80), nullable=True)
    related_entity_type = Column(String(50), nullable=True)
    related_entity_id = Column(String(64), nullable=True)
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    ai_priority_score = Column(Float, nullable=True)
    ai_urgency_reason = Column(Text, nullable=True)
    is_read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    delivered_at = Column(DateTime(), nullable=True)
    snoozed_until = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]
