"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, JSON, String, Time
from sqlalchemy.sql import expression

from notification_engine.infrastructure.database import Base
from notification_engine.utils import now_in_app_naive_datetime


class NotificationPreferenceModel(Base):
    """Database representation of the notification settings of a user."""

    __tablename__ = "notification_preference"

    user_id = Column(String(64), primary_key=True)
    type_toggles = Column(JSON, nullable=False, default=dict)
    enable_in_app = Column(Boolean, nullable=False, default=True)
    enable_email = Column(Boolean, nullable=False, default=True)
    enable_realtime = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    enable_ai_prioritization = Column(Boolean, nullable=False, default=True)
    quiet_hours_start = Column(Time(), nullable=True)
    quiet_hours_end = Column(Time(), nullable=True)
    digest_enabled = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    digest_frequency = Column(String(10), nullable=False, default="daily")
    digest_time = Column(Time(), nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)


__all__ = ["NotificationPreferenceModel"]
