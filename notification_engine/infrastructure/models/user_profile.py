"""SQLAlchemy model for the recipient directory."""

from sqlalchemy import Column, String

from notification_engine.infrastructure.database import Base


class UserProfileModel(Base):
    """Contact details of a user that can receive notifications."""

    __tablename__ = "user_profile"

    user_id = Column(String(64), primary_key=True)
    organization_id = Column(String(64), nullable=False, index=True)
    email = Column(String(120), nullable=True)
    name = Column(String(120), nullable=True)


__all__ = ["UserProfileModel"]
