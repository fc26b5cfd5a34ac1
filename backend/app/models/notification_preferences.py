from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class NotificationPreferences(Base):
    __tablename__ = "notification_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete="CASCADE"), unique=True, nullable=False)

    # Preferences
    email_enabled = Column(Boolean, nullable=False, default=True)
    reminder_30_days = Column(Boolean, nullable=False, default=True)
    reminder_7_days = Column(Boolean, nullable=False, default=True)
    reminder_1_day = Column(Boolean, nullable=False, default=True)
    email_time = Column(String(8), nullable=False, default="09:00:00")  # "HH:MM:SS"

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="notification_preferences")
