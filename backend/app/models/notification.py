import enum
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship, backref
from datetime import datetime
from app.database import Base


class NotificationType(str, enum.Enum):
    OVERDUE_PAYMENT = "overdue_payment"
    RENEWAL_REMINDER = "renewal_reminder"
    PLAN_LIMIT = "plan_limit"
    SYSTEM = "system"
    OTHER = "other"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False, default=NotificationType.OTHER.value)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, index=True)
    subscription_id = Column(Integer, ForeignKey('subscriptions.id', ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationship
    user = relationship("User", backref=backref("notifications", cascade="all, delete-orphan"))
