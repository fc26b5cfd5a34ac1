from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from datetime import datetime
from app.database import Base


class PaddleSubscription(Base):
    """Local mirror of a Paddle subscription, used to map cancellations back to a user."""
    __tablename__ = "paddle_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    paddle_subscription_id = Column(String(64), unique=True, nullable=False)
    status = Column(String(30))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
