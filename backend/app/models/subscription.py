import enum
from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship, backref
from datetime import datetime
from app.database import Base


class BillingCycle(str, enum.Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class SubscriptionCategory(str, enum.Enum):
    SOFTWARE = "software"
    MARKETING = "marketing"
    FINANCE = "finance"
    OTHER = "other"


class Subscription(Base):
    """A recurring service the user is tracking (Netflix, GitHub Pro, ...)."""
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    service_name = Column(String(255), nullable=False)
    cost = Column(Numeric(10, 2), nullable=False, default=0)
    billing_cycle = Column(String(20), nullable=False, default=BillingCycle.MONTHLY.value)
    next_renewal = Column(Date, nullable=False, index=True)
    category = Column(String(20), nullable=False, default=SubscriptionCategory.OTHER.value)
    status = Column(String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True)
    notes = Column(Text, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", backref=backref("subscriptions", cascade="all, delete-orphan"))
