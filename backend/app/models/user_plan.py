import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class PlanType(str, enum.Enum):
    FREE = "free"
    PRO = "pro"


class UserPlan(Base):
    __tablename__ = "user_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey('users.id', ondelete="CASCADE"), unique=True, nullable=False)

    plan_type = Column(String(20), nullable=False, default=PlanType.FREE.value)
    subscription_limit = Column(Integer, nullable=False, default=5)
    # {"analytics": bool, "reports": bool, "team_features": bool, "api_access": bool}
    features = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="plan")
