import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship, validates
from datetime import datetime
from app.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(100), default="")
    password = Column(String(200), nullable=True)  # NULL for external-identity accounts
    created_at = Column(DateTime, default=datetime.utcnow)

    @validates('email')
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value

    plan = relationship("UserPlan", back_populates="user", uselist=False, cascade="all, delete-orphan")
    notification_preferences = relationship(
        "NotificationPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
