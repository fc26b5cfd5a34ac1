from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    is_read: bool
    subscription_id: Optional[int] = None
    created_at: datetime
    is_urgent: bool = False

    class Config:
        from_attributes = True


class UnreadCountResponse(BaseModel):
    count: int
    badge: str  # "9+" above nine


class NotificationCheckResponse(BaseModel):
    created: int
    notifications: Optional[List[NotificationResponse]] = None
