from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional


class PaddleCustomData(BaseModel):
    user_id: Optional[str] = Field(None, alias="userId")
    plan_type: Optional[str] = Field(None, alias="planType")

    class Config:
        populate_by_name = True
        extra = "allow"

    @field_validator("user_id", mode="before")
    @classmethod
    def numeric_user_id(cls, value):
        # Checkout custom data is free-form; ids sometimes arrive as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class PaddleEventData(BaseModel):
    """Only id, status and custom_data drive plan changes; the rest is carried through untyped."""
    id: Optional[str] = None
    status: Optional[str] = None
    customer: Any = None
    items: Any = None
    custom_data: Optional[PaddleCustomData] = None

    class Config:
        extra = "allow"


class PaddleWebhookEvent(BaseModel):
    """Incoming Paddle notification. Consumed once per request, never stored."""
    event_type: str = ""
    data: PaddleEventData = Field(default_factory=PaddleEventData)

    class Config:
        extra = "allow"

    @property
    def user_id(self) -> Optional[str]:
        return self.data.custom_data.user_id if self.data.custom_data else None

    @property
    def plan_type(self) -> Optional[str]:
        return self.data.custom_data.plan_type if self.data.custom_data else None


class CreateTransactionRequest(BaseModel):
    items: List[Dict[str, Any]] = []
    customer: Optional[Dict[str, Any]] = None
    success_url: Optional[str] = Field(None, alias="successUrl")
    custom_data: Optional[Dict[str, Any]] = Field(None, alias="customData")

    class Config:
        populate_by_name = True

    def to_paddle_body(self) -> Dict[str, Any]:
        return {
            "items": self.items,
            "customer": self.customer,
            "success_url": self.success_url,
            "custom_data": self.custom_data,
        }
