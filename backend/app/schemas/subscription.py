from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from app.models.subscription import BillingCycle, SubscriptionCategory, SubscriptionStatus


class SubscriptionBase(BaseModel):
    service_name: str = Field(..., min_length=1, max_length=255)
    cost: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    next_renewal: date
    category: SubscriptionCategory = SubscriptionCategory.OTHER
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    notes: Optional[str] = ""

    class Config:
        use_enum_values = True

class SubscriptionCreate(SubscriptionBase):
    pass

class SubscriptionUpdate(BaseModel):
    service_name: Optional[str] = Field(None, min_length=1, max_length=255)
    cost: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    billing_cycle: Optional[BillingCycle] = None
    next_renewal: Optional[date] = None
    category: Optional[SubscriptionCategory] = None
    status: Optional[SubscriptionStatus] = None
    notes: Optional[str] = None

    class Config:
        use_enum_values = True

class SubscriptionResponse(BaseModel):
    id: int
    service_name: str
    cost: Decimal
    billing_cycle: str
    next_renewal: date
    category: str
    status: str
    notes: Optional[str] = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
