from pydantic import BaseModel, Field

TIME_REGX = r"^([01]\d|2[0-3]):[0-5]\d$"


class NotificationPrefs(BaseModel):
    """Full preferences record. Every field is required on save: there is no partial update."""
    email_enabled: bool
    reminder_30_days: bool
    reminder_7_days: bool
    reminder_1_day: bool
    email_time: str = Field(..., pattern=TIME_REGX, description="HH:MM")
