from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.models.delay_notification import DelayNotificationType


class DelayScanResult(BaseModel):
    new_client_notifications: int = 0
    onboarding_notifications: int = 0
    already_notified: int = 0
    skipped_unassigned: int = 0

    @property
    def created(self) -> int:
        return self.new_client_notifications + self.onboarding_notifications


class DelayNotificationResponse(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    notification_type: DelayNotificationType
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class JustificationCreate(BaseModel):
    justification: str = Field(..., description="Why the deadline was missed")

    @field_validator("justification")
    @classmethod
    def justification_must_not_be_blank(cls, v):
        if not v.strip():
            raise ValueError("Justification must not be empty")
        return v.strip()


class DelayJustificationResponse(BaseModel):
    id: int
    notification_id: int
    user_id: int
    user_name: Optional[str] = None
    justification: str
    notification_type: DelayNotificationType
    client_name: Optional[str] = None
    archived: bool
    archived_at: Optional[datetime] = None
    archived_by_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
