from pydantic import BaseModel, field_validator
from typing import Optional, List, Literal
from datetime import datetime

NotificationType = Literal["recruiter_message", "complaint", "milestone", "system"]

# --- Notifications ---
class Notification(BaseModel):
    id: str
    user_id: str
    message: str
    type: NotificationType = "system"
    complaint_id: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None

    @field_validator("is_read", mode="before")
    @classmethod
    def none_to_false(cls, value):
        return False if value is None else value

    @field_validator("type", mode="before")
    @classmethod
    def none_to_system(cls, value):
        return value or "system"


# What a workflow transition wants delivered, before it is persisted
class NotificationDraft(BaseModel):
    user_id: str
    type: NotificationType
    message: str
    complaint_id: Optional[str] = None


class NotificationFeed(BaseModel):
    notifications: List[Notification]
    # counted within the returned window only
    unread_count: int
