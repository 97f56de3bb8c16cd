from pydantic import BaseModel, Field, field_validator
from typing import Optional, Literal
from datetime import datetime

ComplaintStatus = Literal["pending", "in_progress", "resolved"]
COMPLAINT_STATUSES = ("pending", "in_progress", "resolved")

# --- Complaints ---
class Complaint(BaseModel):
    id: str
    student_id: str
    title: str
    description: str
    status: ComplaintStatus = "pending"
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def none_to_pending(cls, value):
        return value or "pending"


class ComplaintCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)


class ComplaintStatusUpdate(BaseModel):
    status: str = Field(..., description="One of pending, in_progress, resolved")
    admin_notes: Optional[str] = None


class ComplaintWithStudent(Complaint):
    student_name: Optional[str] = None
    student_email: Optional[str] = None


class ComplaintStats(BaseModel):
    pending: int
    in_progress: int
    resolved: int
    students: int
