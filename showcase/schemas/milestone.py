from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, date

# --- Milestones ---
class Milestone(BaseModel):
    id: str
    student_id: str
    title: str
    description: Optional[str] = None
    date_completed: date
    verified_by_admin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("verified_by_admin", mode="before")
    @classmethod
    def none_to_false(cls, value):
        return False if value is None else value


class MilestoneCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    date_completed: date
