from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

# --- Recruiter messages ---
class RecruiterMessage(BaseModel):
    id: str
    student_id: str
    sender_name: str
    sender_email: str
    sender_company: Optional[str] = None
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    @field_validator("is_read", mode="before")
    @classmethod
    def none_to_false(cls, value):
        return False if value is None else value


class RecruiterMessageCreate(BaseModel):
    sender_name: str = Field(..., min_length=1)
    sender_email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    sender_company: Optional[str] = None
    message: str = Field(..., min_length=1)

    @field_validator("sender_company")
    @classmethod
    def blank_company_to_none(cls, value):
        if value is not None and not value.strip():
            return None
        return value
