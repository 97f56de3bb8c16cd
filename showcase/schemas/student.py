from pydantic import BaseModel, field_validator
from typing import Optional, List, Literal
from datetime import datetime

Availability = Literal["available", "not_available"]

# --- Students (students.id -> profiles.id) ---
class StudentProfile(BaseModel):
    id: str
    course: Optional[str] = None
    bio: Optional[str] = None
    github_url: Optional[str] = None
    photo_url: Optional[str] = None
    resume_url: Optional[str] = None
    skills: List[str] = []
    availability: Availability = "not_available"
    verified: bool = False
    verified_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Nullable columns come back as None from PostgREST
    @field_validator("skills", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return value or []

    @field_validator("availability", mode="before")
    @classmethod
    def none_to_unavailable(cls, value):
        return value or "not_available"

    @field_validator("verified", mode="before")
    @classmethod
    def none_to_false(cls, value):
        return False if value is None else value


class StudentProfileUpdate(BaseModel):
    course: Optional[str] = None
    bio: Optional[str] = None
    github_url: Optional[str] = None
    availability: Availability = "not_available"
    skills: List[str] = []

    @field_validator("skills")
    @classmethod
    def normalize_skills(cls, skills: List[str]) -> List[str]:
        # trim, drop blanks and keep the first occurrence of each skill
        cleaned = []
        for skill in skills:
            skill = skill.strip()
            if skill and skill not in cleaned:
                cleaned.append(skill)
        return cleaned


class VerificationUpdate(BaseModel):
    verified: bool


# --- Directory (verified students joined with their profile) ---
class DirectoryEntry(BaseModel):
    student: StudentProfile
    name: str
    email: str
