from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from typing import List, Optional
import logging

from showcase.dependencies.auth import user_supabase_client
from showcase.schemas.student import DirectoryEntry, StudentProfile, StudentProfileUpdate, VerificationUpdate
from showcase.services.directory import attach_profiles
from showcase.services.resume import render_resume, resume_content_disposition
from showcase.services.workflow import (
    Outcome,
    check_student_delete,
    commit,
    decide_profile_upsert,
    decide_student_verification,
    require_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# -------- Own student profile --------
@router.get("/me", response_model=Optional[StudentProfile])
def get_my_student_profile(context=Depends(user_supabase_client)):
    store = context["store"]
    # None until the student saves their profile for the first time
    return store.students.find(context["user_id"])

@router.put("/me", response_model=Outcome)
def update_my_student_profile(update: StudentProfileUpdate, context=Depends(user_supabase_client)):
    store = context["store"]
    actor = context["actor"]

    decision = decide_profile_upsert(actor, actor.id, update)
    return commit(store, store.students, decision, upsert=True)

# -------- Resume download --------
@router.get("/me/resume", response_class=HTMLResponse)
def download_my_resume(context=Depends(user_supabase_client)):
    store = context["store"]
    user_id = context["user_id"]

    profile = store.profiles.get(user_id)
    student = store.students.find(user_id) or StudentProfile(id=user_id)
    milestones = store.milestones.list_by("student_id", user_id, order_by="date_completed", ascending=False)

    html = render_resume(profile, student, milestones)
    return HTMLResponse(
        content=html,
        headers={"Content-Disposition": resume_content_disposition(profile.name)},
    )

# -------- Admin: all students --------
@router.get("/students", response_model=List[DirectoryEntry])
def get_all_students(context=Depends(user_supabase_client)):
    store = context["store"]
    require_admin(context["actor"], "list all students")

    students = store.students.list_where(order_by="created_at", ascending=False)
    return attach_profiles(store, students)

@router.put("/student/{student_id}/verification", response_model=Outcome)
def set_student_verification(student_id: str, payload: VerificationUpdate, context=Depends(user_supabase_client)):
    store = context["store"]
    actor = context["actor"]

    student = store.students.get(student_id)
    decision = decide_student_verification(actor, student, payload.verified)
    return commit(store, store.students, decision, record_id=student_id, current=student)

@router.delete("/student/{student_id}")
def delete_student(student_id: str, context=Depends(user_supabase_client)):
    store = context["store"]
    check_student_delete(context["actor"])

    # Make sure it exists so a stale id reports 404
    store.students.get(student_id)
    store.students.delete(student_id)
    logger.info(f"Student {student_id} deleted by {context['user_id']}")
    return {"message": "Student deleted successfully"}
