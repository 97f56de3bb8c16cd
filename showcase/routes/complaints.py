from fastapi import APIRouter, Depends
from typing import List
import logging

from showcase.dependencies.auth import user_supabase_client
from showcase.schemas.complaint import (
    COMPLAINT_STATUSES,
    Complaint,
    ComplaintCreate,
    ComplaintStats,
    ComplaintStatusUpdate,
    ComplaintWithStudent,
)
from showcase.services.workflow import (
    Outcome,
    check_complaint_delete,
    commit,
    decide_complaint_create,
    decide_complaint_status,
    require_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# -------- Student side --------
@router.post("/complaint", response_model=Outcome)
def submit_complaint(complaint: ComplaintCreate, context=Depends(user_supabase_client)):
    store = context["store"]

    decision = decide_complaint_create(context["actor"], complaint)
    return commit(store, store.complaints, decision)

@router.get("/mine", response_model=List[Complaint])
def get_my_complaints(context=Depends(user_supabase_client)):
    store = context["store"]
    return store.complaints.list_by("student_id", context["user_id"], order_by="created_at", ascending=False)

# -------- Admin side --------
@router.get("/complaints", response_model=List[ComplaintWithStudent])
def get_all_complaints(context=Depends(user_supabase_client)):
    store = context["store"]
    require_admin(context["actor"], "list complaints")

    complaints = store.complaints.list_where(order_by="created_at", ascending=False)
    profiles = {
        p.id: p for p in store.profiles.list_in("id", list({c.student_id for c in complaints}))
    }

    result = []
    for complaint in complaints:
        profile = profiles.get(complaint.student_id)
        result.append(ComplaintWithStudent(
            **complaint.model_dump(),
            student_name=profile.name if profile else None,
            student_email=profile.email if profile else None,
        ))
    return result

@router.get("/stats", response_model=ComplaintStats)
def get_complaint_stats(context=Depends(user_supabase_client)):
    store = context["store"]
    require_admin(context["actor"], "view complaint statistics")

    counts = {status: store.complaints.count_where({"status": status}) for status in COMPLAINT_STATUSES}
    return ComplaintStats(**counts, students=store.students.count_where())

@router.put("/complaint/{complaint_id}", response_model=Outcome)
def update_complaint_status(complaint_id: str, payload: ComplaintStatusUpdate, context=Depends(user_supabase_client)):
    store = context["store"]

    complaint = store.complaints.get(complaint_id)
    decision = decide_complaint_status(context["actor"], complaint, payload.status, payload.admin_notes)
    return commit(store, store.complaints, decision, record_id=complaint_id, current=complaint)

@router.delete("/complaint/{complaint_id}")
def delete_complaint(complaint_id: str, context=Depends(user_supabase_client)):
    store = context["store"]

    complaint = store.complaints.get(complaint_id)
    check_complaint_delete(context["actor"], complaint)
    store.complaints.delete(complaint_id)
    logger.info(f"Complaint {complaint_id} deleted by {context['user_id']}")
    return {"message": "Complaint deleted successfully"}
