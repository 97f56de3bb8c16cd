from fastapi import APIRouter, Depends
from typing import List

from showcase.dependencies.auth import public_supabase_client, user_supabase_client
from showcase.schemas.message import RecruiterMessage, RecruiterMessageCreate
from showcase.services.workflow import Outcome, commit, decide_message_create, decide_message_read

router = APIRouter()

# -------- Recruiter contact (no sign-in) --------
@router.post("/student/{student_id}", response_model=Outcome)
def contact_student(student_id: str, payload: RecruiterMessageCreate, context=Depends(public_supabase_client)):
    store = context["store"]

    student = store.students.get(student_id)
    decision = decide_message_create(student, payload)
    # recruiters cannot read the inbox they write to
    return commit(store, store.messages, decision, minimal=True)

# -------- Student inbox --------
@router.get("/mine", response_model=List[RecruiterMessage])
def get_my_messages(context=Depends(user_supabase_client)):
    store = context["store"]
    return store.messages.list_by("student_id", context["user_id"], order_by="created_at", ascending=False)

@router.put("/message/{message_id}/read", response_model=Outcome)
def mark_message_read(message_id: str, context=Depends(user_supabase_client)):
    store = context["store"]

    message = store.messages.get(message_id)
    decision = decide_message_read(context["actor"], message)
    return commit(store, store.messages, decision, record_id=message_id, current=message)
