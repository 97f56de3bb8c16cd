from fastapi import APIRouter, Depends
import asyncio

from showcase.dependencies.auth import user_supabase_client

router = APIRouter()

# -------- Student dashboard --------
# The five reads are independent; run them side by side and answer once all are in.
@router.get("")
async def get_dashboard(context=Depends(user_supabase_client)):
    store = context["store"]
    user_id = context["user_id"]

    profile, student, complaints, milestones, messages = await asyncio.gather(
        asyncio.to_thread(store.profiles.find, user_id),
        asyncio.to_thread(store.students.find, user_id),
        asyncio.to_thread(store.complaints.list_by, "student_id", user_id),
        asyncio.to_thread(store.milestones.list_by, "student_id", user_id, "date_completed"),
        asyncio.to_thread(store.messages.list_by, "student_id", user_id),
    )

    return {
        "profile": profile,
        "student": student,
        "complaints": complaints,
        "milestones": milestones,
        "messages": messages,
        "unread_messages": sum(1 for m in messages if not m.is_read),
    }
