from fastapi import APIRouter, Depends
from typing import List

from showcase.dependencies.auth import user_supabase_client
from showcase.schemas.milestone import Milestone, MilestoneCreate
from showcase.services.workflow import (
    Outcome,
    commit,
    decide_milestone_create,
    decide_milestone_verification,
    require_admin,
)

router = APIRouter()

# -------- Milestones --------
@router.post("/milestone", response_model=Outcome)
def add_milestone(milestone: MilestoneCreate, context=Depends(user_supabase_client)):
    store = context["store"]

    decision = decide_milestone_create(context["actor"], milestone)
    return commit(store, store.milestones, decision)

@router.get("/mine", response_model=List[Milestone])
def get_my_milestones(context=Depends(user_supabase_client)):
    store = context["store"]
    return store.milestones.list_by("student_id", context["user_id"], order_by="date_completed", ascending=False)

# Admin review queue
@router.get("/pending", response_model=List[Milestone])
def get_unverified_milestones(context=Depends(user_supabase_client)):
    store = context["store"]
    require_admin(context["actor"], "review milestones")
    return store.milestones.list_by("verified_by_admin", False, order_by="created_at", ascending=True)

@router.put("/milestone/{milestone_id}/verify", response_model=Outcome)
def verify_milestone(milestone_id: str, context=Depends(user_supabase_client)):
    store = context["store"]

    milestone = store.milestones.get(milestone_id)
    decision = decide_milestone_verification(context["actor"], milestone)
    return commit(store, store.milestones, decision, record_id=milestone_id, current=milestone)
