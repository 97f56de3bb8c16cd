from fastapi import APIRouter, Depends

from showcase.dependencies.auth import user_supabase_client

router = APIRouter()

@router.get("/me")
def get_me(context=Depends(user_supabase_client)):
    store = context["store"]
    actor = context["actor"]

    # Profiles are created at sign-up; may lag behind for a fresh account
    profile = store.profiles.find(actor.id)
    return {
        "id": actor.id,
        "roles": sorted(actor.roles),
        "is_admin": actor.is_admin,
        "profile": profile,
    }
