from fastapi import Header, HTTPException
from supabase import create_client
import os
import time
import logging

from showcase.schemas.auth import Actor, ANONYMOUS
from showcase.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


def supabase_settings():
    supabase_url = os.getenv("SUPABASE_URL")
    supabase_key = os.getenv("SUPABASE_KEY")

    if not supabase_url or not supabase_key:
        logger.error("Supabase URL or Key not found in environment variables")
        raise HTTPException(status_code=500, detail="Server configuration error")
    return supabase_url, supabase_key


def authenticate(token: str):
    supabase_url, supabase_key = supabase_settings()

    try:
        start_time = time.time()
        logger.info("Creating Supabase client")
        supabase = create_client(supabase_url, supabase_key)

        logger.info("Validating token with Supabase")
        user_res = supabase.auth.get_user(token)
        end_time = time.time()
        logger.info(f"Token validation completed in {end_time - start_time:.2f} seconds")
    except Exception as e:
        logger.error(f"Supabase token validation error: {str(e)}")
        if "timed out" in str(e).lower():
            raise HTTPException(
                status_code=504,
                detail="Connection to authentication service timed out. Please try again later."
            )
        raise HTTPException(status_code=401, detail=f"Authentication error: {str(e)}")

    if not user_res or not user_res.user:
        logger.warning("User not found after successful token validation")
        raise HTTPException(status_code=401, detail="User not found")

    # Run table queries as the user so row-level security applies
    supabase.postgrest.auth(token)
    store = EntityStore(supabase)
    user_id = user_res.user.id
    roles = store.roles_for(user_id)

    logger.info(f"Successfully authenticated user: {user_id} roles={sorted(roles)}")
    return {
        "supabase": supabase,
        "store": store,
        "user_id": user_id,
        "user": user_res.user,
        "actor": Actor(id=user_id, roles=roles),
        "token": token,
    }


async def user_supabase_client(authorization: str = Header(...)):
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid token format")

    token = authorization.split(" ")[1]
    return authenticate(token)


# Showcase and recruiter contact run without a signed-in user
async def public_supabase_client():
    supabase_url, supabase_key = supabase_settings()
    supabase = create_client(supabase_url, supabase_key)
    return {
        "supabase": supabase,
        "store": EntityStore(supabase),
        "user_id": None,
        "actor": ANONYMOUS,
    }
