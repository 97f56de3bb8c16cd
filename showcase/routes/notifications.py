from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from contextlib import aclosing
import asyncio
import logging

from showcase.dependencies.auth import authenticate, supabase_settings, user_supabase_client
from showcase.schemas.notification import Notification, NotificationFeed
from showcase.services.errors import ShowcaseError
from showcase.services.notifications import DEFAULT_LIMIT, list_recent, mark_all_read, mark_read
from showcase.services.realtime import SupabaseChangeSource, watch_feed

logger = logging.getLogger(__name__)

router = APIRouter()

# -------- Feed --------
@router.get("", response_model=NotificationFeed)
def get_notifications(
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    context=Depends(user_supabase_client)
):
    return list_recent(context["store"], context["user_id"], limit)

@router.put("/notification/{notification_id}/read", response_model=Notification)
def mark_notification_read(notification_id: str, context=Depends(user_supabase_client)):
    return mark_read(context["store"], context["actor"], notification_id)

@router.put("/read-all")
def mark_all_notifications_read(context=Depends(user_supabase_client)):
    updated = mark_all_read(context["store"], context["actor"])
    return {"updated": updated}

# -------- Live feed --------
def change_source_for(token: str) -> SupabaseChangeSource:
    supabase_url, supabase_key = supabase_settings()
    return SupabaseChangeSource(supabase_url, supabase_key, access_token=token)


async def _push_feeds(websocket: WebSocket, store, source, user_id: str):
    async with aclosing(watch_feed(store, source, user_id)) as feeds:
        async for feed in feeds:
            await websocket.send_json(feed.model_dump(mode="json"))


async def _wait_for_disconnect(websocket: WebSocket):
    # The client never sends anything; reading is how a hang-up is noticed while no feed is due.
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


# Browsers cannot set headers on a websocket, so the access token comes as a query param.
@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket, token: str = Query(...)):
    try:
        # token validation is a blocking HTTP call
        context = await asyncio.to_thread(authenticate, token)
    except (HTTPException, ShowcaseError) as e:
        await websocket.close(code=1008, reason=e.detail)
        return

    await websocket.accept()
    user_id = context["user_id"]
    source = change_source_for(token)

    pusher = asyncio.create_task(_push_feeds(websocket, context["store"], source, user_id))
    listener = asyncio.create_task(_wait_for_disconnect(websocket))
    try:
        done, _ = await asyncio.wait({pusher, listener}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (pusher, listener):
            task.cancel()
        await asyncio.gather(pusher, listener, return_exceptions=True)
    logger.info(f"Notification socket closed for {user_id}")

    if pusher in done and pusher.exception() and not isinstance(pusher.exception(), WebSocketDisconnect):
        raise pusher.exception()
