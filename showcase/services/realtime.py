import asyncio
import logging
import uuid
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Optional

from pydantic import BaseModel
from supabase import acreate_client

from showcase.services.notifications import DEFAULT_LIMIT, list_recent

logger = logging.getLogger(__name__)


class ChangeEvent(BaseModel):
    table: str
    type: str  # INSERT, UPDATE or DELETE
    record: Dict[str, Any] = {}


def to_change_event(table: str, payload: Dict[str, Any]) -> ChangeEvent:
    # realtime payloads nest the change under "data"; older clients do not
    data = payload.get("data", payload) if isinstance(payload, dict) else {}
    return ChangeEvent(
        table=data.get("table") or table,
        type=str(data.get("type") or data.get("eventType") or "UNKNOWN").upper(),
        record=data.get("record") or data.get("new") or {},
    )


class SupabaseChangeSource:
    """Push feed of Postgres changes over Supabase realtime.

    Each call to :meth:`listen` opens its own channel and closes it when the
    consumer stops iterating. The realtime callback only enqueues; consumers
    pull events from the queue on their own task.
    """

    def __init__(self, url: str, key: str, access_token: Optional[str] = None):
        self.url = url
        self.key = key
        self.access_token = access_token

    async def listen(self, table: str, filter: Optional[str] = None) -> AsyncIterator[ChangeEvent]:
        client = await acreate_client(self.url, self.key)
        if self.access_token:
            await client.realtime.set_auth(self.access_token)

        queue: asyncio.Queue = asyncio.Queue()

        def on_change(payload):
            queue.put_nowait(to_change_event(table, payload))

        channel = client.channel(f"{table}-changes-{uuid.uuid4().hex[:8]}")
        channel.on_postgres_changes("*", schema="public", table=table, filter=filter, callback=on_change)
        await channel.subscribe()
        logger.info(f"Subscribed to {table} changes (filter={filter})")

        try:
            while True:
                yield await queue.get()
        finally:
            await client.remove_channel(channel)
            logger.info(f"Unsubscribed from {table} changes")


async def watch_feed(store, source, user_id: str, limit: int = DEFAULT_LIMIT):
    """Yield the user's notification feed now and again after every change.

    Events are only a signal to re-query; their payload is never trusted as
    the current state.
    """
    yield await asyncio.to_thread(list_recent, store, user_id, limit)
    # closing the feed must close the channel, not wait for garbage collection
    async with aclosing(source.listen("notifications", filter=f"user_id=eq.{user_id}")) as events:
        async for event in events:
            logger.debug(f"Notification change for {user_id}: {event.type}")
            yield await asyncio.to_thread(list_recent, store, user_id, limit)
