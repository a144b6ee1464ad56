# =============================================================================
# asthmacare/data/realtime.py
# Row-change subscriptions over Supabase Realtime
# =============================================================================
"""
RealtimeService - subscribe to postgres_changes on a table.

Delivery order relative to the mutation that caused an event is decided by
the backend; callers must not assume an event arrives before or after the
write call returns.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Optional

from asthmacare.logging import get_logger
from .supabase_client import OWNER_COLUMN, TABLES

logger = get_logger(__name__)

ChangeCallback = Callable[[Dict[str, Any]], None]


class Subscription:
    """Cancellable handle for one realtime channel."""

    def __init__(self, client, channel, topic: str):
        self._client = client
        self._channel = channel
        self.topic = topic
        self.active = True

    async def unsubscribe(self) -> None:
        """Remove the channel. Safe to call more than once; failures are logged."""
        if not self.active:
            return
        self.active = False
        try:
            await self._client.remove_channel(self._channel)
            logger.info(f"Unsubscribed from {self.topic}")
        except Exception as e:
            logger.error(f"Unsubscribe from {self.topic} failed: {e}")


class RealtimeService:
    """
    Subscribe/unsubscribe wrapper around an async client's realtime channels.

    Needs a ``supabase.AsyncClient`` (see create_async_supabase_client);
    the sync client cannot open channels.

    Usage:
        client = await create_async_supabase_client()
        realtime = RealtimeService(client)
        sub = await realtime.subscribe("notifications", on_change, event="INSERT")
        ...
        await sub.unsubscribe()
    """

    def __init__(self, client, schema: str = "public"):
        self.client = client
        self.schema = schema

    async def subscribe(
        self,
        table: str,
        callback: ChangeCallback,
        event: str = "*",
        filter: Optional[str] = None,
    ) -> Subscription:
        """
        Listen for row changes on a table.

        Args:
            table: Table name
            callback: Called with the change payload
            event: "INSERT", "UPDATE", "DELETE" or "*"
            filter: PostgREST style filter, e.g. "user_id=eq.<uuid>"

        Returns:
            Subscription handle
        """
        topic = f"{table}_changes"
        options = {"table": table, "schema": self.schema}
        if filter:
            options["filter"] = filter

        channel = self.client.channel(topic)
        channel.on_postgres_changes(event, callback, **options)
        await channel.subscribe()

        logger.info(f"Subscribed to {topic} (event={event}, filter={filter})")
        return Subscription(self.client, channel, topic)

    async def subscribe_to_notifications(
        self,
        owner_id: str,
        callback: ChangeCallback,
    ) -> Subscription:
        """New notifications for one owner."""
        return await self.subscribe(
            TABLES["notifications"],
            callback,
            event="INSERT",
            filter=f"{OWNER_COLUMN}=eq.{owner_id}",
        )
