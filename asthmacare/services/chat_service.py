# =============================================================================
# asthmacare/services/chat_service.py
# Assistant chat: reply + best-effort history
# =============================================================================

from __future__ import annotations
from typing import Optional

from asthmacare.ai import ChatResponder
from asthmacare.ai.chat_responder import ChatContext
from asthmacare.data.supabase_client import OwnerScopedTable, TABLES, utc_now_iso
from .base_service import BaseService, ServiceResult

CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


class ChatService(BaseService):
    """
    Sends messages to a ChatResponder and records the exchange.

    Anonymous visitors may chat; their exchanges are stored without an owner
    and they get no history back.
    """

    def __init__(self, client, session, responder: ChatResponder):
        super().__init__(client, session)
        self.responder = responder

    def send_message(self, message: str, context: Optional[ChatContext] = None) -> ServiceResult:
        try:
            reply = self.responder.respond(message, context or [])
        except Exception as e:
            self.logger.error(f"AI chat failed: {e}", exc_info=True)
            return ServiceResult.fail(CHAT_ERROR_MESSAGE, error_code="CHAT_001")

        self._save_exchange(message, reply)
        return ServiceResult.ok(reply)

    def _save_exchange(self, message: str, reply: str) -> None:
        owner_id = self.session.owner_id if self.session else None
        row = {"user_message": message, "ai_response": reply, "created_at": utc_now_iso()}

        try:
            if owner_id:
                OwnerScopedTable(self.client, TABLES["chat_history"], owner_id).insert(row).execute()
            else:
                self.client.table(TABLES["chat_history"]).insert({**row, "user_id": None}).execute()
        except Exception as e:
            self.logger.error(f"Failed to save chat history: {getattr(e, 'message', e)}")

    def history(self, limit: int = 50) -> ServiceResult:
        """Newest exchanges first; empty for anonymous visitors."""
        if self.session is None or not self.session.is_authenticated():
            return ServiceResult.ok([])

        chats = self.scoped("chat_history")
        return self.run_query(
            "Get chat history",
            lambda: chats.select().order("created_at", desc=True).limit(limit).execute(),
            table=chats.table_name,
        )
