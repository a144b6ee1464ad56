"""
AI chat module for AsthmaCare.

MockChatResponder is the placeholder; a model-backed responder can replace
it behind the same ChatResponder.respond(message, context) contract.
"""

from .chat_responder import (
    ChatResponder,
    MockChatResponder,
    ResponseRule,
    DEFAULT_RULES,
    DEFAULT_RESPONSE,
    EMERGENCY_RESPONSE,
)

__all__ = [
    "ChatResponder",
    "MockChatResponder",
    "ResponseRule",
    "DEFAULT_RULES",
    "DEFAULT_RESPONSE",
    "EMERGENCY_RESPONSE",
]
