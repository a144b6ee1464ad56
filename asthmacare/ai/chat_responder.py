# =============================================================================
# asthmacare/ai/chat_responder.py
# Asthma assistant chat responders
# =============================================================================
"""
Chat responders behind a single `respond(message, context) -> str` contract.

MockChatResponder is keyword based: the message is lower-cased and checked
against an ordered list of rules, first match wins. It keeps no memory of
earlier turns; `context` is accepted and not used.
"""

from __future__ import annotations
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from asthmacare.logging import get_logger

logger = get_logger(__name__)

ChatContext = Sequence[Dict[str, str]]


# =============================================================================
# CANNED RESPONSES
# =============================================================================

EMERGENCY_RESPONSE = (
    "🚨 This sounds like a medical emergency. Please call 911 or your local emergency "
    "services immediately. Don't wait - severe breathing difficulties require immediate "
    "medical attention."
)

MEDICATION_RESPONSE = (
    "For inhaler and medication questions, it's important to follow your doctor's "
    "prescribed instructions. If you're experiencing issues with your current medication "
    "or need adjustments, please contact your healthcare provider. Never stop or change "
    "medications without medical guidance."
)

TRIGGER_RESPONSE = (
    "Common asthma triggers include dust mites, pet dander, pollen, smoke, cold air, and "
    "strong odors. Keeping a trigger diary can help identify your specific triggers. "
    "Consider using air purifiers, regular cleaning, and avoiding known irritants when "
    "possible."
)

EXERCISE_RESPONSE = (
    "Exercise-induced asthma is manageable! Warm up gradually, consider using your rescue "
    "inhaler before exercise if recommended by your doctor, and choose activities like "
    "swimming which are often better tolerated. Always have your rescue inhaler available "
    "during physical activity."
)

AIR_QUALITY_RESPONSE = (
    "Poor air quality can definitely trigger asthma symptoms. Check daily air quality "
    "reports, limit outdoor activities on high pollution days, keep windows closed during "
    "poor air quality periods, and consider using air purifiers indoors. Our air quality "
    "monitor can help you stay informed!"
)

STRESS_RESPONSE = (
    "Stress and anxiety can indeed trigger asthma symptoms. Practice relaxation techniques "
    "like deep breathing exercises, meditation, or yoga. Maintaining a regular sleep "
    "schedule and staying connected with support networks also helps. If stress is a "
    "major trigger, consider speaking with a counselor."
)

DIET_RESPONSE = (
    "While food allergies can trigger asthma in some people, maintaining a healthy diet "
    "supports overall respiratory health. Foods rich in omega-3 fatty acids, antioxidants, "
    "and vitamin D may be beneficial. If you suspect food triggers, keep a food diary and "
    "discuss with your healthcare provider."
)

DEFAULT_RESPONSE = (
    "Thank you for your question about asthma management. While I can provide general "
    "information, it's important to work closely with your healthcare provider for "
    "personalized advice. Is there a specific aspect of asthma management you'd like to "
    "know more about? I'm here to help with general guidance and support."
)


@dataclass(frozen=True)
class ResponseRule:
    """A keyword predicate paired with the reply it produces."""
    keywords: Tuple[str, ...]
    response: str

    def matches(self, lowered_message: str) -> bool:
        return any(keyword in lowered_message for keyword in self.keywords)


DEFAULT_RULES: Tuple[ResponseRule, ...] = (
    ResponseRule(("emergency", "can't breathe", "severe"), EMERGENCY_RESPONSE),
    ResponseRule(("inhaler", "medication"), MEDICATION_RESPONSE),
    ResponseRule(("trigger", "allergen"), TRIGGER_RESPONSE),
    ResponseRule(("exercise", "activity"), EXERCISE_RESPONSE),
    ResponseRule(("air quality", "pollution"), AIR_QUALITY_RESPONSE),
    ResponseRule(("stress", "anxiety"), STRESS_RESPONSE),
    ResponseRule(("diet", "food"), DIET_RESPONSE),
)


# =============================================================================
# RESPONDERS
# =============================================================================

class ChatResponder(ABC):
    """Anything that can answer a chat message."""

    @abstractmethod
    def respond(self, message: str, context: Optional[ChatContext] = None) -> str:
        """Return the assistant's reply to `message`."""


class MockChatResponder(ChatResponder):
    """
    Keyword-matched canned replies with a simulated service latency.

    Args:
        min_delay: Lower bound of the artificial delay in seconds
        max_delay: Upper bound of the artificial delay in seconds
        rules: Ordered rules, first match wins
        sleep: Sleep function (tests pass a no-op)
        rng: Random source for the delay
    """

    def __init__(
        self,
        min_delay: float = 1.0,
        max_delay: float = 3.0,
        rules: Sequence[ResponseRule] = DEFAULT_RULES,
        default_response: str = DEFAULT_RESPONSE,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError("delay bounds must satisfy 0 <= min_delay <= max_delay")
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.rules = tuple(rules)
        self.default_response = default_response
        self._sleep = sleep
        self._rng = rng or random.Random()

    def match(self, message: str) -> str:
        """Reply for a message, without the delay."""
        lowered = message.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule.response
        return self.default_response

    def respond(self, message: str, context: Optional[ChatContext] = None) -> str:
        delay = self._rng.uniform(self.min_delay, self.max_delay)
        if delay > 0:
            self._sleep(delay)

        reply = self.match(message)
        logger.debug(f"Mock reply after {delay:.2f}s ({len(context or [])} context turns ignored)")
        return reply
