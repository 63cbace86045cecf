# FILE: services/pattern_matcher.py
"""
Regex fast path for trivial conversational turns.

Greetings, thanks, help requests and bare yes/no answers never reach the
language model. Matching is on the whole (trimmed) message, case-insensitive,
and tolerates trailing punctuation.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from core.intent import IntentName

# Checked in this order; first hit wins
SIMPLE_PATTERNS: Dict[IntentName, List[Pattern[str]]] = {
    IntentName.GREETING: [
        re.compile(r"^(hi|hello|hey|good morning|good afternoon|good evening)[!?.\s]*$", re.IGNORECASE),
    ],
    IntentName.THANKS: [
        re.compile(r"^(thanks|thank you|thx|ty)[!?.\s]*$", re.IGNORECASE),
    ],
    IntentName.HELP: [
        re.compile(r"^help[!?.\s]*$", re.IGNORECASE),
        re.compile(r"^what can you do", re.IGNORECASE),
        re.compile(r"^how can you help", re.IGNORECASE),
    ],
    IntentName.CONFIRM: [
        re.compile(r"^(yes|yeah|sure|okay|ok|confirm|yep|yup)[!?.\s]*$", re.IGNORECASE),
    ],
    IntentName.REJECT: [
        re.compile(r"^(no|nope|cancel|nevermind|never mind|nah)[!?.\s]*$", re.IGNORECASE),
    ],
}

SIMPLE_RESPONSES: Dict[IntentName, str] = {
    IntentName.GREETING: (
        "Hello! 👋 I'm your shopping assistant. I can help you with:\n\n"
        "• Viewing your orders\n"
        "• Managing your wishlist\n"
        "• Finding products\n"
        "• Checking your cart\n\n"
        "How can I help you today?"
    ),
    IntentName.THANKS: "You're welcome! Let me know if you need anything else. 😊",
    IntentName.HELP: (
        "I can help you with:\n\n"
        "📦 **Orders** - \"Show my orders\", \"Order status\"\n"
        "💝 **Wishlist** - \"View wishlist\", \"Add to wishlist\"\n"
        "🛍️ **Products** - \"Show products\", \"Find shirts\"\n"
        "🛒 **Cart** - \"What's in my cart?\"\n"
        "🎁 **Vouchers** - \"My gift cards\", \"Available coupons\"\n\n"
        "Just ask naturally!"
    ),
    # Used only when there is nothing pending to confirm or cancel
    IntentName.CONFIRM: "There's nothing waiting for your confirmation. What would you like to do?",
    IntentName.REJECT: "No problem. Is there anything else I can help you with?",
}


@dataclass(frozen=True)
class PatternMatch:
    intent: IntentName
    reply: str


def match_simple_intent(message: str) -> Optional[PatternMatch]:
    trimmed = (message or "").strip()
    if not trimmed:
        return None

    for intent, patterns in SIMPLE_PATTERNS.items():
        if any(p.search(trimmed) for p in patterns):
            return PatternMatch(intent=intent, reply=SIMPLE_RESPONSES[intent])
    return None
