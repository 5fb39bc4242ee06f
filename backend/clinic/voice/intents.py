from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable


class Intent(str, Enum):
    ORDER_STATUS = "ORDER_STATUS"
    UPCOMING_ORDERS = "UPCOMING_ORDERS"
    ORDER_INFO = "ORDER_INFO"
    UPCOMING_BOOKINGS = "UPCOMING_BOOKINGS"
    BOOKING_HISTORY = "BOOKING_HISTORY"
    BOOKING_INFO = "BOOKING_INFO"
    SERVICES_INFO = "SERVICES_INFO"
    ACCOUNT_INFO = "ACCOUNT_INFO"
    HELP = "HELP"
    GENERAL = "GENERAL"


_SHIPMENT = r"(order|orders|package|packages|parcel|parcels|delivery|deliveries|shipment|shipments)"
_VISIT = r"(appointment|appointments|booking|bookings|consultation|consultations|session|sessions|visit|visits)"

# Guard vocabularies for the two catch-all rules.
_ORDERISH = re.compile(r"\b(order|orders|ordered|product|products|service|services|treatment|treatments)\b")
_BOOKINGISH = re.compile(r"\b(appointment|appointments|booking|bookings|booked|service|services)\b")


def _compile(patterns: list[str]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


@dataclass(frozen=True)
class IntentRule:
    """
    One step of the classification chain.

    The rule claims an utterance when any pattern matches and the optional
    guard also accepts it.
    """

    intent: Intent
    patterns: tuple[re.Pattern[str], ...]
    guard: Callable[[str], bool] | None = None

    def matches(self, text: str) -> bool:
        if not any(p.search(text) for p in self.patterns):
            return False
        return self.guard is None or self.guard(text)


def _no_order_or_service_token(text: str) -> bool:
    return _ORDERISH.search(text) is None


def _no_booking_or_service_token(text: str) -> bool:
    return _BOOKINGISH.search(text) is None


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        Intent.ORDER_STATUS,
        _compile(
            [
                rf"\bwhere(?:'s| is| are)\b.*\b{_SHIPMENT}\b",
                rf"\btrack(?:ing)?\b.*\b{_SHIPMENT}\b",
                rf"\b{_SHIPMENT}\b.*\btrack(?:ing)?\b",
                rf"\bwhen\b.*\b{_SHIPMENT}\b.*\b(arrive|arriving|come|coming|reach|get here|be delivered|deliver)\b",
                rf"\b{_SHIPMENT}\s+(eta|status|update)\b",
                rf"\beta\b.*\b{_SHIPMENT}\b",
                rf"\bstatus of (?:my |the )?(?:latest |last |recent )?{_SHIPMENT}\b",
                r"\bhas my (order|package|parcel|shipment) (shipped|been shipped|been dispatched|arrived|been delivered)\b",
                rf"\b{_SHIPMENT}\b.*\b(out for delivery|shipped|dispatched|on (?:its|the) way)\b",
                rf"\bis my {_SHIPMENT}\b",
            ]
        ),
    ),
    IntentRule(
        Intent.UPCOMING_BOOKINGS,
        _compile(
            [
                rf"\b(next|upcoming|future|scheduled|coming)\b.*\b{_VISIT}\b",
                rf"\b{_VISIT}\b.*\b(coming up|upcoming|scheduled|next)\b",
                rf"\bwhen is my\b.*\b{_VISIT}\b",
                rf"\bdo i have (?:an |any )?{_VISIT}\b",
            ]
        ),
    ),
    IntentRule(
        Intent.BOOKING_HISTORY,
        _compile(
            [
                rf"\b(past|previous|completed|old|earlier|last)\b.*\b{_VISIT}\b",
                rf"\b{_VISIT}\b.*\b(history|before|so far|completed|done)\b",
                rf"\bhistory of\b.*\b{_VISIT}\b",
                rf"\bhow many {_VISIT}\b",
            ]
        ),
    ),
    IntentRule(
        Intent.BOOKING_INFO,
        _compile([r"\b(appointment|appointments|booking|bookings|booked|book|consultation|consultations)\b"]),
        guard=_no_order_or_service_token,
    ),
    IntentRule(
        Intent.UPCOMING_ORDERS,
        _compile(
            [
                r"\b(pending|active|current|open|ongoing|undelivered|upcoming|outstanding)\b.*\b(order|orders|purchase|purchases|package|packages|deliveries)\b",
                r"\b(order|orders|purchase|purchases)\b.*\b(pending|in progress|on the way|not (?:yet )?delivered)\b",
            ]
        ),
    ),
    IntentRule(
        Intent.ORDER_INFO,
        _compile(
            [
                r"\b(order|orders|ordered|purchase|purchases|purchased|bought|delivery|deliveries|shipping|shopping)\b",
            ]
        ),
        guard=_no_booking_or_service_token,
    ),
    IntentRule(
        Intent.SERVICES_INFO,
        _compile(
            [
                r"\b(service|services|treatment|treatments|therapy|therapies|procedure|procedures)\b",
                r"\b(facial|facials|hair|skin|laser|peel|botox|fillers?)\b",
                r"\bwhat (?:do|does) (?:you|the clinic) (offer|provide|have)\b",
                r"\b(offerings?|categories|category|popular|bestsellers?)\b",
                r"\b(price|prices|pricing|cost|costs|how much|price range|cheapest|most expensive)\b",
            ]
        ),
    ),
    IntentRule(
        Intent.ACCOUNT_INFO,
        _compile(
            [
                r"\b(account|profile|membership|member|tier)\b",
                r"\bmy (details|name|email|phone|number|contact|information|info)\b",
                r"\b(personal|contact) (details|information|info)\b",
                r"\b(registered|email address|phone number)\b",
            ]
        ),
    ),
    IntentRule(
        Intent.HELP,
        _compile(
            [
                r"^(hi|hello|hey|hiya|namaste|good (?:morning|afternoon|evening))( there)?[\s!.,]*$",
                r"\bhelp\b",
                r"\bwhat can (?:you|i) (do|ask)\b",
                r"\bwhat (?:are|do) you (?:able to )?do\b",
                r"\bhow (?:do|can) (?:i|you) (use|work)\b",
                r"\b(who|what) are you\b",
                r"\byour (capabilities|features)\b",
            ]
        ),
    ),
)


def normalize(utterance: str) -> str:
    return " ".join((utterance or "").replace("\u2019", "'").lower().split())


def classify(utterance: str) -> Intent:
    """
    Map a raw utterance to exactly one intent.

    Rules are tried strictly in `INTENT_RULES` order and the first one that
    claims the text wins; anything unclaimed is GENERAL.
    """
    text = normalize(utterance)
    if not text:
        return Intent.GENERAL
    for rule in INTENT_RULES:
        if rule.matches(text):
            return rule.intent
    return Intent.GENERAL
