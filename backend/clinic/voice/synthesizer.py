from __future__ import annotations

import random
import re
from typing import Callable, Sequence

from clinic.utils.phrasing import counted, join_words, long_date, long_day, money, plural
from clinic.voice.context import BookingRecord, ContextBundle, OrderRecord
from clinic.voice.intents import Intent


NO_ORDERS = "You haven't placed any orders yet. Browse our product catalog to get started!"
NO_UPCOMING_BOOKINGS = "You have no upcoming appointments scheduled. Would you like to book a consultation?"
NO_BOOKINGS = "You haven't made any bookings yet. Book your first consultation with us today!"
NO_SERVICES = (
    "Sorry, we're updating our services right now. Please check back soon, "
    "or ask me about your bookings and orders in the meantime."
)
NO_ACCOUNT = "Sorry, I could not find your account details. Please sign in again and retry."

PREMIUM_TIER = "Zen Member"

GREETING_OPENERS = (
    "Hello{name}!",
    "Hi{name}!",
    "Hey{name}, good to hear from you!",
    "Welcome back{name}!",
)

_ORDER_PROGRESS = {
    "processing": "is being processed and will be packed soon",
    "packed": "has been packed and is ready to ship",
    "shipped": "has been shipped and is on its way to you",
    "out for delivery": "is out for delivery and should reach you today",
}


_PAST_DELIVERY = re.compile(r"\b(was|were|been|got|get|have|has)\b.*\bdelivered\b|\bdelivered (order|orders|ones|items)\b")
_FUTURE_DELIVERY = re.compile(r"\b(when|will|be delivered)\b")


def _mentions(text: str, *words: str) -> bool:
    return any(re.search(rf"\b{re.escape(w)}", text) for w in words)


def _asks_about_past_delivery(text: str) -> bool:
    return _PAST_DELIVERY.search(text) is not None and _FUTURE_DELIVERY.search(text) is None


def _order_progress(order: OrderRecord) -> str:
    phrase = _ORDER_PROGRESS.get((order.status or "").strip().lower())
    return phrase or f"is currently marked as {order.status}"


def _day_qualifier(booking: BookingRecord, bundle: ContextBundle) -> str | None:
    days = (booking.scheduled_at.date() - bundle.now.date()).days
    if days <= 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days <= 7:
        return f"in {days} days"
    return None


def _the_rest(count: int) -> str:
    return "the other one" if count == 1 else f"the other {count} of them"


class ResponseSynthesizer:
    """
    Turns (intent, utterance, context) into the sentence the assistant speaks.

    The intent picks a template family and a keyword scan over the raw
    utterance picks the variant inside it. Output depends only on the inputs,
    except for the GENERAL opener which goes through `choose`.
    """

    def __init__(
        self,
        *,
        assistant_name: str = "Zen",
        currency_symbol: str = "₹",
        choose: Callable[[Sequence[str]], str] = random.choice,
    ) -> None:
        self.assistant_name = assistant_name
        self.currency_symbol = currency_symbol
        self._choose = choose
        self._families: dict[Intent, Callable[[str, ContextBundle], str]] = {
            Intent.ORDER_STATUS: self._order_status,
            Intent.UPCOMING_ORDERS: self._upcoming_orders,
            Intent.ORDER_INFO: self._order_info,
            Intent.UPCOMING_BOOKINGS: self._upcoming_bookings,
            Intent.BOOKING_HISTORY: self._booking_history,
            Intent.BOOKING_INFO: self._booking_info,
            Intent.SERVICES_INFO: self._services_info,
            Intent.ACCOUNT_INFO: self._account_info,
            Intent.HELP: self._help,
            Intent.GENERAL: self._general,
        }

    def synthesize(self, intent: Intent, utterance: str, bundle: ContextBundle) -> str:
        family = self._families.get(intent, self._general)
        return family((utterance or "").lower(), bundle)

    # Orders

    def _order_status(self, text: str, bundle: ContextBundle) -> str:
        if not bundle.orders:
            return NO_ORDERS
        if _asks_about_past_delivery(text):
            return self._delivered_orders(bundle)
        if _mentions(text, "recent", "last", "latest"):
            latest = bundle.orders[0]
            return (
                f"Your most recent order, {latest.order_number}, with {counted(latest.item_count, 'item')}, "
                f"is currently {latest.status}."
            )

        active = bundle.active_orders
        if not active:
            latest = bundle.orders[0]
            return (
                "Sorry, you don't have any active orders right now. "
                f"Your most recent order, {latest.order_number}, was {latest.status.lower()}."
            )

        lead = active[0]
        items = counted(lead.item_count, "item")
        if len(active) == 1:
            return (
                f"You have 1 active order, {lead.order_number}. It {_order_progress(lead)}. "
                f"It contains {items}."
            )
        return (
            f"You have {counted(len(active), 'active order')}. Your most recent one, {lead.order_number}, "
            f"{_order_progress(lead)}. It contains {items}. "
            f"Would you like me to go through {_the_rest(len(active) - 1)}?"
        )

    def _delivered_orders(self, bundle: ContextBundle) -> str:
        delivered = [o for o in bundle.orders if o.status == "Delivered"]
        if not delivered:
            text = "None of your recent orders have been delivered yet."
            if bundle.active_orders:
                count = len(bundle.active_orders)
                text += f" {counted(count, 'order')} {'is' if count == 1 else 'are'} still on the way."
            return text
        latest = delivered[0]
        when = f" on {long_day(latest.delivered_at)}" if latest.delivered_at else ""
        text = f"Your order {latest.order_number} was delivered{when}."
        if len(delivered) > 1:
            text += f" In total, {len(delivered)} of your recent orders have been delivered."
        return text

    def _upcoming_orders(self, text: str, bundle: ContextBundle) -> str:
        active = bundle.active_orders
        if not active:
            return "You don't have any upcoming orders at the moment."
        listed = ". ".join(f"Order {o.order_number} is {o.status}" for o in active[:3])
        extra = len(active) - 3
        more = f" There {'is' if extra == 1 else 'are'} {counted(extra, 'more order')} after that." if extra > 0 else ""
        return f"You have {counted(len(active), 'upcoming order')}. {listed}.{more}"

    def _order_info(self, text: str, bundle: ContextBundle) -> str:
        orders = bundle.orders
        if not orders:
            return "You haven't placed any orders yet. Check out our products and place your first order!"
        if _mentions(text, "spent", "spend", "spending"):
            total = sum(o.total_amount for o in orders)
            return (
                f"You've spent {money(total, self.currency_symbol)} across your "
                f"{counted(len(orders), 'recent order')}."
            )
        if _mentions(text, "how many", "total", "count"):
            units = sum(o.item_count for o in orders)
            return f"You have placed {counted(len(orders), 'order')} recently, with {counted(units, 'item')} altogether."

        latest = orders[0]
        placed = f" was placed on {long_date(latest.created_at)} and" if latest.created_at else ""
        text_out = (
            f"You have placed {counted(len(orders), 'order')}. Your most recent order, {latest.order_number},"
            f"{placed} has {counted(latest.item_count, 'item')}."
        )
        names = [line.product_name for line in latest.items if line.product_name]
        if names:
            text_out += f" It includes {join_words(names[:3])}."
        return text_out

    # Bookings

    def _upcoming_bookings(self, text: str, bundle: ContextBundle) -> str:
        upcoming = bundle.upcoming_bookings
        if not upcoming:
            return NO_UPCOMING_BOOKINGS

        booking = upcoming[0]
        qualifier = _day_qualifier(booking, bundle)
        day = long_day(booking.scheduled_at)
        if qualifier:
            parts = [f"Your next appointment is {qualifier}, that's {day}."]
        else:
            parts = [f"Your next appointment is on {day}."]

        visit = f"It's {booking.treatment_name} at {booking.location_name} branch"
        if booking.status == "Confirmed" and booking.confirmed_time:
            visit += f" at {booking.confirmed_time}"
        elif booking.time_slots:
            visit += f" in the {join_words(booking.time_slots, 'or')} slot"
        parts.append(visit + ".")

        if booking.status == "Confirmed":
            parts.append("Your booking is confirmed.")
        else:
            parts.append("We'll confirm your exact time slot shortly.")
        parts.append(f"Your reference number is {booking.reference_number}.")

        if len(upcoming) > 1:
            parts.append(
                f"You have {counted(len(upcoming), 'upcoming appointment')} in total. "
                f"Would you like me to list {_the_rest(len(upcoming) - 1)}?"
            )
        return " ".join(parts)

    def _booking_history(self, text: str, bundle: ContextBundle) -> str:
        bookings = bundle.bookings
        if not bookings:
            return NO_BOOKINGS
        completed = sum(1 for b in bookings if b.status == "Completed")
        cancelled = sum(1 for b in bookings if b.status == "Cancelled")
        latest = bookings[0]
        return (
            f"You have {counted(len(bookings), 'booking')} in total: {completed} completed and {cancelled} cancelled. "
            f"Your most recent booking is for {latest.treatment_name} on {long_date(latest.scheduled_at)}."
        )

    def _booking_info(self, text: str, bundle: ContextBundle) -> str:
        bookings = bundle.bookings
        if not bookings:
            return "You don't have any bookings yet. Let me know if you'd like to schedule a consultation!"

        upcoming = bundle.upcoming_bookings
        if _mentions(text, "cancel", "reschedul", "change", "move"):
            if not upcoming:
                return "You don't have any upcoming appointments to change right now."
            booking = upcoming[0]
            return (
                f"To cancel or reschedule your {booking.treatment_name} appointment on {long_day(booking.scheduled_at)}, "
                f"open it under My Bookings in the app or call the {booking.location_name} branch "
                f"with reference number {booking.reference_number}."
            )

        text_out = f"You have {counted(len(bookings), 'booking')} in total."
        if upcoming:
            count = len(upcoming)
            text_out += f" {counted(count, 'upcoming appointment')} {'is' if count == 1 else 'are'} scheduled."
        else:
            text_out += " No upcoming appointments at the moment."
        return text_out

    # Catalog

    def _services_info(self, text: str, bundle: ContextBundle) -> str:
        services = bundle.services
        if not services:
            return NO_SERVICES

        categories = list(dict.fromkeys(s.category for s in services if s.category))
        popular = [s.name for s in services if s.is_popular]

        if _mentions(text, "price", "pricing", "cost", "how much", "cheap", "expensive", "afford", "range"):
            prices = [s.price for s in services]
            cheapest = min(services, key=lambda s: s.price)
            average = sum(prices) / len(prices)
            return (
                f"Our {plural(len(services), 'treatment')} range from {money(min(prices), self.currency_symbol)} "
                f"to {money(max(prices), self.currency_symbol)}, with an average of "
                f"{money(average, self.currency_symbol)} across {counted(len(services), 'service')}. "
                f"The most affordable is {cheapest.name}."
            )
        if _mentions(text, "popular", "best", "recommend", "top"):
            if not popular:
                return (
                    f"None of our services are marked as popular right now, but we offer "
                    f"{counted(len(services), 'service')} across {counted(len(categories), 'category', 'categories')}."
                )
            top = popular[:3]
            return f"Our most popular {plural(len(top), 'treatment')} {'is' if len(top) == 1 else 'are'} {join_words(top)}."
        if _mentions(text, "categor", "kinds", "types"):
            return f"We offer services in {counted(len(categories), 'category', 'categories')}: {join_words(categories)}."

        text_out = (
            f"We offer {counted(len(services), 'consultation service')} across "
            f"{counted(len(categories), 'category', 'categories')}, including {join_words(categories[:3])}."
        )
        if popular:
            text_out += f" Popular choices include {join_words(popular[:3])}."
        return text_out + " Would you like to know more about any specific service?"

    # Account

    def _account_info(self, text: str, bundle: ContextBundle) -> str:
        profile = bundle.profile
        if profile is None or not (profile.full_name or "").strip():
            return NO_ACCOUNT

        if profile.member_type == PREMIUM_TIER:
            tier = f"You're a {PREMIUM_TIER}, so you enjoy our premium membership benefits"
            if profile.membership_expires_on:
                tier += f" until {long_date(profile.membership_expires_on)}"
            tier += "."
        else:
            tier = f"You're a {profile.member_type or 'Regular Member'}. Ask us about Zen membership for exclusive benefits."

        contact = f"Your registered email is {profile.email}"
        if profile.phone:
            contact += f" and your phone number is {profile.phone}"
        contact += "."

        if _mentions(text, "email", "phone", "contact", "number"):
            return contact
        if _mentions(text, "member", "tier", "plan"):
            return tier
        return f"Hello {profile.full_name}! {tier} {contact} How can I help you today?"

    # Fallbacks

    def _help(self, text: str, bundle: ContextBundle) -> str:
        return (
            f"I'm {self.assistant_name}, your clinic assistant! I can track your orders, "
            "tell you about your upcoming appointments and booking history, share our treatments and prices, "
            "and read out your account details. What would you like to know?"
        )

    def _general(self, text: str, bundle: ContextBundle) -> str:
        name = f" {bundle.profile.full_name}" if bundle.profile and bundle.profile.full_name else ""
        opener = self._choose(GREETING_OPENERS).format(name=name)
        return (
            f"{opener} I'm here to help with your clinic account. "
            "You can ask me about your orders, bookings, our services, or your account details. "
            "What would you like to know?"
        )
