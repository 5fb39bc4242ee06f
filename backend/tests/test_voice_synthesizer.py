import sys
from datetime import date, datetime, timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))

from clinic.voice.context import (
    BookingRecord,
    ContextBundle,
    OrderLine,
    OrderRecord,
    ServiceOffering,
    UserProfile,
)
from clinic.voice.intents import Intent
from clinic.voice.synthesizer import GREETING_OPENERS, NO_ACCOUNT, ResponseSynthesizer

NOW = datetime(2026, 10, 19, 9, 0)


def _first(options):
    return options[0]


def make_synthesizer() -> ResponseSynthesizer:
    return ResponseSynthesizer(assistant_name="Zen", currency_symbol="₹", choose=_first)


def order(number: str, status: str, quantities=(1,), **kwargs) -> OrderRecord:
    return OrderRecord(
        order_number=number,
        status=status,
        items=tuple(OrderLine(product_name=f"Product {i}", quantity=q) for i, q in enumerate(quantities, start=1)),
        **kwargs,
    )


def booking(ref: str, status: str, when: datetime, **kwargs) -> BookingRecord:
    kwargs.setdefault("consultation_name", "HydraFacial")
    kwargs.setdefault("branch_name", "Jubilee Hills")
    return BookingRecord(reference_number=ref, status=status, preferred_date=when, **kwargs)


def profile(**kwargs) -> UserProfile:
    kwargs.setdefault("id", 1)
    kwargs.setdefault("full_name", "Priya Sharma")
    kwargs.setdefault("email", "priya@example.com")
    return UserProfile(**kwargs)


def test_empty_context_invites_first_order_and_booking():
    synth = make_synthesizer()
    bundle = ContextBundle(now=NOW)

    order_text = synth.synthesize(Intent.ORDER_STATUS, "where is my order", bundle)
    booking_text = synth.synthesize(Intent.UPCOMING_BOOKINGS, "when is my next appointment", bundle)

    assert "haven't placed any orders" in order_text
    assert "no upcoming appointments" in booking_text


def test_order_status_without_active_orders_reports_latest_terminal_status():
    synth = make_synthesizer()
    bundle = ContextBundle(now=NOW, orders=(order("ORD009", "Delivered"), order("ORD008", "Cancelled")))

    text = synth.synthesize(Intent.ORDER_STATUS, "where is my order", bundle)

    assert text.startswith("Sorry")
    assert "ORD009" in text
    assert "was delivered" in text


def test_order_status_branches_on_lead_order_status():
    synth = make_synthesizer()
    expected = {
        "Processing": "being processed",
        "Packed": "has been packed",
        "Shipped": "has been shipped",
        "Out for Delivery": "out for delivery",
        "Order Placed": "marked as Order Placed",
    }
    for status, phrase in expected.items():
        bundle = ContextBundle(now=NOW, orders=(order("ORD100", status, (1,)),))
        text = synth.synthesize(Intent.ORDER_STATUS, "track my order", bundle)
        assert phrase in text, status


def test_order_status_plural_agreement():
    synth = make_synthesizer()
    one = ContextBundle(now=NOW, orders=(order("ORD001", "Shipped", (1,)),))
    two = ContextBundle(
        now=NOW,
        orders=(order("ORD002", "Packed", (2, 1)), order("ORD001", "Shipped", (1,))),
    )

    single = synth.synthesize(Intent.ORDER_STATUS, "where is my order", one)
    multiple = synth.synthesize(Intent.ORDER_STATUS, "where is my order", two)

    assert "You have 1 active order," in single
    assert "1 item." in single
    assert "other one" not in single
    assert "You have 2 active orders." in multiple
    assert "3 items" in multiple
    assert "ORD002" in multiple
    assert "the other one" in multiple


def test_order_status_offers_the_rest_with_plural_pronoun():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        orders=(order("ORD003", "Shipped"), order("ORD002", "Packed"), order("ORD001", "Processing")),
    )

    text = synth.synthesize(Intent.ORDER_STATUS, "where is my order", bundle)

    assert "the other 2 of them" in text


def test_order_status_delivered_keyword():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        orders=(
            order("ORD002", "Shipped"),
            order("ORD001", "Delivered", delivered_at=datetime(2026, 10, 14, 18, 0)),
        ),
    )

    text = synth.synthesize(Intent.ORDER_STATUS, "was my order delivered?", bundle)

    assert text == "Your order ORD001 was delivered on Wednesday, 14 October."


def test_arrival_question_describes_active_order_not_past_delivery():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        orders=(
            order("ORD002", "Shipped", (1, 1)),
            order("ORD001", "Delivered", delivered_at=datetime(2026, 10, 1, 18, 0)),
        ),
    )

    arriving = synth.synthesize(Intent.ORDER_STATUS, "When will my order be delivered?", bundle)
    delivered = synth.synthesize(Intent.ORDER_STATUS, "show my delivered orders", bundle)

    assert "ORD002" in arriving
    assert "has been shipped" in arriving
    assert "ORD001" not in arriving
    assert delivered == "Your order ORD001 was delivered on Thursday, 1 October."


def test_upcoming_orders_lists_at_most_three():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        orders=tuple(order(f"ORD00{i}", "Processing") for i in range(1, 5)),
    )

    text = synth.synthesize(Intent.UPCOMING_ORDERS, "pending orders", bundle)

    assert text.startswith("You have 4 upcoming orders.")
    assert "ORD004" not in text
    assert "There is 1 more order after that." in text


def test_order_info_variants():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        orders=(
            order("ORD002", "Delivered", (2,), total_amount=1500.0, created_at=datetime(2026, 10, 1, 12, 0)),
            order("ORD001", "Delivered", (1,), total_amount=499.0, created_at=datetime(2026, 9, 1, 12, 0)),
        ),
    )

    default = synth.synthesize(Intent.ORDER_INFO, "tell me about my orders", bundle)
    spent = synth.synthesize(Intent.ORDER_INFO, "how much have I spent on orders", bundle)
    counts = synth.synthesize(Intent.ORDER_INFO, "how many orders have I placed", bundle)

    assert "placed on 1 October 2026" in default
    assert "It includes Product 1." in default
    assert spent == "You've spent ₹1,999 across your 2 recent orders."
    assert counts == "You have placed 2 orders recently, with 3 items altogether."


def test_upcoming_booking_tomorrow_mentions_day_and_reference():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        bookings=(
            booking(
                "ZEN202610204821",
                "Awaiting Confirmation",
                datetime(2026, 10, 20, 0, 0),
                time_slots=("10:00 AM", "11:30 AM"),
            ),
        ),
    )

    text = synth.synthesize(Intent.UPCOMING_BOOKINGS, "when is my next appointment", bundle)

    assert "tomorrow" in text
    assert "that's Tuesday, 20 October" in text
    assert "ZEN202610204821" in text
    assert "HydraFacial at Jubilee Hills branch" in text
    assert "10:00 AM or 11:30 AM slot" in text
    assert "confirm your exact time slot" in text
    assert "in total" not in text


def test_upcoming_bookings_confirmed_with_more_to_list():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        bookings=(
            booking("ZEN2", "Confirmed", NOW + timedelta(days=3), confirmed_time="4:00 PM"),
            booking("ZEN3", "Rescheduled", NOW + timedelta(days=30)),
            booking("ZEN4", "Awaiting Confirmation", NOW + timedelta(days=12)),
        ),
    )

    text = synth.synthesize(Intent.UPCOMING_BOOKINGS, "upcoming appointments", bundle)

    assert "in 3 days" in text
    assert "at 4:00 PM" in text
    assert "Your booking is confirmed." in text
    assert "ZEN2" in text
    assert "You have 3 upcoming appointments in total." in text
    assert "the other 2 of them" in text


def test_upcoming_booking_far_away_has_no_qualifier():
    synth = make_synthesizer()
    bundle = ContextBundle(now=NOW, bookings=(booking("ZEN5", "Confirmed", datetime(2026, 11, 20, 11, 0)),))

    text = synth.synthesize(Intent.UPCOMING_BOOKINGS, "next appointment", bundle)

    assert text.startswith("Your next appointment is on Friday, 20 November.")


def test_booking_history_counts():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        bookings=(
            booking("ZEN3", "Completed", datetime(2026, 10, 10, 10, 0), consultation_name="Laser Hair Reduction"),
            booking("ZEN2", "Cancelled", datetime(2026, 9, 10, 10, 0)),
            booking("ZEN1", "Completed", datetime(2026, 8, 10, 10, 0)),
        ),
    )

    text = synth.synthesize(Intent.BOOKING_HISTORY, "my past appointments", bundle)

    assert text == (
        "You have 3 bookings in total: 2 completed and 1 cancelled. "
        "Your most recent booking is for Laser Hair Reduction on 10 October 2026."
    )


def test_booking_history_empty_invites_first_booking():
    text = make_synthesizer().synthesize(Intent.BOOKING_HISTORY, "past bookings", ContextBundle(now=NOW))
    assert "haven't made any bookings" in text


def test_booking_info_default_and_reschedule():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        bookings=(
            booking("ZEN7", "Confirmed", NOW + timedelta(days=2)),
            booking("ZEN6", "Completed", NOW - timedelta(days=20)),
        ),
    )

    default = synth.synthesize(Intent.BOOKING_INFO, "tell me about my booking", bundle)
    change = synth.synthesize(Intent.BOOKING_INFO, "I need to reschedule my appointment", bundle)

    assert default == "You have 2 bookings in total. 1 upcoming appointment is scheduled."
    assert "To cancel or reschedule" in change
    assert "ZEN7" in change


def test_services_overview_and_price_range():
    synth = make_synthesizer()
    bundle = ContextBundle(
        now=NOW,
        services=(
            ServiceOffering("HydraFacial", "Skin", 4000.0, is_popular=True),
            ServiceOffering("Chemical Peel", "Skin", 2500.0),
            ServiceOffering("PRP Therapy", "Hair", 6000.0, is_popular=True),
            ServiceOffering("Laser Toning", "Laser", 3500.0),
        ),
    )

    overview = synth.synthesize(Intent.SERVICES_INFO, "what services do you offer", bundle)
    prices = synth.synthesize(Intent.SERVICES_INFO, "what is the price range", bundle)
    popular = synth.synthesize(Intent.SERVICES_INFO, "which treatments are popular", bundle)

    assert "4 consultation services across 3 categories, including Skin, Hair and Laser." in overview
    assert "Popular choices include HydraFacial and PRP Therapy." in overview
    assert "from ₹2,500 to ₹6,000" in prices
    assert "average of ₹4,000" in prices
    assert "The most affordable is Chemical Peel." in prices
    assert popular == "Our most popular treatments are HydraFacial and PRP Therapy."


def test_services_empty_catalog_apologizes():
    text = make_synthesizer().synthesize(Intent.SERVICES_INFO, "what services", ContextBundle(now=NOW))
    assert text.startswith("Sorry")


def test_account_info_premium_and_standard():
    synth = make_synthesizer()
    premium = ContextBundle(
        now=NOW,
        profile=profile(member_type="Zen Member", phone="9876543210", membership_expires_on=date(2027, 3, 31)),
    )
    standard = ContextBundle(now=NOW, profile=profile())

    premium_text = synth.synthesize(Intent.ACCOUNT_INFO, "tell me about my account", premium)
    standard_text = synth.synthesize(Intent.ACCOUNT_INFO, "tell me about my account", standard)

    assert "premium membership benefits until 31 March 2027" in premium_text
    assert "phone number is 9876543210" in premium_text
    assert "Regular Member" in standard_text
    assert "priya@example.com" in standard_text
    assert "phone number" not in standard_text


def test_account_info_without_profile():
    text = make_synthesizer().synthesize(Intent.ACCOUNT_INFO, "my profile", ContextBundle(now=NOW))
    assert text == NO_ACCOUNT


def test_general_uses_injected_choice():
    picked = []

    def choose(options):
        picked.append(tuple(options))
        return options[-1]

    synth = ResponseSynthesizer(choose=choose)
    text = synth.synthesize(Intent.GENERAL, "tell me a joke", ContextBundle(now=NOW, profile=profile()))

    assert picked == [GREETING_OPENERS]
    assert text.startswith("Welcome back Priya Sharma!")
    assert "orders, bookings, our services" in text


def test_help_is_fixed_text():
    synth = make_synthesizer()
    first = synth.synthesize(Intent.HELP, "help", ContextBundle(now=NOW))
    second = synth.synthesize(Intent.HELP, "what can you do", ContextBundle(now=NOW, profile=profile()))
    assert first == second
    assert first.startswith("I'm Zen")
