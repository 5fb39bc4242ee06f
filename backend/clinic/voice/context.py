from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Protocol


_logger = logging.getLogger(__name__)

UPCOMING_BOOKING_STATUSES = frozenset({"Awaiting Confirmation", "Confirmed", "Rescheduled"})
TERMINAL_ORDER_STATUSES = frozenset({"Delivered", "Cancelled", "Returned"})

SLICES = ("profile", "bookings", "orders", "services")


@dataclass(frozen=True)
class UserProfile:
    id: int
    full_name: str
    email: str
    phone: str | None = None
    location: str | None = None
    member_type: str = "Regular Member"
    membership_expires_on: date | None = None


@dataclass(frozen=True)
class BookingRecord:
    reference_number: str
    status: str
    preferred_date: datetime
    consultation_name: str | None = None
    consultation_category: str | None = None
    branch_name: str | None = None
    preferred_location: str | None = None
    time_slots: tuple[str, ...] = ()
    confirmed_date: datetime | None = None
    confirmed_time: str | None = None
    created_at: datetime | None = None

    @property
    def scheduled_at(self) -> datetime:
        return self.confirmed_date or self.preferred_date

    @property
    def treatment_name(self) -> str:
        return self.consultation_name or "Consultation"

    @property
    def location_name(self) -> str:
        return self.branch_name or self.preferred_location or "our"


@dataclass(frozen=True)
class OrderLine:
    product_name: str | None
    quantity: int


@dataclass(frozen=True)
class OrderRecord:
    order_number: str
    status: str
    items: tuple[OrderLine, ...] = ()
    total_amount: float = 0.0
    created_at: datetime | None = None
    delivered_at: datetime | None = None

    @property
    def item_count(self) -> int:
        return sum(int(line.quantity or 0) for line in self.items)


@dataclass(frozen=True)
class ServiceOffering:
    name: str
    category: str
    price: float
    is_popular: bool = False


@dataclass(frozen=True)
class ContextBundle:
    """
    Read-only, per-request snapshot of one user's data.

    `upcoming_bookings` and `active_orders` are derived once, against `now`,
    when the bundle is built; they are never recomputed on access.
    """

    now: datetime
    profile: UserProfile | None = None
    bookings: tuple[BookingRecord, ...] = ()
    orders: tuple[OrderRecord, ...] = ()
    services: tuple[ServiceOffering, ...] = ()
    failed_slices: frozenset[str] = frozenset()
    upcoming_bookings: tuple[BookingRecord, ...] = field(init=False, default=())
    active_orders: tuple[OrderRecord, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        upcoming = sorted(
            (
                b
                for b in self.bookings
                if b.scheduled_at > self.now and b.status in UPCOMING_BOOKING_STATUSES
            ),
            key=lambda b: b.scheduled_at,
        )
        active = [o for o in self.orders if o.status not in TERMINAL_ORDER_STATUSES]
        object.__setattr__(self, "upcoming_bookings", tuple(upcoming))
        object.__setattr__(self, "active_orders", tuple(active))

    @property
    def all_failed(self) -> bool:
        return set(SLICES) <= set(self.failed_slices)


class ContextStore(Protocol):
    async def fetch_profile(self, user_id: int) -> UserProfile | None: ...

    async def fetch_bookings(self, user_id: int, limit: int) -> list[BookingRecord]: ...

    async def fetch_orders(self, user_id: int, limit: int) -> list[OrderRecord]: ...

    async def fetch_active_services(self) -> list[ServiceOffering]: ...


class ContextAggregator:
    def __init__(
        self,
        store: ContextStore,
        *,
        bookings_limit: int = 10,
        orders_limit: int = 10,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._store = store
        self._bookings_limit = bookings_limit
        self._orders_limit = orders_limit
        self._clock = clock

    async def aggregate(self, user_id: int) -> ContextBundle:
        now = self._clock()
        fetches: list[Awaitable[Any]] = [
            self._store.fetch_profile(user_id),
            self._store.fetch_bookings(user_id, self._bookings_limit),
            self._store.fetch_orders(user_id, self._orders_limit),
            self._store.fetch_active_services(),
        ]
        results = await asyncio.gather(*fetches, return_exceptions=True)

        failed: set[str] = set()
        values: dict[str, Any] = {}
        for name, result in zip(SLICES, results):
            if isinstance(result, Exception):
                _logger.warning("context slice failed slice=%s user_id=%s error=%r", name, user_id, result)
                failed.add(name)
                values[name] = None
            elif isinstance(result, BaseException):
                raise result
            else:
                values[name] = result

        bundle = ContextBundle(
            now=now,
            profile=values["profile"],
            bookings=tuple(values["bookings"] or ()),
            orders=tuple(values["orders"] or ()),
            services=tuple(values["services"] or ()),
            failed_slices=frozenset(failed),
        )
        if bundle.all_failed:
            _logger.error("context aggregation failed for every slice user_id=%s", user_id)
        return bundle
