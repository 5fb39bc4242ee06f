from __future__ import annotations

import asyncio

from sqlalchemy.orm import Session, joinedload, selectinload, sessionmaker

from clinic import models
from clinic.voice.context import BookingRecord, OrderLine, OrderRecord, ServiceOffering, UserProfile


def _profile(user: models.User) -> UserProfile:
    return UserProfile(
        id=int(user.id),
        full_name=user.full_name,
        email=user.email,
        phone=user.phone or None,
        location=user.location or None,
        member_type=user.member_type or "Regular Member",
        membership_expires_on=user.membership_expires_on,
    )


def _booking(row: models.Booking) -> BookingRecord:
    consultation = row.consultation
    branch = row.branch
    return BookingRecord(
        reference_number=row.reference_number,
        status=row.status,
        preferred_date=row.preferred_date,
        consultation_name=(consultation.name if consultation else None),
        consultation_category=(consultation.category if consultation else None),
        branch_name=(branch.name if branch else None),
        preferred_location=row.preferred_location,
        time_slots=tuple(str(slot) for slot in (row.preferred_time_slots or []) if slot),
        confirmed_date=row.confirmed_date,
        confirmed_time=row.confirmed_time,
        created_at=row.created_at,
    )


def _order(row: models.ProductOrder) -> OrderRecord:
    lines = tuple(
        OrderLine(
            product_name=(item.product.name if item.product else item.product_name),
            quantity=int(item.quantity or 0),
        )
        for item in row.items
    )
    return OrderRecord(
        order_number=row.order_number,
        status=row.order_status,
        items=lines,
        total_amount=float(row.total_amount or 0.0),
        created_at=row.created_at,
        delivered_at=row.delivered_at,
    )


class SqlContextStore:
    """
    Read-only store over the clinic database.

    Every fetch opens its own session in a worker thread, so the aggregator
    can run them side by side.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    async def fetch_profile(self, user_id: int) -> UserProfile | None:
        return await asyncio.to_thread(self._load_profile, user_id)

    async def fetch_bookings(self, user_id: int, limit: int) -> list[BookingRecord]:
        return await asyncio.to_thread(self._load_bookings, user_id, limit)

    async def fetch_orders(self, user_id: int, limit: int) -> list[OrderRecord]:
        return await asyncio.to_thread(self._load_orders, user_id, limit)

    async def fetch_active_services(self) -> list[ServiceOffering]:
        return await asyncio.to_thread(self._load_services)

    def _load_profile(self, user_id: int) -> UserProfile | None:
        db: Session = self._session_factory()
        try:
            user = db.query(models.User).filter(models.User.id == user_id).first()
            return _profile(user) if user else None
        finally:
            db.close()

    def _load_bookings(self, user_id: int, limit: int) -> list[BookingRecord]:
        db: Session = self._session_factory()
        try:
            rows = (
                db.query(models.Booking)
                .options(joinedload(models.Booking.consultation), joinedload(models.Booking.branch))
                .filter(models.Booking.user_id == user_id)
                .order_by(models.Booking.created_at.desc(), models.Booking.id.desc())
                .limit(limit)
                .all()
            )
            return [_booking(row) for row in rows]
        finally:
            db.close()

    def _load_orders(self, user_id: int, limit: int) -> list[OrderRecord]:
        db: Session = self._session_factory()
        try:
            rows = (
                db.query(models.ProductOrder)
                .options(selectinload(models.ProductOrder.items).joinedload(models.OrderItem.product))
                .filter(models.ProductOrder.user_id == user_id)
                .order_by(models.ProductOrder.created_at.desc(), models.ProductOrder.id.desc())
                .limit(limit)
                .all()
            )
            return [_order(row) for row in rows]
        finally:
            db.close()

    def _load_services(self) -> list[ServiceOffering]:
        db: Session = self._session_factory()
        try:
            rows = (
                db.query(models.Consultation)
                .filter(models.Consultation.is_active.is_(True))
                .order_by(models.Consultation.id.asc())
                .all()
            )
            return [
                ServiceOffering(
                    name=row.name,
                    category=row.category,
                    price=float(row.price or 0.0),
                    is_popular=bool(row.is_popular),
                )
                for row in rows
            ]
        finally:
            db.close()
