from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from clinic.db import Base


class User(Base):
    """
    A clinic patient. Members are either on the premium "Zen Member" tier
    or the default "Regular Member" tier.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    member_type = Column(String, default="Regular Member", nullable=False)
    membership_expires_on = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    bookings = relationship("Booking", back_populates="user")
    orders = relationship("ProductOrder", back_populates="user")


class Branch(Base):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    address = Column(Text, nullable=True)

    bookings = relationship("Booking", back_populates="branch")


class Consultation(Base):
    __tablename__ = "consultations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    category = Column(String, index=True, nullable=False)
    price = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_popular = Column(Boolean, default=False, nullable=False)

    bookings = relationship("Booking", back_populates="consultation")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    reference_number = Column(String, unique=True, index=True, nullable=False)
    preferred_location = Column(String, nullable=True)
    preferred_date = Column(DateTime, nullable=False)
    # e.g. ["10:00 AM", "11:30 AM"]
    preferred_time_slots = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False, default="Awaiting Confirmation", index=True)
    confirmed_date = Column(DateTime, nullable=True)
    confirmed_time = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user = relationship("User", back_populates="bookings")

    consultation_id = Column(Integer, ForeignKey("consultations.id"), nullable=False)
    consultation = relationship("Consultation", back_populates="bookings")

    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True)
    branch = relationship("Branch", back_populates="bookings")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    price = Column(Float, nullable=False, default=0.0)

    order_items = relationship("OrderItem", back_populates="product")


class ProductOrder(Base):
    __tablename__ = "product_orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, unique=True, index=True, nullable=False)
    order_status = Column(String, nullable=False, default="Order Placed", index=True)
    total_amount = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    delivered_at = Column(DateTime, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user = relationship("User", back_populates="orders")

    items = relationship("OrderItem", back_populates="order")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    quantity = Column(Integer, nullable=False)
    # Denormalized so an order still reads correctly if the product is removed.
    product_name = Column(String, nullable=True)

    order_id = Column(Integer, ForeignKey("product_orders.id"), nullable=False)
    order = relationship("ProductOrder", back_populates="items")

    product_id = Column(Integer, ForeignKey("products.id"), nullable=True)
    product = relationship("Product", back_populates="order_items")
