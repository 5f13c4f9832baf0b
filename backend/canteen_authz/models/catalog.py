from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, Float, ForeignKey, DateTime, text
from typing import Optional

from .authz import Base, new_id


class Canteen(Base):
    __tablename__ = 'canteens'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(255), nullable=False, default='')
    status: Mapped[str] = mapped_column(String(16), nullable=False, default='OPEN')
    contact_phone: Mapped[Optional[str]] = mapped_column(String(32))
    # Delivery settings
    is_delivery_active: Mapped[bool] = mapped_column(Boolean, default=False)
    delivery_radius: Mapped[float] = mapped_column(Float, default=0)
    min_delivery_amount: Mapped[float] = mapped_column(Float, default=0)
    delivery_fee: Mapped[float] = mapped_column(Float, default=0)
    free_delivery_threshold: Mapped[float] = mapped_column(Float, default=0)
    default_packaging_fee: Mapped[float] = mapped_column(Float, default=0)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))


class Product(Base):
    __tablename__ = 'products'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    canteen_id: Mapped[str] = mapped_column(ForeignKey('canteens.id', ondelete='CASCADE'), index=True, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))
