from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Integer, Numeric, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from fenix.db.session import Base


class CreditCardExpense(Base):
    """
    Installment purchase. Never mutated per installment: payment state lives in
    CreditCardPayment, one row per (year_month, card).
    """

    __tablename__ = "credit_card_expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    purchase_date: Mapped[dt.date] = mapped_column(Date, index=True)
    description: Mapped[str] = mapped_column(String(300))
    card: Mapped[str] = mapped_column(String(60), index=True)  # Visa, Master, Elo, ...
    total_value: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    total_installments: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class CreditCardPayment(Base):
    __tablename__ = "credit_card_payments"
    __table_args__ = (UniqueConstraint("year_month", "card", name="uq_credit_card_payments_month_card"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    year_month: Mapped[str] = mapped_column(String(7), index=True)  # YYYY.MM
    card: Mapped[str] = mapped_column(String(60))
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
