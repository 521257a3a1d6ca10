from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, Numeric, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from fenix.db.session import Base


class DailyPayment(Base):
    """Daily cash ledger row. total is always the sum of the category columns."""

    __tablename__ = "daily_payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    description: Mapped[str] = mapped_column(Text, default="")

    ativos: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    inativos: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    alteracao: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    distrato: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    remissao_gps: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    recal_guia: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    regularizacao: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    outros: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    rent_invest_facil: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    abertura: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))
    parcelamentos: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))

    total: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0.00"))

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
