from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, Enum, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from fenix.db.session import Base
from fenix.models.enums import InvoiceStatus


class Payable(Base):
    __tablename__ = "payables"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    description: Mapped[str] = mapped_column(String(300))
    value: Mapped[Decimal] = mapped_column(Numeric(14, 2))  # never accrues interest
    due_date: Mapped[dt.date] = mapped_column(Date, index=True)
    term: Mapped[str | None] = mapped_column(String(120), nullable=True)  # "prazo"
    payment_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    status: Mapped[InvoiceStatus] = mapped_column(Enum(InvoiceStatus), default=InvoiceStatus.NOT_PAID, index=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
