from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fenix.db.session import Base
from fenix.models.enums import InvoiceCategory, InvoiceStatus


class Invoice(Base):
    """
    A boleto owed either by a client (client_id) or by a free-text payer (individual_name).

    status / days_overdue / final_value are derived from due_date and the client's interest
    terms until the invoice is paid; paying freezes them.
    """

    __tablename__ = "invoices"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    invoice_number: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    category: Mapped[InvoiceCategory] = mapped_column(Enum(InvoiceCategory), default=InvoiceCategory.STANDARD, index=True)

    client_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=True, index=True
    )
    individual_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    original_value: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    due_date: Mapped[dt.date] = mapped_column(Date, index=True)

    status: Mapped[InvoiceStatus] = mapped_column(Enum(InvoiceStatus), default=InvoiceStatus.NOT_PAID, index=True)
    days_overdue: Mapped[int] = mapped_column(Integer, default=0)
    final_value: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    payment_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="invoices")
