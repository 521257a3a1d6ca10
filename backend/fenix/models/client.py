from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fenix.db.session import Base


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(200), index=True)
    tax_id: Mapped[str] = mapped_column(String(32), default="")  # CNPJ

    # Daily simple interest applied to overdue invoices.
    interest_percent: Mapped[Decimal] = mapped_column(Numeric(7, 4), default=Decimal("0"))
    # Persisted for the client record; not consumed by any derivation.
    fine_percent: Mapped[Decimal] = mapped_column(Numeric(7, 4), default=Decimal("0"))
    notes: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    invoices = relationship("Invoice", back_populates="client", cascade="all, delete-orphan")
