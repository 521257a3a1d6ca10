from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from fenix.models.enums import InvoiceStatus
from fenix.schemas.common import RecordModel


class PayableCreate(BaseModel):
    description: str = Field(min_length=1, max_length=300)
    value: Decimal = Field(ge=0)
    due_date: dt.date
    term: str | None = Field(default=None, max_length=120)


class PayableUpdate(BaseModel):
    description: str | None = Field(default=None, min_length=1, max_length=300)
    value: Decimal | None = Field(default=None, ge=0)
    due_date: dt.date | None = None
    term: str | None = Field(default=None, max_length=120)
    status: InvoiceStatus | None = None
    payment_date: dt.date | None = None


class PayableOut(RecordModel):
    id: uuid.UUID
    description: str
    value: Decimal
    due_date: dt.date
    term: str | None = None
    payment_date: dt.date | None = None
    status: InvoiceStatus = InvoiceStatus.NOT_PAID
    created_at: dt.datetime | None = None
