from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from fenix.models.enums import InvoiceCategory, InvoiceStatus
from fenix.schemas.common import RecordModel


class InvoiceCreate(BaseModel):
    invoice_number: str | None = Field(default=None, max_length=64)
    # When omitted the category is classified once from invoice_number (legacy imports).
    category: InvoiceCategory | None = None
    client_id: uuid.UUID | None = None
    individual_name: str | None = Field(default=None, max_length=200)  # ad-hoc payer
    original_value: Decimal = Field(ge=0)
    due_date: dt.date

    @model_validator(mode="after")
    def _exactly_one_payer(self) -> "InvoiceCreate":
        has_client = self.client_id is not None
        has_name = bool(self.individual_name and self.individual_name.strip())
        if has_client == has_name:
            raise ValueError("Provide exactly one of client_id or individual_name")
        return self


class InvoiceUpdate(BaseModel):
    invoice_number: str | None = Field(default=None, max_length=64)
    original_value: Decimal | None = Field(default=None, ge=0)
    due_date: dt.date | None = None
    status: InvoiceStatus | None = None
    payment_date: dt.date | None = None
    # Only honoured together with status=PAID: the values frozen at payment time.
    days_overdue: int | None = Field(default=None, ge=0)
    final_value: Decimal | None = Field(default=None, ge=0)


class InvoiceOut(RecordModel):
    id: uuid.UUID
    invoice_number: str | None = None
    category: InvoiceCategory = InvoiceCategory.STANDARD
    client_id: uuid.UUID | None = None
    individual_name: str | None = None
    original_value: Decimal
    due_date: dt.date
    status: InvoiceStatus = InvoiceStatus.NOT_PAID
    days_overdue: int = 0
    final_value: Decimal
    payment_date: dt.date | None = None
    created_at: dt.datetime | None = None
