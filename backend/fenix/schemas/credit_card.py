from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from fenix.schemas.common import RecordModel

YEAR_MONTH_PATTERN = r"^\d{4}\.(0[1-9]|1[0-2])$"  # YYYY.MM


class CreditCardExpenseCreate(BaseModel):
    purchase_date: dt.date
    description: str = Field(min_length=1, max_length=300)
    card: str = Field(min_length=1, max_length=60)
    total_value: Decimal = Field(gt=0)
    total_installments: int = Field(default=1, ge=1, le=120)


class CreditCardExpenseUpdate(BaseModel):
    purchase_date: dt.date | None = None
    description: str | None = Field(default=None, min_length=1, max_length=300)
    card: str | None = Field(default=None, min_length=1, max_length=60)
    total_value: Decimal | None = Field(default=None, gt=0)
    total_installments: int | None = Field(default=None, ge=1, le=120)


class CreditCardExpenseOut(RecordModel):
    id: uuid.UUID
    purchase_date: dt.date
    description: str
    card: str
    total_value: Decimal
    total_installments: int
    created_at: dt.datetime | None = None


class CreditCardPaymentUpsert(BaseModel):
    year_month: str = Field(pattern=YEAR_MONTH_PATTERN)
    card: str = Field(min_length=1, max_length=60)
    is_paid: bool


class CreditCardPaymentOut(RecordModel):
    id: uuid.UUID
    year_month: str
    card: str
    is_paid: bool
    created_at: dt.datetime | None = None
