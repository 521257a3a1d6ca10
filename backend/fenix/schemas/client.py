from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from fenix.schemas.common import RecordModel


class ClientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    tax_id: str = Field(default="", max_length=32)
    interest_percent: Decimal = Field(default=Decimal("0"), ge=0)
    fine_percent: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str = ""


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    tax_id: str | None = Field(default=None, max_length=32)
    interest_percent: Decimal | None = Field(default=None, ge=0)
    fine_percent: Decimal | None = Field(default=None, ge=0)
    notes: str | None = None


class ClientOut(RecordModel):
    id: uuid.UUID
    name: str
    tax_id: str
    interest_percent: Decimal
    fine_percent: Decimal
    notes: str
    created_at: dt.datetime | None = None
