from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from fenix.schemas.common import RecordModel
from fenix.services.daily_payments import daily_total
from fenix.services.derivation import q_brl

ZERO = Decimal("0.00")


class DailyPaymentCreate(BaseModel):
    date: dt.date
    description: str = ""

    ativos: Decimal = Field(default=ZERO, ge=0)
    inativos: Decimal = Field(default=ZERO, ge=0)
    alteracao: Decimal = Field(default=ZERO, ge=0)
    distrato: Decimal = Field(default=ZERO, ge=0)
    remissao_gps: Decimal = Field(default=ZERO, ge=0)
    recal_guia: Decimal = Field(default=ZERO, ge=0)
    regularizacao: Decimal = Field(default=ZERO, ge=0)
    outros: Decimal = Field(default=ZERO, ge=0)
    rent_invest_facil: Decimal = Field(default=ZERO, ge=0)
    abertura: Decimal = Field(default=ZERO, ge=0)
    parcelamentos: Decimal = Field(default=ZERO, ge=0)

    # Optional: when sent it must match the category sum.
    total: Decimal | None = None

    @model_validator(mode="after")
    def _total_matches_categories(self) -> "DailyPaymentCreate":
        computed = daily_total(self)
        if self.total is not None and q_brl(self.total) != computed:
            raise ValueError(f"total {self.total} does not match the category sum {computed}")
        self.total = computed
        return self


class DailyPaymentUpdate(BaseModel):
    """total is not editable: it is recomputed from the merged categories."""

    date: dt.date | None = None
    description: str | None = None

    ativos: Decimal | None = Field(default=None, ge=0)
    inativos: Decimal | None = Field(default=None, ge=0)
    alteracao: Decimal | None = Field(default=None, ge=0)
    distrato: Decimal | None = Field(default=None, ge=0)
    remissao_gps: Decimal | None = Field(default=None, ge=0)
    recal_guia: Decimal | None = Field(default=None, ge=0)
    regularizacao: Decimal | None = Field(default=None, ge=0)
    outros: Decimal | None = Field(default=None, ge=0)
    rent_invest_facil: Decimal | None = Field(default=None, ge=0)
    abertura: Decimal | None = Field(default=None, ge=0)
    parcelamentos: Decimal | None = Field(default=None, ge=0)


class DailyPaymentOut(RecordModel):
    id: uuid.UUID
    date: dt.date
    description: str = ""

    ativos: Decimal = ZERO
    inativos: Decimal = ZERO
    alteracao: Decimal = ZERO
    distrato: Decimal = ZERO
    remissao_gps: Decimal = ZERO
    recal_guia: Decimal = ZERO
    regularizacao: Decimal = ZERO
    outros: Decimal = ZERO
    rent_invest_facil: Decimal = ZERO
    abertura: Decimal = ZERO
    parcelamentos: Decimal = ZERO

    total: Decimal = ZERO
    created_at: dt.datetime | None = None
