from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class RecordModel(BaseModel):
    """Canonical stored row as seen by clients. Immutable: derivation returns copies."""

    model_config = ConfigDict(from_attributes=True, frozen=True)


class StatusBucket(ApiModel):
    count: int = 0
    value: Decimal = Decimal("0.00")
