from __future__ import annotations

from pydantic import Field

from fenix.schemas.common import ApiModel, StatusBucket
from fenix.schemas.invoice import InvoiceOut


class MonthlyInvoiceSummary(ApiModel):
    month: str  # YYYY-MM
    paid: StatusBucket
    pending: StatusBucket
    overdue: StatusBucket
    total: StatusBucket


class DashboardSummary(ApiModel):
    month: str
    paid: StatusBucket
    pending: StatusBucket
    overdue: StatusBucket
    active: StatusBucket  # pending + overdue
    no_note: StatusBucket
    recent: list[InvoiceOut] = Field(default_factory=list)
