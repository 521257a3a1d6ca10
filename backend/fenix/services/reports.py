from __future__ import annotations

import datetime as dt
from decimal import Decimal

from fenix.models.enums import InvoiceCategory, InvoiceStatus
from fenix.schemas.common import StatusBucket
from fenix.schemas.report import DashboardSummary, MonthlyInvoiceSummary
from fenix.services.derivation import q_brl


def _bucket(invoices) -> StatusBucket:
    value = sum((Decimal(str(i.final_value)) for i in invoices), Decimal("0.00"))
    return StatusBucket(count=len(invoices), value=q_brl(value))


def _in_month(invoice, year: int, month: int) -> bool:
    return invoice.due_date.year == year and invoice.due_date.month == month


def monthly_invoice_summary(invoices, month: str) -> MonthlyInvoiceSummary:
    """Invoices due in month (YYYY-MM), bucketed by status on final_value."""
    year, mon = (int(x) for x in month.split("-"))
    selected = [i for i in invoices if _in_month(i, year, mon)]
    return MonthlyInvoiceSummary(
        month=month,
        paid=_bucket([i for i in selected if i.status == InvoiceStatus.PAID]),
        pending=_bucket([i for i in selected if i.status == InvoiceStatus.NOT_PAID]),
        overdue=_bucket([i for i in selected if i.status == InvoiceStatus.OVERDUE]),
        total=_bucket(selected),
    )


def dashboard_summary(invoices, today: dt.date, *, recent_limit: int = 5) -> DashboardSummary:
    current = [
        i for i in invoices if _in_month(i, today.year, today.month) and i.category != InvoiceCategory.INTERNET
    ]
    pending = [i for i in current if i.status == InvoiceStatus.NOT_PAID]
    overdue = [i for i in current if i.status == InvoiceStatus.OVERDUE]
    recent = sorted(current, key=lambda i: i.due_date, reverse=True)[:recent_limit]
    return DashboardSummary(
        month=f"{today.year:04d}-{today.month:02d}",
        paid=_bucket([i for i in current if i.status == InvoiceStatus.PAID]),
        pending=_bucket(pending),
        overdue=_bucket(overdue),
        active=_bucket(pending + overdue),
        no_note=_bucket([i for i in current if i.category == InvoiceCategory.NO_NOTE]),
        recent=recent,
    )
