"""
Invoice / payable aging.

Pure functions: given a stored record, the owning client's interest terms and "today",
produce the status, days overdue and final value the record should show right now.
Used by the backend's bulk recomputation and by the sync client on every cycle.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol, TypeVar

from fenix.models.enums import InvoiceStatus

HUNDRED = Decimal("100")


class HasInterestTerms(Protocol):
    interest_percent: Decimal


InvoiceT = TypeVar("InvoiceT")
PayableT = TypeVar("PayableT")


def q_brl(x: Decimal) -> Decimal:
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def day_difference(due_date: dt.date, today: dt.date) -> int:
    """Whole calendar days from due_date to today (negative when due in the future)."""
    return (today - due_date).days


def accrued_value(original_value: Decimal, interest_percent: Decimal, days: int) -> Decimal:
    """Simple interest on the original principal: linear in days, never compounding."""
    original = Decimal(str(original_value))
    if days <= 0:
        return q_brl(original)
    rate = Decimal(str(interest_percent)) / HUNDRED
    return q_brl(original + original * rate * days)


def derive_invoice(invoice: InvoiceT, client: HasInterestTerms | None, today: dt.date) -> InvoiceT:
    """
    Current truth of an invoice.

    - PAID is returned untouched, whatever today is.
    - Due date strictly in the past: OVERDUE, days_overdue = day difference and, when a
      client supplies a rate, final_value = original * (1 + interest% / 100 * days).
    - Otherwise NOT_PAID with no accrual.
    - Without a client (ad-hoc billing) there is no rate, so final_value = original_value.
    """
    if invoice.status == InvoiceStatus.PAID:
        return invoice

    diff_days = day_difference(invoice.due_date, today)
    original = q_brl(Decimal(str(invoice.original_value)))

    if diff_days > 0:
        final_value = original
        if client is not None:
            final_value = accrued_value(original, client.interest_percent, diff_days)
        return invoice.model_copy(
            update={"status": InvoiceStatus.OVERDUE, "days_overdue": diff_days, "final_value": final_value}
        )

    return invoice.model_copy(update={"status": InvoiceStatus.NOT_PAID, "days_overdue": 0, "final_value": original})


def payable_status(due_date: dt.date, today: dt.date) -> InvoiceStatus:
    if due_date < today:
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.NOT_PAID


def derive_payable(payable: PayableT, today: dt.date) -> PayableT:
    """Payables never accrue interest: only NOT_PAID <-> OVERDUE moves, value is left alone."""
    if payable.status == InvoiceStatus.PAID:
        return payable
    status = payable_status(payable.due_date, today)
    if status == payable.status:
        return payable
    return payable.model_copy(update={"status": status})
