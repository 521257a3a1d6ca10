import datetime as dt
import uuid
from decimal import Decimal

from fenix.models.enums import InvoiceCategory, InvoiceStatus
from fenix.schemas.invoice import InvoiceOut
from fenix.services.reports import dashboard_summary, monthly_invoice_summary

TODAY = dt.date(2025, 3, 20)


def _inv(due: dt.date, status: InvoiceStatus, value: str, category: InvoiceCategory = InvoiceCategory.STANDARD) -> InvoiceOut:
    return InvoiceOut(
        id=uuid.uuid4(),
        category=category,
        original_value=Decimal(value),
        final_value=Decimal(value),
        due_date=due,
        status=status,
    )


def test_monthly_summary_buckets_by_status():
    invoices = [
        _inv(dt.date(2025, 3, 1), InvoiceStatus.PAID, "100.00"),
        _inv(dt.date(2025, 3, 5), InvoiceStatus.OVERDUE, "210.50"),
        _inv(dt.date(2025, 3, 28), InvoiceStatus.NOT_PAID, "40.00"),
        _inv(dt.date(2025, 4, 2), InvoiceStatus.NOT_PAID, "999.00"),
    ]
    s = monthly_invoice_summary(invoices, "2025-03")
    assert s.paid.count == 1 and s.paid.value == Decimal("100.00")
    assert s.overdue.value == Decimal("210.50")
    assert s.pending.count == 1
    assert s.total.count == 3
    assert s.total.value == Decimal("350.50")


def test_dashboard_excludes_internet_billing():
    invoices = [
        _inv(dt.date(2025, 3, 10), InvoiceStatus.OVERDUE, "500.00"),
        _inv(dt.date(2025, 3, 25), InvoiceStatus.NOT_PAID, "70.00", InvoiceCategory.NO_NOTE),
        _inv(dt.date(2025, 3, 12), InvoiceStatus.OVERDUE, "300.00", InvoiceCategory.INTERNET),
    ]
    d = dashboard_summary(invoices, TODAY)
    assert d.month == "2025-03"
    assert d.active.count == 2
    assert d.active.value == Decimal("570.00")
    assert d.no_note.count == 1
    assert [i.due_date for i in d.recent] == [dt.date(2025, 3, 25), dt.date(2025, 3, 10)]
