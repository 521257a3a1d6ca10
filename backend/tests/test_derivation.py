import datetime as dt
import uuid
from decimal import Decimal

from fenix.models.enums import InvoiceStatus
from fenix.schemas.client import ClientOut
from fenix.schemas.invoice import InvoiceOut
from fenix.schemas.payable import PayableOut
from fenix.services.derivation import accrued_value, day_difference, derive_invoice, derive_payable, q_brl

TODAY = dt.date(2025, 3, 20)


def _client(interest: str = "1") -> ClientOut:
    return ClientOut(id=uuid.uuid4(), name="Padaria Sol", tax_id="", interest_percent=Decimal(interest), fine_percent=Decimal("2"), notes="")


def _invoice(
    due: dt.date, *, value: str = "1000.00", final_value: str | None = None, status: InvoiceStatus = InvoiceStatus.NOT_PAID, **kw
) -> InvoiceOut:
    return InvoiceOut(
        id=uuid.uuid4(),
        invoice_number="123",
        original_value=Decimal(value),
        final_value=Decimal(final_value or value),
        due_date=due,
        status=status,
        **kw,
    )


def _payable(due: dt.date, status: InvoiceStatus = InvoiceStatus.NOT_PAID) -> PayableOut:
    return PayableOut(id=uuid.uuid4(), description="Aluguel", value=Decimal("850.00"), due_date=due, status=status)


def test_q_brl_rounds_half_up():
    assert q_brl(Decimal("10.005")) == Decimal("10.01")
    assert q_brl(Decimal("10.004")) == Decimal("10.00")


def test_day_difference_sign():
    assert day_difference(dt.date(2025, 3, 10), TODAY) == 10
    assert day_difference(dt.date(2025, 3, 25), TODAY) == -5


def test_overdue_invoice_accrues_simple_interest():
    """1000 due 10 days ago at 1%/day -> 1100.00."""
    out = derive_invoice(_invoice(TODAY - dt.timedelta(days=10)), _client("1"), TODAY)
    assert out.status == InvoiceStatus.OVERDUE
    assert out.days_overdue == 10
    assert out.final_value == Decimal("1100.00")


def test_interest_is_linear_not_compounding():
    assert accrued_value(Decimal("1000"), Decimal("1"), 20) == Decimal("1200.00")
    assert accrued_value(Decimal("1000"), Decimal("1"), 0) == Decimal("1000.00")


def test_fine_percent_does_not_affect_final_value():
    client = _client("0")
    out = derive_invoice(_invoice(TODAY - dt.timedelta(days=5)), client, TODAY)
    assert out.final_value == Decimal("1000.00")


def test_overdue_without_client_has_no_interest():
    out = derive_invoice(_invoice(TODAY - dt.timedelta(days=10), individual_name="João"), None, TODAY)
    assert out.status == InvoiceStatus.OVERDUE
    assert out.days_overdue == 10
    assert out.final_value == Decimal("1000.00")


def test_due_today_is_not_overdue():
    out = derive_invoice(_invoice(TODAY, final_value="1234.00"), _client(), TODAY)
    assert out.status == InvoiceStatus.NOT_PAID
    assert out.days_overdue == 0
    assert out.final_value == Decimal("1000.00")


def test_due_date_moved_to_future_resets_overdue():
    stale = _invoice(TODAY + dt.timedelta(days=3), status=InvoiceStatus.OVERDUE, days_overdue=7, final_value="1070.00")
    out = derive_invoice(stale, _client(), TODAY)
    assert out.status == InvoiceStatus.NOT_PAID
    assert out.days_overdue == 0
    assert out.final_value == Decimal("1000.00")


def test_paid_invoice_is_frozen_forever():
    paid = _invoice(
        TODAY - dt.timedelta(days=10),
        status=InvoiceStatus.PAID,
        days_overdue=10,
        final_value="1100.00",
        payment_date=TODAY,
    )
    later = derive_invoice(paid, _client("5"), TODAY + dt.timedelta(days=30))
    assert later == paid


def test_derivation_is_idempotent():
    client = _client("0.5")
    once = derive_invoice(_invoice(TODAY - dt.timedelta(days=7)), client, TODAY)
    assert derive_invoice(once, client, TODAY) == once


def test_derivation_returns_a_copy():
    inv = _invoice(TODAY - dt.timedelta(days=2))
    out = derive_invoice(inv, _client(), TODAY)
    assert inv.status == InvoiceStatus.NOT_PAID
    assert out.id == inv.id


def test_payable_due_tomorrow_is_not_paid():
    out = derive_payable(_payable(TODAY + dt.timedelta(days=1), InvoiceStatus.OVERDUE), TODAY)
    assert out.status == InvoiceStatus.NOT_PAID


def test_payable_due_yesterday_is_overdue_and_keeps_value():
    p = _payable(TODAY - dt.timedelta(days=1))
    out = derive_payable(p, TODAY)
    assert out.status == InvoiceStatus.OVERDUE
    assert out.value == p.value


def test_paid_payable_is_untouched():
    p = _payable(TODAY - dt.timedelta(days=40), InvoiceStatus.PAID)
    assert derive_payable(p, TODAY) is p
