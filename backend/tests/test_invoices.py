import datetime as dt
import uuid
from decimal import Decimal

import pytest
from fastapi import HTTPException

from fenix.models.client import Client
from fenix.models.enums import InvoiceCategory, InvoiceStatus
from fenix.schemas.invoice import InvoiceCreate, InvoiceUpdate
from fenix.services.invoices import (
    classify_invoice_number,
    create_invoice,
    display_number,
    normalize_invoice_number,
    update_invoice,
    update_invoice_statuses,
)

TODAY = dt.date(2025, 3, 20)


def _client(db, interest: str = "1") -> Client:
    c = Client(name="Mercado Boa Vista", tax_id="12.345.678/0001-90", interest_percent=Decimal(interest))
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def test_classify_invoice_number_prefixes():
    cid = uuid.uuid4()
    assert classify_invoice_number("AGU-77", client_id=cid) == InvoiceCategory.AWAITING_NOTE
    assert classify_invoice_number("INT-5", client_id=cid) == InvoiceCategory.INTERNET
    assert classify_invoice_number("S/N", client_id=cid) == InvoiceCategory.NO_NOTE
    assert classify_invoice_number("s/an", client_id=cid) == InvoiceCategory.NO_NOTE
    assert classify_invoice_number("", client_id=cid) == InvoiceCategory.NO_NOTE
    assert classify_invoice_number("4521", client_id=cid) == InvoiceCategory.STANDARD


def test_classify_individual_payer_is_internet_billing():
    assert classify_invoice_number("88", individual_name="Maria") == InvoiceCategory.INTERNET


def test_normalize_invoice_number_per_category():
    assert normalize_invoice_number(InvoiceCategory.NO_NOTE, "") == "S/N"
    assert normalize_invoice_number(InvoiceCategory.INTERNET, "12") == "INT-12"
    assert normalize_invoice_number(InvoiceCategory.INTERNET, "INT-12") == "INT-12"
    assert normalize_invoice_number(InvoiceCategory.AWAITING_NOTE, "9") == "AGU-9"
    assert normalize_invoice_number(InvoiceCategory.STANDARD, " 4521 ") == "4521"


def test_display_number_strips_sentinels():
    class Row:
        invoice_number = "AGU-31"

    assert display_number(Row()) == "31"
    Row.invoice_number = None
    assert display_number(Row()) == "S/N"


def test_create_invoice_derives_overdue_on_insert(db):
    c = _client(db)
    payload = InvoiceCreate(invoice_number="100", client_id=c.id, original_value=Decimal("1000"), due_date=dt.date(2025, 3, 10))
    inv = create_invoice(db, payload, today=TODAY)
    assert inv.category == InvoiceCategory.STANDARD
    assert inv.status == InvoiceStatus.OVERDUE
    assert inv.days_overdue == 10
    assert inv.final_value == Decimal("1100.00")


def test_create_invoice_explicit_category_wins(db):
    c = _client(db)
    payload = InvoiceCreate(
        invoice_number="", category=InvoiceCategory.AWAITING_NOTE, client_id=c.id, original_value=Decimal("50"), due_date=TODAY
    )
    inv = create_invoice(db, payload, today=TODAY)
    assert inv.category == InvoiceCategory.AWAITING_NOTE
    assert inv.invoice_number == "AGU-"


def test_create_invoice_unknown_client_404(db):
    payload = InvoiceCreate(client_id=uuid.uuid4(), original_value=Decimal("10"), due_date=TODAY)
    with pytest.raises(HTTPException) as e:
        create_invoice(db, payload, today=TODAY)
    assert e.value.status_code == 404


def test_invoice_create_requires_exactly_one_payer():
    with pytest.raises(ValueError):
        InvoiceCreate(original_value=Decimal("10"), due_date=TODAY)
    with pytest.raises(ValueError):
        InvoiceCreate(client_id=uuid.uuid4(), individual_name="Ana", original_value=Decimal("10"), due_date=TODAY)


def test_pay_invoice_freezes_values(db):
    c = _client(db)
    inv = create_invoice(
        db, InvoiceCreate(client_id=c.id, invoice_number="7", original_value=Decimal("1000"), due_date=dt.date(2025, 3, 15)), today=TODAY
    )
    paid = update_invoice(db, invoice_id=inv.id, payload=InvoiceUpdate(status=InvoiceStatus.PAID), today=TODAY)
    assert paid.status == InvoiceStatus.PAID
    assert paid.payment_date == TODAY
    assert paid.final_value == Decimal("1050.00")

    assert update_invoice_statuses(db, today=TODAY + dt.timedelta(days=30)) == 0
    db.refresh(paid)
    assert paid.final_value == Decimal("1050.00")
    assert paid.days_overdue == 5


def test_paid_invoice_cannot_be_reopened(db):
    inv = create_invoice(db, InvoiceCreate(individual_name="Ana", original_value=Decimal("80"), due_date=TODAY), today=TODAY)
    update_invoice(db, invoice_id=inv.id, payload=InvoiceUpdate(status=InvoiceStatus.PAID), today=TODAY)
    with pytest.raises(HTTPException) as e:
        update_invoice(db, invoice_id=inv.id, payload=InvoiceUpdate(status=InvoiceStatus.NOT_PAID), today=TODAY)
    assert e.value.status_code == 409


def test_update_invoice_statuses_counts_changed_rows(db):
    c = _client(db, "2")
    on_time = create_invoice(db, InvoiceCreate(client_id=c.id, invoice_number="1", original_value=Decimal("100"), due_date=TODAY), today=TODAY)
    create_invoice(db, InvoiceCreate(client_id=c.id, invoice_number="2", original_value=Decimal("100"), due_date=dt.date(2025, 4, 30)), today=TODAY)

    later = TODAY + dt.timedelta(days=3)
    assert update_invoice_statuses(db, today=later) == 1
    db.refresh(on_time)
    assert on_time.status == InvoiceStatus.OVERDUE
    assert on_time.final_value == Decimal("106.00")
    # Same day again: nothing left to change.
    assert update_invoice_statuses(db, today=later) == 0
