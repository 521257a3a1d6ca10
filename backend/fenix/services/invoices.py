from __future__ import annotations

import datetime as dt
import logging
import uuid
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fenix.models.client import Client
from fenix.models.enums import InvoiceCategory, InvoiceStatus
from fenix.models.invoice import Invoice
from fenix.schemas.invoice import InvoiceOut
from fenix.services.derivation import derive_invoice, q_brl

logger = logging.getLogger(__name__)

AWAITING_NOTE_PREFIX = "AGU-"
INTERNET_PREFIX = "INT-"
NO_NOTE_MARKERS = frozenset({"", "S/N", "S/AN"})
NO_NOTE_NUMBER = "S/N"


def classify_invoice_number(
    invoice_number: str | None,
    *,
    client_id: uuid.UUID | None = None,
    individual_name: str | None = None,
) -> InvoiceCategory:
    """
    Registration category from the legacy sentinel prefixes.

    Only used once, when an invoice is created without an explicit category.
    AGU- wins over INT-; a payer name without a client reference is internet billing.
    """
    number = (invoice_number or "").strip()
    if number.startswith(AWAITING_NOTE_PREFIX):
        return InvoiceCategory.AWAITING_NOTE
    if number.startswith(INTERNET_PREFIX):
        return InvoiceCategory.INTERNET
    if client_id is None and individual_name:
        return InvoiceCategory.INTERNET
    if number.upper() in NO_NOTE_MARKERS:
        return InvoiceCategory.NO_NOTE
    return InvoiceCategory.STANDARD


def normalize_invoice_number(category: InvoiceCategory, invoice_number: str | None) -> str | None:
    number = (invoice_number or "").strip()
    if category == InvoiceCategory.NO_NOTE:
        return NO_NOTE_NUMBER
    if category == InvoiceCategory.INTERNET:
        if number.startswith(INTERNET_PREFIX):
            return number
        return INTERNET_PREFIX + (number or "AUTOGEN")
    if category == InvoiceCategory.AWAITING_NOTE:
        if number.startswith(AWAITING_NOTE_PREFIX):
            return number
        return AWAITING_NOTE_PREFIX + number
    return number or None


def display_number(invoice) -> str:
    number = (invoice.invoice_number or "").strip()
    if not number:
        return NO_NOTE_NUMBER
    for prefix in (INTERNET_PREFIX, AWAITING_NOTE_PREFIX):
        if number.startswith(prefix):
            return number[len(prefix) :]
    return number


def _apply_derivation(row: Invoice, client: Client | None, today: dt.date) -> bool:
    """Write derived status/values back onto the row. Returns True when anything changed."""
    current = InvoiceOut.model_validate(row)
    derived = derive_invoice(current, client, today)
    changed = (
        derived.status != current.status
        or derived.days_overdue != current.days_overdue
        or derived.final_value != current.final_value
    )
    if changed:
        row.status = derived.status
        row.days_overdue = derived.days_overdue
        row.final_value = derived.final_value
    return changed


def list_invoices(db: Session) -> list[Invoice]:
    return db.query(Invoice).order_by(Invoice.due_date.asc(), Invoice.created_at.asc()).all()


def _get_or_404(db: Session, invoice_id: uuid.UUID) -> Invoice:
    inv = db.get(Invoice, invoice_id)
    if not inv:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return inv


def _client_for(db: Session, inv: Invoice) -> Client | None:
    if inv.client_id is None:
        return None
    return db.get(Client, inv.client_id)


def create_invoice(db: Session, payload, *, today: dt.date | None = None) -> Invoice:
    today = today or dt.date.today()

    client = None
    if payload.client_id is not None:
        client = db.get(Client, payload.client_id)
        if not client:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")

    category = payload.category or classify_invoice_number(
        payload.invoice_number, client_id=payload.client_id, individual_name=payload.individual_name
    )
    original = q_brl(Decimal(str(payload.original_value)))

    inv = Invoice(
        invoice_number=normalize_invoice_number(category, payload.invoice_number),
        category=category,
        client_id=payload.client_id,
        individual_name=(payload.individual_name or "").strip() or None,
        original_value=original,
        due_date=payload.due_date,
        status=InvoiceStatus.NOT_PAID,
        days_overdue=0,
        final_value=original,
    )
    db.add(inv)
    db.flush()
    _apply_derivation(inv, client, today)
    db.commit()
    db.refresh(inv)
    return inv


def update_invoice(db: Session, *, invoice_id: uuid.UUID, payload, today: dt.date | None = None) -> Invoice:
    """
    Edit an invoice.

    - Unpaid invoices are re-derived after the edit, so server-computed fields always win.
    - status=PAID freezes the derived values (or the frozen values the caller sends) and
      stamps payment_date.
    - A paid invoice never leaves PAID and its amount/due date can no longer change.
    """
    today = today or dt.date.today()
    inv = _get_or_404(db, invoice_id)
    changes = payload.model_dump(exclude_unset=True)

    new_status = changes.pop("status", None)
    frozen_days = changes.pop("days_overdue", None)
    frozen_value = changes.pop("final_value", None)

    if inv.status == InvoiceStatus.PAID:
        if new_status not in (None, InvoiceStatus.PAID):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Paid invoices cannot be reopened")
        if changes.get("original_value") is not None or changes.get("due_date") is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Paid invoices are frozen")

    for field, value in changes.items():
        if value is None and field != "invoice_number":
            continue
        if field == "original_value":
            value = q_brl(Decimal(str(value)))
        setattr(inv, field, value)

    if inv.status != InvoiceStatus.PAID:
        _apply_derivation(inv, _client_for(db, inv), today)
        if new_status == InvoiceStatus.PAID:
            if frozen_value is not None:
                inv.final_value = q_brl(Decimal(str(frozen_value)))
            if frozen_days is not None:
                inv.days_overdue = frozen_days
            inv.status = InvoiceStatus.PAID
            inv.payment_date = inv.payment_date or today
            logger.info("Invoice %s paid (final_value=%s)", inv.id, inv.final_value)

    db.commit()
    db.refresh(inv)
    return inv


def delete_invoice(db: Session, *, invoice_id: uuid.UUID) -> None:
    inv = _get_or_404(db, invoice_id)
    db.delete(inv)
    db.commit()


def update_invoice_statuses(db: Session, *, today: dt.date | None = None) -> int:
    """
    Bulk recomputation of every unpaid invoice, in place.

    Keeps persisted status/final_value current for reports even when no client is open.
    Returns how many rows changed.
    """
    today = today or dt.date.today()
    clients = {c.id: c for c in db.query(Client).all()}
    rows = db.query(Invoice).filter(Invoice.status != InvoiceStatus.PAID).all()

    updated = 0
    for row in rows:
        client = clients.get(row.client_id) if row.client_id is not None else None
        if _apply_derivation(row, client, today):
            updated += 1
    db.commit()
    logger.info("update_invoice_statuses: scanned=%s updated=%s today=%s", len(rows), updated, today)
    return updated
