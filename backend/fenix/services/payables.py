from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fenix.models.enums import InvoiceStatus
from fenix.models.payable import Payable
from fenix.services.derivation import payable_status, q_brl


def list_payables(db: Session) -> list[Payable]:
    return db.query(Payable).order_by(Payable.due_date.asc(), Payable.created_at.asc()).all()


def _get_or_404(db: Session, payable_id: uuid.UUID) -> Payable:
    p = db.get(Payable, payable_id)
    if not p:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payable not found")
    return p


def create_payable(db: Session, payload, *, today: dt.date | None = None) -> Payable:
    today = today or dt.date.today()
    p = Payable(
        description=payload.description.strip(),
        value=q_brl(Decimal(str(payload.value))),
        due_date=payload.due_date,
        term=payload.term,
        status=payable_status(payload.due_date, today),
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def update_payable(db: Session, *, payable_id: uuid.UUID, payload, today: dt.date | None = None) -> Payable:
    """
    Status follows the (possibly new) due date unless the edit says PAID.
    Leaving PAID clears the payment date.
    """
    today = today or dt.date.today()
    p = _get_or_404(db, payable_id)
    changes = payload.model_dump(exclude_unset=True)
    new_status = changes.pop("status", None) or p.status

    for field, value in changes.items():
        if value is None and field not in ("term", "payment_date"):
            continue
        if field == "value":
            value = q_brl(Decimal(str(value)))
        setattr(p, field, value)

    if new_status == InvoiceStatus.PAID:
        p.status = InvoiceStatus.PAID
        p.payment_date = p.payment_date or today
    else:
        p.status = payable_status(p.due_date, today)
        p.payment_date = None

    db.commit()
    db.refresh(p)
    return p


def delete_payable(db: Session, *, payable_id: uuid.UUID) -> None:
    p = _get_or_404(db, payable_id)
    db.delete(p)
    db.commit()
