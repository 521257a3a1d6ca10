from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fenix.models.daily_payment import DailyPayment
from fenix.services.derivation import q_brl

# Fixed set of named categories of the daily cash ledger.
DAILY_CATEGORIES: tuple[str, ...] = (
    "ativos",
    "inativos",
    "alteracao",
    "distrato",
    "remissao_gps",
    "recal_guia",
    "regularizacao",
    "outros",
    "rent_invest_facil",
    "abertura",
    "parcelamentos",
)


def daily_total(row) -> Decimal:
    return q_brl(sum((Decimal(str(getattr(row, name) or 0)) for name in DAILY_CATEGORIES), Decimal("0.00")))


def with_changes(row, changes: dict):
    """Apply edits to an immutable daily row and recompute its total."""
    merged = row.model_copy(update={k: v for k, v in changes.items() if k != "total" and v is not None})
    return merged.model_copy(update={"total": daily_total(merged)})


def list_daily_payments(db: Session) -> list[DailyPayment]:
    return db.query(DailyPayment).order_by(DailyPayment.date.desc(), DailyPayment.created_at.desc()).all()


def _get_or_404(db: Session, payment_id: uuid.UUID) -> DailyPayment:
    row = db.get(DailyPayment, payment_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Daily payment not found")
    return row


def create_daily_payment(db: Session, payload) -> DailyPayment:
    row = DailyPayment(date=payload.date, description=payload.description)
    for name in DAILY_CATEGORIES:
        setattr(row, name, q_brl(Decimal(str(getattr(payload, name)))))
    row.total = daily_total(row)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_daily_payment(db: Session, *, payment_id: uuid.UUID, payload) -> DailyPayment:
    row = _get_or_404(db, payment_id)
    changes = payload.model_dump(exclude_unset=True)
    changes.pop("total", None)
    for field, value in changes.items():
        if value is None:
            continue
        if field in DAILY_CATEGORIES:
            value = q_brl(Decimal(str(value)))
        setattr(row, field, value)
    row.total = daily_total(row)
    db.commit()
    db.refresh(row)
    return row


def delete_daily_payment(db: Session, *, payment_id: uuid.UUID) -> None:
    row = _get_or_404(db, payment_id)
    db.delete(row)
    db.commit()
