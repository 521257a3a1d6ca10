from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fenix.models.credit_card import CreditCardExpense, CreditCardPayment
from fenix.services.derivation import q_brl


@dataclass(frozen=True)
class InstallmentLine:
    """One expense as it shows up on a card bill for a given month."""

    expense: object
    current_installment: int  # 1-based
    installment_value: Decimal
    balance: Decimal  # total minus the installments falling in months already paid for this card
    is_paid: bool


def month_key(d: dt.date) -> str:
    return f"{d.year:04d}.{d.month:02d}"


def parse_month_key(year_month: str) -> tuple[int, int]:
    year, month = year_month.split(".")
    return int(year), int(month)


def add_months(d: dt.date, months: int) -> dt.date:
    y = d.year + (d.month - 1 + months) // 12
    m = (d.month - 1 + months) % 12 + 1
    return dt.date(y, m, 1)


def installment_value(expense) -> Decimal:
    return q_brl(Decimal(str(expense.total_value)) / Decimal(expense.total_installments))


def installment_index(expense, year_month: str) -> int | None:
    year, month = parse_month_key(year_month)
    diff = (year - expense.purchase_date.year) * 12 + (month - expense.purchase_date.month)
    if 0 <= diff < expense.total_installments:
        return diff + 1
    return None


def installment_months(expense) -> list[str]:
    start = expense.purchase_date
    return [month_key(add_months(start, i)) for i in range(expense.total_installments)]


def is_month_paid(payments, year_month: str, card: str) -> bool:
    return any(p.year_month == year_month and p.card == card and p.is_paid for p in payments)


def paid_installments_count(expense, payments) -> int:
    return sum(1 for ym in installment_months(expense) if is_month_paid(payments, ym, expense.card))


def installments_for_month(expenses, payments, year_month: str) -> list[InstallmentLine]:
    lines: list[InstallmentLine] = []
    for exp in expenses:
        idx = installment_index(exp, year_month)
        if idx is None:
            continue
        value = installment_value(exp)
        paid = paid_installments_count(exp, payments)
        balance = q_brl(Decimal(str(exp.total_value)) - value * paid)
        lines.append(
            InstallmentLine(
                expense=exp,
                current_installment=idx,
                installment_value=value,
                balance=max(Decimal("0.00"), balance),
                is_paid=is_month_paid(payments, year_month, exp.card),
            )
        )
    return lines


def monthly_bill_total(lines: list[InstallmentLine]) -> Decimal:
    return q_brl(sum((line.installment_value for line in lines), Decimal("0.00")))


def month_options(expenses, today: dt.date) -> list[str]:
    """Every month of the current year plus every month an installment falls in, newest first."""
    months = {month_key(dt.date(today.year, m, 1)) for m in range(1, 13)}
    for exp in expenses:
        months.update(installment_months(exp))
    return sorted(months, reverse=True)


def list_expenses(db: Session) -> list[CreditCardExpense]:
    return db.query(CreditCardExpense).order_by(CreditCardExpense.purchase_date.desc(), CreditCardExpense.created_at.desc()).all()


def _get_expense_or_404(db: Session, expense_id: uuid.UUID) -> CreditCardExpense:
    e = db.get(CreditCardExpense, expense_id)
    if not e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Credit card expense not found")
    return e


def create_expense(db: Session, payload) -> CreditCardExpense:
    e = CreditCardExpense(
        purchase_date=payload.purchase_date,
        description=payload.description.strip(),
        card=payload.card.strip(),
        total_value=q_brl(Decimal(str(payload.total_value))),
        total_installments=payload.total_installments,
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return e


def update_expense(db: Session, *, expense_id: uuid.UUID, payload) -> CreditCardExpense:
    e = _get_expense_or_404(db, expense_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if field == "total_value":
            value = q_brl(Decimal(str(value)))
        setattr(e, field, value)
    db.commit()
    db.refresh(e)
    return e


def delete_expense(db: Session, *, expense_id: uuid.UUID) -> None:
    e = _get_expense_or_404(db, expense_id)
    db.delete(e)
    db.commit()


def list_payments(db: Session) -> list[CreditCardPayment]:
    return db.query(CreditCardPayment).order_by(CreditCardPayment.year_month.desc(), CreditCardPayment.card.asc()).all()


def upsert_payment(db: Session, payload) -> CreditCardPayment:
    """Settlement marker for a whole card bill: one row per (year_month, card)."""
    p = (
        db.query(CreditCardPayment)
        .filter(CreditCardPayment.year_month == payload.year_month, CreditCardPayment.card == payload.card)
        .first()
    )
    if p:
        p.is_paid = payload.is_paid
    else:
        p = CreditCardPayment(year_month=payload.year_month, card=payload.card, is_paid=payload.is_paid)
        db.add(p)
    db.commit()
    db.refresh(p)
    return p
