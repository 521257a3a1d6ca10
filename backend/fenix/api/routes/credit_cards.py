from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.schemas.credit_card import (
    CreditCardExpenseCreate,
    CreditCardExpenseOut,
    CreditCardExpenseUpdate,
    CreditCardPaymentOut,
    CreditCardPaymentUpsert,
)
from fenix.services import credit_cards as card_service

expenses_router = APIRouter()
payments_router = APIRouter()


@expenses_router.get("/", response_model=list[CreditCardExpenseOut])
def list_expenses(db: Session = Depends(get_db)):
    return [CreditCardExpenseOut.model_validate(e) for e in card_service.list_expenses(db)]


@expenses_router.post("/", response_model=CreditCardExpenseOut)
def create_expense(payload: CreditCardExpenseCreate, db: Session = Depends(get_db)):
    return CreditCardExpenseOut.model_validate(card_service.create_expense(db, payload))


@expenses_router.patch("/{expense_id}", response_model=CreditCardExpenseOut)
def update_expense(expense_id: uuid.UUID, payload: CreditCardExpenseUpdate, db: Session = Depends(get_db)):
    return CreditCardExpenseOut.model_validate(card_service.update_expense(db, expense_id=expense_id, payload=payload))


@expenses_router.delete("/{expense_id}")
def delete_expense(expense_id: uuid.UUID, db: Session = Depends(get_db)):
    card_service.delete_expense(db, expense_id=expense_id)
    return {"ok": True}


@payments_router.get("/", response_model=list[CreditCardPaymentOut])
def list_payments(db: Session = Depends(get_db)):
    return [CreditCardPaymentOut.model_validate(p) for p in card_service.list_payments(db)]


@payments_router.put("/", response_model=CreditCardPaymentOut)
def upsert_payment(payload: CreditCardPaymentUpsert, db: Session = Depends(get_db)):
    return CreditCardPaymentOut.model_validate(card_service.upsert_payment(db, payload))
