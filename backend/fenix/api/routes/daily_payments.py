from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.schemas.daily_payment import DailyPaymentCreate, DailyPaymentOut, DailyPaymentUpdate
from fenix.services import daily_payments as daily_service

router = APIRouter()


@router.get("/", response_model=list[DailyPaymentOut])
def list_daily_payments(db: Session = Depends(get_db)):
    # newest day first
    return [DailyPaymentOut.model_validate(r) for r in daily_service.list_daily_payments(db)]


@router.post("/", response_model=DailyPaymentOut)
def create_daily_payment(payload: DailyPaymentCreate, db: Session = Depends(get_db)):
    return DailyPaymentOut.model_validate(daily_service.create_daily_payment(db, payload))


@router.patch("/{payment_id}", response_model=DailyPaymentOut)
def update_daily_payment(payment_id: uuid.UUID, payload: DailyPaymentUpdate, db: Session = Depends(get_db)):
    return DailyPaymentOut.model_validate(daily_service.update_daily_payment(db, payment_id=payment_id, payload=payload))


@router.delete("/{payment_id}")
def delete_daily_payment(payment_id: uuid.UUID, db: Session = Depends(get_db)):
    daily_service.delete_daily_payment(db, payment_id=payment_id)
    return {"ok": True}
