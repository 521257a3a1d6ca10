from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.schemas.payable import PayableCreate, PayableOut, PayableUpdate
from fenix.services import payables as payable_service

router = APIRouter()


@router.get("/", response_model=list[PayableOut])
def list_payables(db: Session = Depends(get_db)):
    return [PayableOut.model_validate(p) for p in payable_service.list_payables(db)]


@router.post("/", response_model=PayableOut)
def create_payable(payload: PayableCreate, db: Session = Depends(get_db)):
    return PayableOut.model_validate(payable_service.create_payable(db, payload))


@router.patch("/{payable_id}", response_model=PayableOut)
def update_payable(payable_id: uuid.UUID, payload: PayableUpdate, db: Session = Depends(get_db)):
    return PayableOut.model_validate(payable_service.update_payable(db, payable_id=payable_id, payload=payload))


@router.delete("/{payable_id}")
def delete_payable(payable_id: uuid.UUID, db: Session = Depends(get_db)):
    payable_service.delete_payable(db, payable_id=payable_id)
    return {"ok": True}
