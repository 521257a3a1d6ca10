from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.schemas.invoice import InvoiceCreate, InvoiceOut, InvoiceUpdate
from fenix.services import invoices as invoice_service

router = APIRouter()


@router.get("/", response_model=list[InvoiceOut])
def list_invoices(db: Session = Depends(get_db)):
    return [InvoiceOut.model_validate(i) for i in invoice_service.list_invoices(db)]


@router.post("/", response_model=InvoiceOut)
def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db)):
    return InvoiceOut.model_validate(invoice_service.create_invoice(db, payload))


@router.patch("/{invoice_id}", response_model=InvoiceOut)
def update_invoice(invoice_id: uuid.UUID, payload: InvoiceUpdate, db: Session = Depends(get_db)):
    return InvoiceOut.model_validate(invoice_service.update_invoice(db, invoice_id=invoice_id, payload=payload))


@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: uuid.UUID, db: Session = Depends(get_db)):
    invoice_service.delete_invoice(db, invoice_id=invoice_id)
    return {"ok": True}
