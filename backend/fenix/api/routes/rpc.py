from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.services.invoices import update_invoice_statuses

router = APIRouter()


@router.post("/update_invoice_statuses")
def rpc_update_invoice_statuses(db: Session = Depends(get_db)):
    return {"updated": update_invoice_statuses(db)}
