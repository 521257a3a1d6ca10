from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.models.client import Client
from fenix.models.invoice import Invoice
from fenix.schemas.invoice import InvoiceOut
from fenix.schemas.report import DashboardSummary, MonthlyInvoiceSummary
from fenix.services.derivation import derive_invoice
from fenix.services.reports import dashboard_summary, monthly_invoice_summary

router = APIRouter()


def _current_invoices(db: Session, today: dt.date) -> list[InvoiceOut]:
    clients = {c.id: c for c in db.query(Client).all()}
    return [
        derive_invoice(InvoiceOut.model_validate(i), clients.get(i.client_id) if i.client_id else None, today)
        for i in db.query(Invoice).all()
    ]


@router.get("/monthly", response_model=MonthlyInvoiceSummary)
def monthly(
    month: str = Query(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    db: Session = Depends(get_db),
):
    return monthly_invoice_summary(_current_invoices(db, dt.date.today()), month)


@router.get("/dashboard", response_model=DashboardSummary)
def dashboard(db: Session = Depends(get_db)):
    today = dt.date.today()
    return dashboard_summary(_current_invoices(db, today), today)
