from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass

from fenix.schemas.calendar_event import CalendarEventOut
from fenix.schemas.client import ClientOut
from fenix.schemas.credit_card import CreditCardExpenseOut, CreditCardPaymentOut
from fenix.schemas.daily_payment import DailyPaymentOut
from fenix.schemas.invoice import InvoiceOut
from fenix.schemas.payable import PayableOut


@dataclass(frozen=True)
class LedgerState:
    """Everything a session renders. Replaced as a whole, never edited field by field."""

    clients: tuple[ClientOut, ...] = ()
    invoices: tuple[InvoiceOut, ...] = ()
    payables: tuple[PayableOut, ...] = ()
    daily_payments: tuple[DailyPaymentOut, ...] = ()
    credit_card_expenses: tuple[CreditCardExpenseOut, ...] = ()
    credit_card_payments: tuple[CreditCardPaymentOut, ...] = ()
    events: tuple[CalendarEventOut, ...] = ()

    loading: bool = False
    payables_from_cache: bool = False
    synced_at: dt.datetime | None = None

    def client_by_id(self, client_id: uuid.UUID | None) -> ClientOut | None:
        if client_id is None:
            return None
        return next((c for c in self.clients if c.id == client_id), None)

    def find(self, field: str, record_id: uuid.UUID):
        return next((r for r in getattr(self, field) if r.id == record_id), None)
