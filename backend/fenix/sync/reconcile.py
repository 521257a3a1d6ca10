"""
Pure reconciliation of optimistic writes against backend answers.

Nothing here does I/O: the engine decides what happened on the wire and these
functions compute the next LedgerState.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, replace
from typing import Any

from fenix.schemas.calendar_event import CalendarEventOut
from fenix.schemas.client import ClientOut
from fenix.schemas.credit_card import CreditCardExpenseOut, CreditCardPaymentOut
from fenix.schemas.daily_payment import DailyPaymentOut
from fenix.schemas.invoice import InvoiceOut
from fenix.schemas.payable import PayableOut
from fenix.sync.state import LedgerState


class Fallback(str, enum.Enum):
    LOCAL_CACHE = "LOCAL_CACHE"  # degrade to the local store, user sees no error
    REJECT = "REJECT"  # report the failure, keep state as it was


class WriteStatus(str, enum.Enum):
    APPLIED = "APPLIED"  # backend accepted, canonical row merged
    CACHED = "CACHED"  # backend failed, written to the local store instead
    REJECTED = "REJECTED"  # backend failed, nothing changed
    INVALID = "INVALID"  # refused before any network call


@dataclass(frozen=True)
class WriteOutcome:
    status: WriteStatus
    record: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status in (WriteStatus.APPLIED, WriteStatus.CACHED)


@dataclass(frozen=True)
class Entity:
    table: str
    field: str  # LedgerState attribute
    record: type
    fallback: Fallback = Fallback.REJECT


CLIENTS = Entity("clients", "clients", ClientOut)
INVOICES = Entity("invoices", "invoices", InvoiceOut)
PAYABLES = Entity("payables", "payables", PayableOut, Fallback.LOCAL_CACHE)
DAILY_PAYMENTS = Entity("daily_payments", "daily_payments", DailyPaymentOut)
CREDIT_CARD_EXPENSES = Entity("credit_card_expenses", "credit_card_expenses", CreditCardExpenseOut)
CREDIT_CARD_PAYMENTS = Entity("credit_card_payments", "credit_card_payments", CreditCardPaymentOut)
CALENDAR_EVENTS = Entity("calendar_events", "events", CalendarEventOut)


def fallback_for(entity: Entity) -> Fallback:
    return entity.fallback


def merge_record(rows: tuple, record) -> tuple:
    """Replace the row with the same id, or append it. Backend fields win."""
    merged = []
    found = False
    for row in rows:
        if row.id == record.id:
            merged.append(record)
            found = True
        else:
            merged.append(row)
    if not found:
        merged.append(record)
    return tuple(merged)


def remove_record(rows: tuple, record_id: uuid.UUID) -> tuple:
    return tuple(r for r in rows if r.id != record_id)


def apply_write(state: LedgerState, entity: Entity, *, record=None, removed_id: uuid.UUID | None = None) -> LedgerState:
    rows = getattr(state, entity.field)
    if removed_id is not None:
        rows = remove_record(rows, removed_id)
    if record is not None:
        rows = merge_record(rows, record)
    return replace(state, **{entity.field: rows})


def drop_client_invoices(state: LedgerState, client_id: uuid.UUID) -> LedgerState:
    """Mirror of the backend cascade when a client is deleted."""
    return replace(state, invoices=tuple(i for i in state.invoices if i.client_id != client_id))


def apply_payables_fallback(state: LedgerState, cached: tuple[PayableOut, ...]) -> LedgerState:
    return replace(state, payables=cached, payables_from_cache=True)
