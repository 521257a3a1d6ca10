from __future__ import annotations

import asyncio
import datetime as dt
import logging
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any

from pydantic import BaseModel, ValidationError

from fenix.models.enums import InvoiceStatus
from fenix.schemas.calendar_event import CalendarEventCreate
from fenix.schemas.client import ClientCreate, ClientUpdate
from fenix.schemas.credit_card import CreditCardExpenseCreate, CreditCardExpenseUpdate, CreditCardPaymentUpsert
from fenix.schemas.daily_payment import DailyPaymentCreate, DailyPaymentUpdate
from fenix.schemas.invoice import InvoiceCreate, InvoiceUpdate
from fenix.schemas.payable import PayableCreate, PayableOut, PayableUpdate
from fenix.services.daily_payments import DAILY_CATEGORIES, with_changes
from fenix.services.derivation import derive_invoice, derive_payable, payable_status, q_brl
from fenix.sync.backend import BackendError, BackendUnavailable, LedgerBackend
from fenix.sync.local_store import LocalStore, load_payables, save_payables
from fenix.sync.reconcile import (
    CALENDAR_EVENTS,
    CLIENTS,
    CREDIT_CARD_EXPENSES,
    CREDIT_CARD_PAYMENTS,
    DAILY_PAYMENTS,
    INVOICES,
    PAYABLES,
    Entity,
    Fallback,
    WriteOutcome,
    WriteStatus,
    apply_payables_fallback,
    apply_write,
    drop_client_invoices,
    fallback_for,
    merge_record,
    remove_record,
)
from fenix.sync.state import LedgerState

logger = logging.getLogger(__name__)

CLEARABLE_PAYABLE_FIELDS = frozenset({"term", "payment_date"})


def _invalid(message: str) -> WriteOutcome:
    return WriteOutcome(WriteStatus.INVALID, error=message)


def _coerce(model: type[BaseModel], data: BaseModel | dict[str, Any]) -> BaseModel:
    if isinstance(data, model):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    return model.model_validate(data)


class LedgerSync:
    """
    Client-side copy of the shared ledger.

    sync_once() refreshes everything from the backend and re-derives invoice/payable
    aging against today; the write actions push a change to the backend and reconcile
    the answer into the state. Every action returns a WriteOutcome instead of raising.
    """

    def __init__(
        self,
        backend: LedgerBackend,
        store: LocalStore,
        *,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self._backend = backend
        self._store = store
        self._today = today
        self._state = LedgerState()
        self._closed = False

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop accepting results: anything still in flight is discarded when it lands."""
        self._closed = True

    async def aclose(self) -> None:
        self.close()
        await self._backend.aclose()

    def _publish(self, state: LedgerState) -> bool:
        if self._closed:
            logger.debug("Session closed; discarding state update")
            return False
        self._state = state
        return True

    def _publish_payables(self, state: LedgerState) -> None:
        if self._publish(state):
            save_payables(self._store, state.payables)

    # Sync cycle

    async def _fetch(self, entity: Entity) -> tuple:
        rows = await self._backend.select(entity.table)
        try:
            return tuple(entity.record.model_validate(row) for row in rows)
        except ValidationError as e:
            raise BackendError(f"{entity.table}: malformed rows from backend: {e}") from e

    async def _fetch_payables(self) -> tuple[tuple[PayableOut, ...], bool]:
        """Only an unreachable backend falls back to the cache; a refusal aborts the cycle."""
        try:
            return await self._fetch(PAYABLES), False
        except BackendUnavailable as e:
            logger.warning("Payables unreachable (%s); reading the local cache", e)
            return tuple(load_payables(self._store)), True

    async def sync_once(self, *, silent: bool = True) -> bool:
        """
        One synchronization cycle. Returns False when the fetch failed and the
        previous state was kept.
        """
        if not silent:
            self._publish(replace(self._state, loading=True))
        try:
            return await self._cycle()
        finally:
            if not silent and self._state.loading:
                self._publish(replace(self._state, loading=False))

    async def _cycle(self) -> bool:
        try:
            await self._backend.rpc("update_invoice_statuses")
        except BackendError as e:
            logger.warning("Backend status recomputation failed: %s", e)

        results = await asyncio.gather(
            self._fetch(CLIENTS),
            self._fetch(INVOICES),
            self._fetch(DAILY_PAYMENTS),
            self._fetch(CREDIT_CARD_EXPENSES),
            self._fetch(CREDIT_CARD_PAYMENTS),
            self._fetch(CALENDAR_EVENTS),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BackendError):
                logger.warning("Sync fetch failed, keeping previous data: %s", result)
                return False
            if isinstance(result, BaseException):
                raise result
        clients, invoices, daily, expenses, card_payments, events = results

        try:
            payables, from_cache = await self._fetch_payables()
        except BackendError as e:
            logger.warning("Payables fetch refused, keeping previous data: %s", e)
            return False

        today = self._today()
        by_id = {c.id: c for c in clients}
        invoices = tuple(derive_invoice(i, by_id.get(i.client_id), today) for i in invoices)
        payables = tuple(derive_payable(p, today) for p in payables)

        self._publish_payables(
            LedgerState(
                clients=clients,
                invoices=invoices,
                payables=payables,
                daily_payments=daily,
                credit_card_expenses=expenses,
                credit_card_payments=card_payments,
                events=events,
                loading=False,
                payables_from_cache=from_cache,
                synced_at=dt.datetime.now(dt.timezone.utc),
            )
        )
        logger.debug(
            "Synced %s clients, %s invoices, %s payables (cache=%s)", len(clients), len(invoices), len(payables), from_cache
        )
        return True

    # Write path

    async def _write(
        self,
        entity: Entity,
        call: Callable[[], Awaitable[Any]],
        *,
        removed_id: uuid.UUID | None = None,
        tentative: tuple | None = None,
        record: Any = None,
    ) -> WriteOutcome:
        """
        Push one change and reconcile the answer. On failure the entity's fallback
        policy decides: LOCAL_CACHE keeps the intended collection (`tentative`) in the
        local store, REJECT leaves memory untouched.
        """
        try:
            row = await call()
            canonical = entity.record.model_validate(row) if row is not None else None
        except (BackendError, ValidationError) as e:
            if fallback_for(entity) == Fallback.LOCAL_CACHE and tentative is not None:
                return self._cache_payables(tentative, record, e)
            logger.warning("%s write rejected: %s", entity.table, e)
            return WriteOutcome(WriteStatus.REJECTED, error=str(e))

        state = apply_write(self._state, entity, record=canonical, removed_id=removed_id)
        if fallback_for(entity) == Fallback.LOCAL_CACHE:
            self._publish_payables(state)
        else:
            self._publish(state)
        return WriteOutcome(WriteStatus.APPLIED, record=canonical)

    def _cache_payables(self, tentative: tuple, record: Any, error: Exception) -> WriteOutcome:
        logger.info("Payables write failed (%s); keeping it in the local cache", error)
        if not self._closed:
            save_payables(self._store, tentative)
            self._publish(apply_payables_fallback(self._state, tuple(load_payables(self._store))))
        return WriteOutcome(WriteStatus.CACHED, record=record)

    # Clients

    async def add_client(self, payload: ClientCreate | dict) -> WriteOutcome:
        try:
            payload = _coerce(ClientCreate, payload)
        except ValidationError as e:
            return _invalid(str(e))
        return await self._write(CLIENTS, lambda: self._backend.insert(CLIENTS.table, payload.model_dump(mode="json")))

    async def update_client(self, client_id: uuid.UUID, changes: ClientUpdate | dict) -> WriteOutcome:
        if self._state.client_by_id(client_id) is None:
            return _invalid("Unknown client")
        try:
            changes = _coerce(ClientUpdate, changes)
        except ValidationError as e:
            return _invalid(str(e))
        body = changes.model_dump(mode="json", exclude_unset=True)
        return await self._write(CLIENTS, lambda: self._backend.update(CLIENTS.table, client_id, body))

    async def delete_client(self, client_id: uuid.UUID) -> WriteOutcome:
        if self._state.client_by_id(client_id) is None:
            return _invalid("Unknown client")
        outcome = await self._write(
            CLIENTS, lambda: self._backend.delete(CLIENTS.table, client_id), removed_id=client_id
        )
        if outcome.ok:
            self._publish(drop_client_invoices(self._state, client_id))
        return outcome

    # Invoices

    async def add_invoice(self, payload: InvoiceCreate | dict) -> WriteOutcome:
        try:
            payload = _coerce(InvoiceCreate, payload)
        except ValidationError as e:
            return _invalid(str(e))
        if payload.client_id is not None and self._state.client_by_id(payload.client_id) is None:
            return _invalid("Unknown client")
        return await self._write(INVOICES, lambda: self._backend.insert(INVOICES.table, payload.model_dump(mode="json")))

    async def update_invoice(self, invoice_id: uuid.UUID, changes: InvoiceUpdate | dict) -> WriteOutcome:
        current = self._state.find(INVOICES.field, invoice_id)
        if current is None:
            return _invalid("Unknown invoice")
        try:
            changes = _coerce(InvoiceUpdate, changes)
        except ValidationError as e:
            return _invalid(str(e))
        if current.status == InvoiceStatus.PAID and changes.status not in (None, InvoiceStatus.PAID):
            return _invalid("Paid invoices cannot be reopened")
        body = changes.model_dump(mode="json", exclude_unset=True)
        return await self._write(INVOICES, lambda: self._backend.update(INVOICES.table, invoice_id, body))

    async def mark_invoice_paid(self, invoice_id: uuid.UUID) -> WriteOutcome:
        """Freeze today's derived values and stamp the payment date. Terminal."""
        current = self._state.find(INVOICES.field, invoice_id)
        if current is None:
            return _invalid("Unknown invoice")
        if current.status == InvoiceStatus.PAID:
            return WriteOutcome(WriteStatus.APPLIED, record=current)

        today = self._today()
        derived = derive_invoice(current, self._state.client_by_id(current.client_id), today)
        changes = InvoiceUpdate(
            status=InvoiceStatus.PAID,
            payment_date=today,
            days_overdue=derived.days_overdue,
            final_value=derived.final_value,
        )
        body = changes.model_dump(mode="json", exclude_unset=True)
        return await self._write(INVOICES, lambda: self._backend.update(INVOICES.table, invoice_id, body))

    async def delete_invoice(self, invoice_id: uuid.UUID) -> WriteOutcome:
        if self._state.find(INVOICES.field, invoice_id) is None:
            return _invalid("Unknown invoice")
        return await self._write(
            INVOICES, lambda: self._backend.delete(INVOICES.table, invoice_id), removed_id=invoice_id
        )

    # Payables: on backend failure the local cache takes the write

    async def add_payable(self, payload: PayableCreate | dict) -> WriteOutcome:
        try:
            payload = _coerce(PayableCreate, payload)
        except ValidationError as e:
            return _invalid(str(e))
        tentative = PayableOut(
            id=uuid.uuid4(),
            description=payload.description.strip(),
            value=q_brl(payload.value),
            due_date=payload.due_date,
            term=payload.term,
            status=payable_status(payload.due_date, self._today()),
        )
        return await self._write(
            PAYABLES,
            lambda: self._backend.insert(PAYABLES.table, payload.model_dump(mode="json")),
            tentative=merge_record(self._state.payables, tentative),
            record=tentative,
        )

    async def update_payable(self, payable_id: uuid.UUID, changes: PayableUpdate | dict) -> WriteOutcome:
        """The status follows the (possibly new) due date unless the edit says PAID."""
        current = self._state.find(PAYABLES.field, payable_id)
        if current is None:
            return _invalid("Unknown payable")
        try:
            changes = _coerce(PayableUpdate, changes)
        except ValidationError as e:
            return _invalid(str(e))

        today = self._today()
        # term and payment_date may be cleared; a null anywhere else means "unchanged".
        edited = {
            k: v
            for k, v in changes.model_dump(exclude_unset=True).items()
            if v is not None or k in CLEARABLE_PAYABLE_FIELDS
        }
        if "value" in edited:
            edited["value"] = q_brl(edited["value"])
        post = current.model_copy(update=edited)
        if post.status == InvoiceStatus.PAID:
            post = post.model_copy(update={"payment_date": post.payment_date or today})
        else:
            post = post.model_copy(update={"status": payable_status(post.due_date, today), "payment_date": None})

        body = PayableUpdate(
            description=post.description,
            value=post.value,
            due_date=post.due_date,
            term=post.term,
            status=post.status,
            payment_date=post.payment_date,
        ).model_dump(mode="json")
        return await self._write(
            PAYABLES,
            lambda: self._backend.update(PAYABLES.table, payable_id, body),
            tentative=merge_record(self._state.payables, post),
            record=post,
        )

    async def mark_payable_paid(self, payable_id: uuid.UUID) -> WriteOutcome:
        return await self.update_payable(payable_id, {"status": InvoiceStatus.PAID, "payment_date": self._today()})

    async def delete_payable(self, payable_id: uuid.UUID) -> WriteOutcome:
        if self._state.find(PAYABLES.field, payable_id) is None:
            return _invalid("Unknown payable")
        return await self._write(
            PAYABLES,
            lambda: self._backend.delete(PAYABLES.table, payable_id),
            removed_id=payable_id,
            tentative=remove_record(self._state.payables, payable_id),
        )

    # Daily ledger

    async def add_daily_payment(self, payload: DailyPaymentCreate | dict) -> WriteOutcome:
        try:
            payload = _coerce(DailyPaymentCreate, payload)
        except ValidationError as e:
            return _invalid(str(e))
        return await self._write(
            DAILY_PAYMENTS, lambda: self._backend.insert(DAILY_PAYMENTS.table, payload.model_dump(mode="json"))
        )

    async def update_daily_payment(self, payment_id: uuid.UUID, changes: DailyPaymentUpdate | dict) -> WriteOutcome:
        current = self._state.find(DAILY_PAYMENTS.field, payment_id)
        if current is None:
            return _invalid("Unknown daily payment")
        try:
            changes = _coerce(DailyPaymentUpdate, changes)
        except ValidationError as e:
            return _invalid(str(e))
        post = with_changes(current, changes.model_dump(exclude_unset=True))
        body = DailyPaymentUpdate.model_validate(
            post.model_dump(include={"date", "description", *DAILY_CATEGORIES})
        ).model_dump(mode="json")
        return await self._write(
            DAILY_PAYMENTS, lambda: self._backend.update(DAILY_PAYMENTS.table, payment_id, body)
        )

    async def delete_daily_payment(self, payment_id: uuid.UUID) -> WriteOutcome:
        if self._state.find(DAILY_PAYMENTS.field, payment_id) is None:
            return _invalid("Unknown daily payment")
        return await self._write(
            DAILY_PAYMENTS, lambda: self._backend.delete(DAILY_PAYMENTS.table, payment_id), removed_id=payment_id
        )

    # Credit cards

    async def add_card_expense(self, payload: CreditCardExpenseCreate | dict) -> WriteOutcome:
        try:
            payload = _coerce(CreditCardExpenseCreate, payload)
        except ValidationError as e:
            return _invalid(str(e))
        return await self._write(
            CREDIT_CARD_EXPENSES,
            lambda: self._backend.insert(CREDIT_CARD_EXPENSES.table, payload.model_dump(mode="json")),
        )

    async def update_card_expense(self, expense_id: uuid.UUID, changes: CreditCardExpenseUpdate | dict) -> WriteOutcome:
        if self._state.find(CREDIT_CARD_EXPENSES.field, expense_id) is None:
            return _invalid("Unknown credit card expense")
        try:
            changes = _coerce(CreditCardExpenseUpdate, changes)
        except ValidationError as e:
            return _invalid(str(e))
        body = changes.model_dump(mode="json", exclude_unset=True)
        return await self._write(
            CREDIT_CARD_EXPENSES, lambda: self._backend.update(CREDIT_CARD_EXPENSES.table, expense_id, body)
        )

    async def delete_card_expense(self, expense_id: uuid.UUID) -> WriteOutcome:
        if self._state.find(CREDIT_CARD_EXPENSES.field, expense_id) is None:
            return _invalid("Unknown credit card expense")
        return await self._write(
            CREDIT_CARD_EXPENSES,
            lambda: self._backend.delete(CREDIT_CARD_EXPENSES.table, expense_id),
            removed_id=expense_id,
        )

    async def set_card_payment(self, year_month: str, card: str, is_paid: bool) -> WriteOutcome:
        """Settles (or reopens) a card's whole bill for the month: every active installment at once."""
        try:
            payload = CreditCardPaymentUpsert(year_month=year_month, card=card, is_paid=is_paid)
        except ValidationError as e:
            return _invalid(str(e))
        return await self._write(
            CREDIT_CARD_PAYMENTS,
            lambda: self._backend.upsert(CREDIT_CARD_PAYMENTS.table, payload.model_dump(mode="json")),
        )

    # Calendar

    async def add_event(self, payload: CalendarEventCreate | dict) -> WriteOutcome:
        try:
            payload = _coerce(CalendarEventCreate, payload)
        except ValidationError as e:
            return _invalid(str(e))
        return await self._write(
            CALENDAR_EVENTS, lambda: self._backend.insert(CALENDAR_EVENTS.table, payload.model_dump(mode="json"))
        )

    async def delete_event(self, event_id: uuid.UUID) -> WriteOutcome:
        if self._state.find(CALENDAR_EVENTS.field, event_id) is None:
            return _invalid("Unknown event")
        return await self._write(
            CALENDAR_EVENTS, lambda: self._backend.delete(CALENDAR_EVENTS.table, event_id), removed_id=event_id
        )
