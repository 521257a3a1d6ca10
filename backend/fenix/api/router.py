from fastapi import APIRouter

from fenix.api.routes import calendar_events, clients, credit_cards, daily_payments, invoices, payables, reports, rpc, tasks

api_router = APIRouter()

api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(payables.router, prefix="/payables", tags=["payables"])
api_router.include_router(daily_payments.router, prefix="/daily_payments", tags=["daily_payments"])
api_router.include_router(credit_cards.expenses_router, prefix="/credit_card_expenses", tags=["credit_cards"])
api_router.include_router(credit_cards.payments_router, prefix="/credit_card_payments", tags=["credit_cards"])
api_router.include_router(calendar_events.router, prefix="/calendar_events", tags=["calendar"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(rpc.router, prefix="/rpc", tags=["rpc"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
