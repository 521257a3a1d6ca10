from fenix.models.calendar_event import CalendarEvent
from fenix.models.client import Client
from fenix.models.credit_card import CreditCardExpense, CreditCardPayment
from fenix.models.daily_payment import DailyPayment
from fenix.models.invoice import Invoice
from fenix.models.payable import Payable

__all__ = [
    "CalendarEvent",
    "Client",
    "CreditCardExpense",
    "CreditCardPayment",
    "DailyPayment",
    "Invoice",
    "Payable",
]
