from __future__ import annotations

import enum


class InvoiceStatus(str, enum.Enum):
    NOT_PAID = "NOT_PAID"  # NAO_PAGO
    OVERDUE = "OVERDUE"  # ATRASADO
    PAID = "PAID"  # PAGO


class InvoiceCategory(str, enum.Enum):
    STANDARD = "STANDARD"
    AWAITING_NOTE = "AWAITING_NOTE"  # AGU-: waiting for the client's official note
    INTERNET = "INTERNET"  # INT-: ad-hoc billing without a client record
    NO_NOTE = "NO_NOTE"  # S/N, S/AN or empty
