import datetime as dt
import uuid
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fenix.schemas.daily_payment import DailyPaymentCreate, DailyPaymentOut, DailyPaymentUpdate
from fenix.services.daily_payments import DAILY_CATEGORIES, create_daily_payment, update_daily_payment, with_changes


def test_eleven_categories():
    assert len(DAILY_CATEGORIES) == 11
    assert "certificadora" not in DAILY_CATEGORIES


def test_create_computes_total():
    row = DailyPaymentCreate(date=dt.date(2025, 3, 20), ativos=Decimal("100.10"), outros=Decimal("50"), abertura=Decimal("0.90"))
    assert row.total == Decimal("151.00")


def test_create_rejects_mismatched_total():
    with pytest.raises(ValidationError):
        DailyPaymentCreate(date=dt.date(2025, 3, 20), ativos=Decimal("10"), total=Decimal("11"))


def test_negative_category_rejected():
    with pytest.raises(ValidationError):
        DailyPaymentCreate(date=dt.date(2025, 3, 20), distrato=Decimal("-1"))


def test_with_changes_recomputes_total():
    row = DailyPaymentOut(id=uuid.uuid4(), date=dt.date(2025, 3, 20), ativos=Decimal("10.00"), total=Decimal("10.00"))
    post = with_changes(row, {"inativos": Decimal("5.50"), "total": Decimal("999")})
    assert post.total == Decimal("15.50")
    assert row.total == Decimal("10.00")


def test_update_recomputes_total_in_db(db):
    row = create_daily_payment(db, DailyPaymentCreate(date=dt.date(2025, 3, 20), ativos=Decimal("10"), recal_guia=Decimal("2.5")))
    assert row.total == Decimal("12.50")
    updated = update_daily_payment(db, payment_id=row.id, payload=DailyPaymentUpdate(recal_guia=Decimal("7.5"), description="Caixa"))
    assert updated.total == Decimal("17.50")
    assert updated.description == "Caixa"
    assert updated.date == dt.date(2025, 3, 20)
