import datetime as dt

from fenix.core.config import settings


def _client(api, interest="1") -> dict:
    r = api.post("/clients/", json={"name": "Oficina Central", "interest_percent": interest})
    assert r.status_code == 200, r.text
    return r.json()


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


def test_invoice_crud_roundtrip(api):
    c = _client(api)
    due = (dt.date.today() - dt.timedelta(days=10)).isoformat()
    r = api.post("/invoices/", json={"invoice_number": "AGU-12", "client_id": c["id"], "original_value": "1000", "due_date": due})
    assert r.status_code == 200, r.text
    inv = r.json()
    assert inv["category"] == "AWAITING_NOTE"
    assert inv["status"] == "OVERDUE"
    assert inv["days_overdue"] == 10
    assert inv["final_value"] == "1100.00"

    r = api.patch(f"/invoices/{inv['id']}", json={"status": "PAID"})
    assert r.status_code == 200
    assert r.json()["status"] == "PAID"
    assert r.json()["payment_date"] == dt.date.today().isoformat()

    r = api.patch(f"/invoices/{inv['id']}", json={"status": "NOT_PAID"})
    assert r.status_code == 409

    assert api.delete(f"/invoices/{inv['id']}").json() == {"ok": True}
    assert api.get("/invoices/").json() == []


def test_unknown_row_is_a_domain_404(api):
    r = api.patch("/payables/00000000-0000-0000-0000-000000000000", json={"description": "x"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Payable not found"


def test_deleting_client_removes_its_invoices(api):
    c = _client(api)
    api.post("/invoices/", json={"invoice_number": "1", "client_id": c["id"], "original_value": "10", "due_date": "2030-01-01"})
    api.post("/invoices/", json={"individual_name": "Carlos", "original_value": "20", "due_date": "2030-01-01"})
    assert api.delete(f"/clients/{c['id']}").status_code == 200
    remaining = api.get("/invoices/").json()
    assert [i["individual_name"] for i in remaining] == ["Carlos"]
    assert remaining[0]["category"] == "INTERNET"


def test_rpc_update_invoice_statuses(api):
    assert api.post("/rpc/update_invoice_statuses").json() == {"updated": 0}


def test_daily_task_requires_token(api):
    assert api.post("/tasks/daily").status_code == 401
    r = api.post("/tasks/daily", headers={"X-Tasks-Token": settings.tasks_daily_secret})
    assert r.json() == {"ok": True, "updated": 0}


def test_daily_payment_total(api):
    r = api.post("/daily_payments/", json={"date": "2025-03-20", "ativos": "120.00", "parcelamentos": "30.25"})
    assert r.status_code == 200, r.text
    assert r.json()["total"] == "150.25"
    r = api.post("/daily_payments/", json={"date": "2025-03-20", "ativos": "1", "total": "5"})
    assert r.status_code == 422


def test_card_payment_upsert_and_calendar(api):
    r = api.put("/credit_card_payments/", json={"year_month": "2025.03", "card": "Nubank", "is_paid": True})
    assert r.status_code == 200
    assert api.put("/credit_card_payments/", json={"year_month": "2025-03", "card": "Nubank", "is_paid": True}).status_code == 422
    assert len(api.get("/credit_card_payments/").json()) == 1

    r = api.post(
        "/calendar_events/",
        json={"title": "DCTFWeb", "date": "2025-03-25", "time": "09:30:00", "created_by": "Ana"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["date"] == "2025-03-25"


def test_monthly_report(api):
    today = dt.date.today()
    api.post("/invoices/", json={"individual_name": "Rita", "original_value": "40", "due_date": today.isoformat()})
    r = api.get("/reports/monthly", params={"month": f"{today.year:04d}-{today.month:02d}"})
    assert r.status_code == 200
    assert r.json()["total"]["count"] == 1
    assert api.get("/reports/monthly", params={"month": "2025-13"}).status_code == 422
