import httpx
import pytest

from fenix.sync.backend import BackendError, BackendUnavailable, LedgerBackend


def _backend(handler, attempts: int = 1) -> LedgerBackend:
    client = httpx.AsyncClient(base_url="http://ledger.test", transport=httpx.MockTransport(handler))
    return LedgerBackend(client=client, retry_attempts=attempts)


@pytest.mark.asyncio
async def test_select_and_update_paths():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.method == "GET":
            return httpx.Response(200, json=[{"id": "x"}])
        return httpx.Response(200, json={"id": "x", "status": "PAID"})

    backend = _backend(handler)
    assert await backend.select("payables") == [{"id": "x"}]
    assert (await backend.update("invoices", "abc", {"status": "PAID"}))["status"] == "PAID"
    await backend.upsert("credit_card_payments", {"year_month": "2025.03"})
    assert seen == [("GET", "/payables/"), ("PATCH", "/invoices/abc"), ("PUT", "/credit_card_payments/")]


@pytest.mark.asyncio
async def test_domain_rejection_is_backend_error():
    def handler(request):
        return httpx.Response(409, json={"detail": "Paid invoices cannot be reopened"})

    with pytest.raises(BackendError) as e:
        await _backend(handler).update("invoices", "abc", {"status": "NOT_PAID"})
    assert not isinstance(e.value, BackendUnavailable)
    assert e.value.status_code == 409
    assert "reopened" in str(e.value)


@pytest.mark.asyncio
async def test_server_error_is_unavailable():
    def handler(request):
        return httpx.Response(503, text="maintenance")

    with pytest.raises(BackendUnavailable):
        await _backend(handler).select("invoices")


@pytest.mark.asyncio
async def test_missing_table_is_unavailable():
    def handler(request):
        return httpx.Response(404, json={"detail": "Not Found"})

    with pytest.raises(BackendUnavailable):
        await _backend(handler).select("payables")


@pytest.mark.asyncio
async def test_missing_row_is_plain_backend_error():
    def handler(request):
        return httpx.Response(404, json={"detail": "Payable not found"})

    with pytest.raises(BackendError) as e:
        await _backend(handler).delete("payables", "abc")
    assert not isinstance(e.value, BackendUnavailable)


@pytest.mark.asyncio
async def test_transport_errors_are_retried_then_unavailable():
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(BackendUnavailable):
        await _backend(handler, attempts=2).rpc("update_invoice_statuses")
    assert calls["n"] == 2


@pytest.mark.asyncio
async def test_transient_transport_error_recovers():
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, json={"updated": 3})

    assert await _backend(handler, attempts=3).rpc("update_invoice_statuses") == {"updated": 3}


@pytest.mark.asyncio
async def test_rpc_without_body_is_an_empty_answer():
    def handler(request):
        return httpx.Response(204)

    assert await _backend(handler).rpc("update_invoice_statuses") == {}


@pytest.mark.asyncio
async def test_non_json_success_is_unavailable():
    def handler(request):
        return httpx.Response(200, text="<html>proxy login</html>", headers={"content-type": "text/html"})

    with pytest.raises(BackendUnavailable):
        await _backend(handler).select("invoices")
    with pytest.raises(BackendUnavailable):
        await _backend(handler).rpc("update_invoice_statuses")


@pytest.mark.asyncio
async def test_row_write_without_body_is_unavailable():
    def handler(request):
        return httpx.Response(204)

    with pytest.raises(BackendUnavailable):
        await _backend(handler).insert("payables", {"description": "x"})
