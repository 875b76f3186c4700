import asyncio
import logging

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.logging import RequestIdFilter, request_id_ctx_var
from app.middleware import CorrelationIdMiddleware, TimeoutMiddleware


def make_app(timeout):
    app = FastAPI()
    app.add_middleware(TimeoutMiddleware, timeout=timeout)
    app.add_middleware(CorrelationIdMiddleware)

    @app.get("/slow")
    async def slow():
        await asyncio.sleep(1)
        return {"ok": True}

    @app.get("/fast")
    async def fast():
        return {"request_id": request_id_ctx_var.get()}

    return app


async def test_slow_request_times_out_with_503():
    transport = ASGITransport(app=make_app(timeout=0.05))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/slow")
    assert resp.status_code == 503
    assert resp.json() == {"error": "Request timed out"}


async def test_fast_request_sees_request_id():
    transport = ASGITransport(app=make_app(timeout=5))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        resp = await ac.get("/fast", headers={"X-Request-ID": "req-42"})
    assert resp.status_code == 200
    assert resp.json() == {"request_id": "req-42"}
    assert resp.headers["x-request-id"] == "req-42"


def test_request_id_filter_defaults_to_none():
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    assert RequestIdFilter().filter(record)
    assert record.request_id == "none"
