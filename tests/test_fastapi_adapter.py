from __future__ import annotations

from typing import Any, Mapping

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from txboundary.errors import PersistenceError
from txboundary.testkit import CapturingLogger, InMemoryTransaction, StaticProvider
from txboundary_fastapi import build_router, endpoint


class Rejected(Exception):
    pass


def add_one(body: dict) -> dict:
    v = body["value"]
    if v == 41:
        raise Rejected("no 42s allowed")
    return {"result": v + 1}


def parse_input(body: Mapping[str, Any]) -> dict:
    return dict(body)


def make_app(tx: InMemoryTransaction) -> FastAPI:
    app = FastAPI()
    app.include_router(
        build_router(
            path="/add-one",
            method="post",
            handler=add_one,
            provider=StaticProvider(tx),
            input_parser=parse_input,
            output_mapper=lambda out: out,
            logger=CapturingLogger(),
        )
    )
    return app


def test_ok_commits():
    tx = InMemoryTransaction()
    client = TestClient(make_app(tx))
    res = client.post("/add-one", json={"value": 1})
    assert res.status_code == 200
    assert res.json() == {"result": 2}
    assert tx.calls == ["begin", "commit"]


def test_handler_error_rolls_back_and_propagates():
    tx = InMemoryTransaction()
    client = TestClient(make_app(tx), raise_server_exceptions=True)
    with pytest.raises(Rejected):
        client.post("/add-one", json={"value": 41})
    assert tx.calls == ["begin", "rollback"]


def test_handler_error_is_500_without_raising():
    tx = InMemoryTransaction()
    client = TestClient(make_app(tx), raise_server_exceptions=False)
    res = client.post("/add-one", json={"value": 41})
    assert res.status_code == 500


def test_commit_failure_maps_to_persistence_error():
    tx = InMemoryTransaction(fail_on={"commit": PersistenceError("disk full")})
    client = TestClient(make_app(tx))
    res = client.post("/add-one", json={"value": 1})
    assert res.status_code == 500
    body = res.json()
    assert body["error"]["code"] == "persistence_error"
    assert body["error"]["message"] == "disk full"
    assert tx.calls == ["begin", "commit", "rollback"]


def test_provider_failure_maps_to_503():
    def no_handle():
        raise LookupError("no session")

    app = FastAPI()
    app.include_router(
        build_router(
            path="/x",
            method="post",
            handler=lambda body: {"ok": True},
            provider=no_handle,
            logger=CapturingLogger(),
        )
    )
    res = TestClient(app).post("/x", json={})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "provider_unavailable"


def test_endpoint_decorator_and_non_mapping_output():
    tx = InMemoryTransaction()

    @endpoint(method="get", path="/answer", provider=StaticProvider(tx))
    def answer(body: dict) -> int:
        return 42

    app = FastAPI()
    app.include_router(answer)
    res = TestClient(app).get("/answer")
    assert res.status_code == 200
    assert res.json() == {"data": 42}
    assert tx.calls == ["begin", "commit"]


def test_endpoint_decorator_forwards_logger_and_config():
    from txboundary.config import InterceptorConfig

    tx = InMemoryTransaction()
    logger = CapturingLogger()

    @endpoint(
        method="post",
        path="/echo",
        provider=StaticProvider(tx),
        logger=logger,
        config=InterceptorConfig(log_fields=False),
    )
    def echo(body: dict) -> dict:
        return body

    app = FastAPI()
    app.include_router(echo)
    res = TestClient(app).post("/echo", json={"a": 1})
    assert res.json() == {"a": 1}
    assert "Committed automatic transaction" in logger.messages("debug")
    assert all("tx" not in r for r in logger.records)


def test_unsupported_method():
    with pytest.raises(ValueError):
        build_router(
            path="/x",
            method="trace",
            handler=lambda body: None,
            provider=StaticProvider(InMemoryTransaction()),
        )
