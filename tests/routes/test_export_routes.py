import asyncio
import json
import zipfile

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer, make_mocked_request

from capset_backend.routes.handlers import export as export_mod
from capset_backend.shared import Result


def _app_with(register_fn):
    app = web.Application()
    routes = web.RouteTableDef()
    register_fn(routes)
    app.add_routes(routes)
    return app


@pytest.mark.asyncio
async def test_export_route_runs_folder_export(dataset, out_dir):
    dataset.image("a.png", caption="red hair")
    dataset.image("b.png")

    client = TestClient(TestServer(_app_with(export_mod.register_export_routes)))
    await client.start_server()
    try:
        resp = await client.post(
            "/capset/export",
            data=json.dumps(
                {
                    "sourcePath": str(dataset.root),
                    "destPath": str(out_dir),
                    "onlyCaptioned": True,
                    "triggerWord": "sks",
                    "sequentialNaming": True,
                }
            ),
            headers={"Content-Type": "application/json"},
        )
        assert resp.status == 200
        payload = await resp.json()
    finally:
        await client.close()

    assert payload["ok"] is True
    assert payload["data"]["exported_count"] == 1
    assert payload["data"]["skipped_count"] == 0
    assert (out_dir / "0001.txt").read_text(encoding="utf-8") == "sks, red hair"


@pytest.mark.asyncio
async def test_export_by_rating_route_zip(dataset, tmp_path):
    dataset.image("g.png")
    dataset.ratings({"g.png": "good"})
    zip_path = tmp_path / "rated.zip"

    client = TestClient(TestServer(_app_with(export_mod.register_export_routes)))
    await client.start_server()
    try:
        resp = await client.post(
            "/capset/export/by-rating",
            json={"source_path": str(dataset.root), "dest_path": str(zip_path), "as_zip": True},
        )
        payload = await resp.json()
    finally:
        await client.close()

    assert payload["ok"] is True
    assert payload["data"]["exported_count"] == 1
    with zipfile.ZipFile(zip_path) as zf:
        assert zf.namelist() == ["good/g.png"]


@pytest.mark.asyncio
async def test_export_route_business_error_is_http_200(tmp_path):
    client = TestClient(TestServer(_app_with(export_mod.register_export_routes)))
    await client.start_server()
    try:
        resp = await client.post(
            "/capset/export",
            json={"source_path": str(tmp_path / "missing"), "dest_path": str(tmp_path / "out")},
        )
        assert resp.status == 200
        payload = await resp.json()
    finally:
        await client.close()

    assert payload["ok"] is False
    assert payload["code"] == "NOT_A_DIRECTORY"
    assert payload["data"] is None


@pytest.mark.asyncio
async def test_export_route_rejects_bad_relative_paths(tmp_path):
    client = TestClient(TestServer(_app_with(export_mod.register_export_routes)))
    await client.start_server()
    try:
        resp = await client.post(
            "/capset/export",
            json={"source_path": str(tmp_path), "dest_path": str(tmp_path / "o"), "relative_paths": "a.png"},
        )
        payload = await resp.json()
    finally:
        await client.close()

    assert payload["ok"] is False
    assert payload["code"] == "INVALID_INPUT"


@pytest.mark.asyncio
async def test_export_route_invalid_json():
    client = TestClient(TestServer(_app_with(export_mod.register_export_routes)))
    await client.start_server()
    try:
        resp = await client.post("/capset/export", data="{nope", headers={"Content-Type": "application/json"})
        payload = await resp.json()
    finally:
        await client.close()

    assert payload["ok"] is False
    assert payload["code"] == "INVALID_JSON"


@pytest.mark.asyncio
async def test_export_route_handles_internal_exception(monkeypatch):
    def _crash(_options):
        raise RuntimeError("boom at /secret/place")

    app = _app_with(export_mod.register_export_routes)
    monkeypatch.setattr(export_mod, "export_dataset", _crash)

    req = make_mocked_request("POST", "/capset/export", app=app)
    monkeypatch.setattr(export_mod, "_read_json", _fake_json({"source_path": "/s", "dest_path": "/d"}))
    match = await app.router.resolve(req)
    resp = await match.handler(req)
    payload = json.loads(resp.text)

    assert payload["ok"] is False
    assert payload["code"] == "EXPORT_FAILED"
    assert "/secret/place" not in payload["error"]


@pytest.mark.asyncio
async def test_run_export_times_out(monkeypatch):
    def _slow(_options):
        import time

        time.sleep(0.5)
        return Result.Ok(None)

    monkeypatch.setattr(export_mod, "EXPORT_TIMEOUT_S", 0.05)
    res = await export_mod._run_export(_slow, object())
    assert not res.ok
    assert res.code == "EXPORT_FAILED"
    assert res.error == "Export timed out"
    # Let the worker thread finish before the loop closes.
    await asyncio.sleep(0.6)


def _fake_json(body):
    async def _read(_request):
        return Result.Ok(body)

    return _read
