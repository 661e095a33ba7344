from xml_schema_infer import run_server
from xml_schema_infer.app import app


def _record_runs(monkeypatch):
    calls = []

    def fake_run(*args, **kwargs):
        calls.append((args, kwargs))

    monkeypatch.setattr(run_server.uvicorn, "run", fake_run)
    return calls


def test_main_serves_inference_app_on_configured_address(monkeypatch):
    calls = _record_runs(monkeypatch)
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9001")

    run_server.main()

    assert calls == [((app,), {"host": "127.0.0.1", "port": 9001})]


def test_main_defaults(monkeypatch):
    calls = _record_runs(monkeypatch)
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)

    run_server.main()

    assert calls == [((app,), {"host": "0.0.0.0", "port": 8000})]
