from __future__ import annotations

import logging

import whoishiring.__main__ as entrypoint
from whoishiring.core import telemetry
from whoishiring.core.config import Settings


def test_parse_headers_skips_malformed_pairs() -> None:
    assert telemetry.parse_headers("api-key=abc, x-team = jobs ,broken,=empty") == {"api-key": "abc", "x-team": "jobs"}
    assert telemetry.parse_headers(None) == {}


def test_configure_logging_skips_correlation_when_disabled(monkeypatch) -> None:
    installed: list[bool] = []
    monkeypatch.setattr(telemetry, "_install_log_correlation", lambda: installed.append(True))
    monkeypatch.setattr(logging.getLogger(), "handlers", [logging.NullHandler()])

    telemetry.configure_logging(Settings(otel_log_correlation=False))
    assert installed == []

    telemetry.configure_logging(Settings(otel_log_correlation=True))
    assert installed == [True]


def test_setup_telemetry_is_noop_when_disabled() -> None:
    runtime = telemetry.setup_telemetry(Settings(otel_enabled=False))

    assert runtime.enabled is False
    assert runtime.provider is None
    telemetry.shutdown_telemetry(runtime)


def test_build_exporter_without_endpoint_returns_none(monkeypatch) -> None:
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", raising=False)
    monkeypatch.delenv("OTEL_EXPORTER_OTLP_ENDPOINT", raising=False)

    assert telemetry._build_exporter(Settings(otel_exporter_otlp_endpoint=None)) is None


def test_main_serves_app_on_configured_port(monkeypatch) -> None:
    captured: dict[str, object] = {}

    def fake_run(app: str, **kwargs: object) -> None:
        captured["app"] = app
        captured.update(kwargs)

    monkeypatch.setattr(entrypoint.uvicorn, "run", fake_run)
    monkeypatch.setattr(entrypoint, "get_settings", lambda: Settings(host="0.0.0.0", port=9090))

    entrypoint.main()

    assert captured == {"app": "whoishiring.main:app", "host": "0.0.0.0", "port": 9090}
