from __future__ import annotations

from cityroots.core import sentry_integration


def test_init_skipped_without_dsn(monkeypatch) -> None:
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    assert sentry_integration.init_sentry(environment="test") is False


def test_init_with_dsn(monkeypatch) -> None:
    calls: list[dict] = []
    monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example/1")
    monkeypatch.setattr(sentry_integration.sentry_sdk, "init", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(sentry_integration, "_initialized", False)

    assert sentry_integration.init_sentry(environment="staging") is True
    assert calls[0]["environment"] == "staging"
    assert calls[0]["send_default_pii"] is False


def test_capture_is_noop_when_not_initialized(monkeypatch) -> None:
    captured: list[Exception] = []
    monkeypatch.setattr(sentry_integration, "_initialized", False)
    monkeypatch.setattr(sentry_integration.sentry_sdk, "capture_exception", captured.append)

    sentry_integration.capture_exception(RuntimeError("boom"), order_number="VC1")

    assert captured == []
