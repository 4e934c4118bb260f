import logging

import pytest

from tally.exceptions import IncompleteScoresError
from tally.utils import sentry


def test_init_skipped_without_dsn(monkeypatch) -> None:
    monkeypatch.delenv("SENTRY_DSN", raising=False)
    called = []
    monkeypatch.setattr(sentry.sentry_sdk, "init", lambda **kw: called.append(kw))
    assert sentry.init_sentry() is False
    assert called == []


def test_init_passes_environment_and_rates(monkeypatch) -> None:
    captured = {}
    monkeypatch.setattr(sentry.sentry_sdk, "init", lambda **kw: captured.update(kw))
    monkeypatch.setenv("SENTRY_DSN", "https://key@example.invalid/1")
    monkeypatch.setenv("SENTRY_ENVIRONMENT", " staging ")
    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "0.25")
    monkeypatch.delenv("SENTRY_PROFILES_SAMPLE_RATE", raising=False)
    monkeypatch.delenv("SENTRY_RELEASE", raising=False)

    assert sentry.init_sentry() is True
    assert captured["environment"] == "staging"
    assert captured["release"] is None
    assert captured["traces_sample_rate"] == 0.25
    assert captured["profiles_sample_rate"] == 0.0
    assert captured["before_send"] is sentry.drop_domain_errors


@pytest.mark.parametrize("raw", ["fast", "-0.1", "1.5"])
def test_bad_sample_rate_falls_back(monkeypatch, caplog, raw) -> None:
    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", raw)
    with caplog.at_level(logging.WARNING, logger="tally.utils.sentry"):
        assert sentry._parse_sample_rate("SENTRY_TRACES_SAMPLE_RATE") == 0.0
    assert "SENTRY_TRACES_SAMPLE_RATE" in caplog.text


def test_domain_errors_are_not_reported() -> None:
    exc = IncompleteScoresError([("A", 12)])
    assert sentry.drop_domain_errors({"id": 1}, {"exc_info": (type(exc), exc, None)}) is None

    boom = RuntimeError("boom")
    event = {"id": 2}
    assert sentry.drop_domain_errors(event, {"exc_info": (RuntimeError, boom, None)}) is event
    assert sentry.drop_domain_errors(event, None) is event
