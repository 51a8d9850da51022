"""Tests for utility decorators."""

import pytest

from linkedcharts.utils import decorators
from linkedcharts.utils.decorators import retry, timer


def test_retry_succeeds_after_failures(monkeypatch):
    monkeypatch.setattr(decorators.time, "sleep", lambda seconds: None)
    attempts = []

    @retry(max_attempts=3, delay=0.5)
    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise ConnectionError("temporary")
        return "ok"

    assert flaky() == "ok"
    assert len(attempts) == 3


def test_retry_only_retries_listed_exceptions(monkeypatch):
    monkeypatch.setattr(decorators.time, "sleep", lambda seconds: None)
    attempts = []

    @retry(max_attempts=3, exceptions=(ConnectionError,))
    def broken():
        attempts.append(1)
        raise ValueError("not transient")

    with pytest.raises(ValueError):
        broken()
    assert len(attempts) == 1


def test_timer_logs_and_returns(caplog):
    @timer
    def work(x):
        return x * 2

    with caplog.at_level("INFO", logger="linkedcharts.utils.decorators"):
        assert work(21) == 42
    assert "work took" in caplog.text
