"""Tests for the periodic background task."""

import threading
import time

import pytest

from landclaim.engine.scheduler import PeriodicTask


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_runs_repeatedly_until_cancelled():
    calls = []
    task = PeriodicTask(0.02, lambda: calls.append(1), name="test-tick")
    task.start()
    assert _wait_for(lambda: len(calls) >= 3)
    task.cancel()
    assert not task.running
    seen = len(calls)
    time.sleep(0.1)
    assert len(calls) == seen


def test_cancel_before_first_interval():
    calls = []
    task = PeriodicTask(10.0, lambda: calls.append(1))
    task.start()
    task.cancel()
    assert calls == []


def test_cancel_from_inside_callback():
    done = threading.Event()
    holder = {}

    def callback():
        holder["task"].cancel()
        done.set()

    holder["task"] = PeriodicTask(0.02, callback)
    holder["task"].start()
    assert done.wait(2.0)
    assert _wait_for(lambda: not holder["task"].running)


def test_failing_callback_stops_task(monkeypatch, caplog):
    calls = []
    unhandled = []
    monkeypatch.setattr(threading, "excepthook", unhandled.append)

    def callback():
        calls.append(1)
        raise RuntimeError("boom")

    task = PeriodicTask(0.02, callback)
    task.start()
    assert _wait_for(lambda: calls and not task.running)
    time.sleep(0.1)
    assert len(calls) == 1
    # Logged once by the task, not re-raised into the thread
    assert unhandled == []
    assert caplog.text.count("failed; stopping") == 1


def test_invalid_interval():
    with pytest.raises(ValueError):
        PeriodicTask(0, lambda: None)


def test_start_twice():
    task = PeriodicTask(10.0, lambda: None)
    task.start()
    try:
        with pytest.raises(RuntimeError):
            task.start()
    finally:
        task.cancel()
