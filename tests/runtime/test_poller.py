# tests/runtime/test_poller.py
from __future__ import annotations

import json

import pytest

from termination_handler.errors import NetworkError, ProtocolError
from termination_handler.observers.dispatcher import EventBus
from termination_handler.observers.events import ProbeCompleted, new_ctx
from termination_handler.providers.registry import select_probe
from termination_handler.runtime.poller import PollingLoop

from tests.fakes import Capture, ClockedEvent, FakeClock, FakeSession, connection_refused


NOT_YET = {
    "aws": (404, ""),
    "azure": (200, json.dumps({"Events": [{"EventType": "Reboot"}]})),
    "gcp": (200, "FALSE"),
}
TERMINATING = {
    "aws": (200, ""),
    "azure": (200, json.dumps({"Events": [{"EventType": "Preempt"}]})),
    "gcp": (200, "TRUE"),
}


class TimedSession(FakeSession):
    """Records the fake clock at each request; optionally takes `latency` seconds."""
    def __init__(self, responses, clock, latency=0.0):
        super().__init__(responses)
        self.clock = clock
        self.latency = latency
        self.started = []

    def get(self, url, headers=None, timeout=None):
        self.started.append(self.clock())
        self.clock.advance(self.latency)
        return super().get(url, headers=headers, timeout=timeout)


@pytest.mark.parametrize("provider", ["aws", "azure", "gcp"])
@pytest.mark.parametrize("k", [0, 1, 3])
def test_k_misses_then_hit_probes_k_plus_one_times_on_interval(provider, k):
    clock = FakeClock()
    session = TimedSession([NOT_YET[provider]] * k + [TERMINATING[provider]], clock)
    loop = PollingLoop(select_probe(provider, session=session), 5, clock=clock)

    assert loop.run(ClockedEvent(clock)) is True
    assert loop.attempts == k + 1
    assert session.started == [5.0 * i for i in range(k + 1)]


def test_interval_is_measured_from_probe_start():
    clock = FakeClock()
    session = TimedSession([(404, ""), (404, ""), (200, "")], clock, latency=1.5)
    cancel = ClockedEvent(clock)
    loop = PollingLoop(select_probe("aws", session=session), 5, clock=clock)

    assert loop.run(cancel) is True
    assert cancel.waits == [3.5, 3.5]
    assert session.started == [0.0, 5.0, 10.0]


def test_slow_probe_means_no_wait():
    clock = FakeClock()
    session = TimedSession([(404, ""), (200, "")], clock, latency=7)
    cancel = ClockedEvent(clock)
    loop = PollingLoop(select_probe("aws", session=session), 5, clock=clock)

    assert loop.run(cancel) is True
    assert cancel.waits == [0.0]


def test_cancel_during_wait_exits_cleanly():
    clock = FakeClock()
    session = TimedSession([(404, ""), (404, "")], clock)
    cancel = ClockedEvent(clock, cancel_after=2)
    loop = PollingLoop(select_probe("aws", session=session), 5, clock=clock)

    assert loop.run(cancel) is False
    assert loop.attempts == 2


def test_already_cancelled_never_probes():
    clock = FakeClock()
    session = TimedSession([], clock)
    cancel = ClockedEvent(clock)
    cancel.set()

    assert PollingLoop(select_probe("aws", session=session), 5, clock=clock).run(cancel) is False
    assert session.calls == []


def test_probe_error_aborts_loop():
    clock = FakeClock()
    session = TimedSession([(404, ""), (500, "")], clock)
    loop = PollingLoop(select_probe("aws", session=session), 5, clock=clock)

    with pytest.raises(ProtocolError):
        loop.run(ClockedEvent(clock))
    assert loop.attempts == 2


def test_network_error_is_not_retried():
    clock = FakeClock()
    session = TimedSession([connection_refused, (200, "")], clock)
    loop = PollingLoop(select_probe("gcp", session=session), 5, clock=clock)

    with pytest.raises(NetworkError):
        loop.run(ClockedEvent(clock))
    assert len(session.calls) == 1


def test_probe_events_emitted():
    clock = FakeClock()
    cap = Capture()
    session = TimedSession([(200, "FALSE"), (200, "TRUE")], clock)
    loop = PollingLoop(
        select_probe("gcp", session=session), 5,
        bus=EventBus([cap]), run_ctx=new_ctx(node="n1", provider="gcp"), clock=clock,
    )

    loop.run(ClockedEvent(clock))
    probes = [e for e in cap.events if isinstance(e, ProbeCompleted)]
    assert [(p.attempt, p.terminating) for p in probes] == [(1, False), (2, True)]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        PollingLoop(select_probe("aws"), 0)
