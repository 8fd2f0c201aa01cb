# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/providers/probe.py

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, Mapping, Optional

import requests

from ..errors import NetworkError, ParseError, ProtocolError

DEFAULT_REQUEST_TIMEOUT = 5.0

TERMINATION_REQUESTED_REASON = "TerminationRequested"
TERMINATION_REQUESTED_MESSAGE = "The cloud provider has marked this instance for termination"

PREEMPT_EVENT_TYPE = "Preempt"


# -----------------------
# Response predicates
# -----------------------
def status_code_signal(resp: requests.Response) -> bool:
    """404 until the instance is marked for termination, then 200."""
    if resp.status_code == 404:
        return False
    if resp.status_code == 200:
        return True
    raise ProtocolError(f"unexpected status from {resp.url}: {resp.status_code}")


def scheduled_events_signal(resp: requests.Response) -> bool:
    """
    Body looks like ``{"Events": [{"EventType": "Preempt", ...}, ...]}``.
    Terminating iff any event is a preemption.
    """
    try:
        doc = json.loads(resp.text)
    except ValueError as exc:
        raise ParseError(f"failed to parse response body from {resp.url}: {exc}") from exc

    if not isinstance(doc, dict):
        raise ParseError(f"unexpected response body from {resp.url}: expected a JSON object")

    events = doc.get("Events")
    if events is None:
        return False
    if not isinstance(events, list):
        raise ParseError(f"unexpected response body from {resp.url}: 'Events' is not a list")

    for event in events:
        if not isinstance(event, dict):
            raise ParseError(f"unexpected response body from {resp.url}: event is not an object")
        event_type = event.get("EventType")
        if event_type is not None and not isinstance(event_type, str):
            raise ParseError(f"unexpected response body from {resp.url}: 'EventType' is not a string")
        if event_type == PREEMPT_EVENT_TYPE:
            return True
    return False


def plain_text_signal(resp: requests.Response) -> bool:
    return resp.text == "TRUE"


# -----------------------
# Probe
# -----------------------
@dataclass(frozen=True)
class TerminationProbe:
    """
    One provider's termination-notice check: a request template plus a
    predicate over the response. ``probe()`` issues exactly one GET.
    """

    provider: str
    url: str
    predicate: Callable[[requests.Response], bool]
    headers: Mapping[str, str] = field(default_factory=dict)
    reason: str = TERMINATION_REQUESTED_REASON
    message: str = TERMINATION_REQUESTED_MESSAGE
    timeout: float = DEFAULT_REQUEST_TIMEOUT
    session: Optional[requests.Session] = field(default=None, compare=False, repr=False)

    def with_options(self, **changes) -> "TerminationProbe":
        return replace(self, **changes)

    def _headers(self) -> Dict[str, str]:
        return dict(self.headers)

    def probe(self) -> bool:
        http = self.session or requests
        try:
            resp = http.get(self.url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"could not get URL {self.url!r}: {exc}") from exc
        return self.predicate(resp)
