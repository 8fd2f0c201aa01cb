# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str                    # ISO timestamp
    run_id: str                # correlates all events of one handler run
    node: str
    provider: str
    namespace: Optional[str]

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def new_ctx(node: str, provider: str, namespace: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": _utcnow(),
        "run_id": str(uuid.uuid4()),
        "node": node,
        "provider": provider,
        "namespace": namespace,
    }


def stamp(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a run context with ``ts`` set to the time of emission."""
    return {**ctx, "ts": _utcnow()}


# ---------------------------------------------------------------------
# Handler state machine
# ---------------------------------------------------------------------
POLLING = "Polling"
DETECTED = "Detected"
RECONCILING = "Reconciling"
DONE = "Done"
FAILED = "Failed"
CANCELLED = "Cancelled"

TERMINAL_STATES = frozenset({DONE, FAILED, CANCELLED})


@dataclass(frozen=True)
class HandlerStateChanged(BaseEvent):
    state: str
    previous: Optional[str] = None
    error: Optional[str] = None


# ---------------------------------------------------------------------
# Probing
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ProbeCompleted(BaseEvent):
    attempt: int
    terminating: bool
    duration_ms: int


# ---------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class NodeConditionCommitted(BaseEvent):
    changed: bool
