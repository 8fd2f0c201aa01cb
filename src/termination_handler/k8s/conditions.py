# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/k8s/conditions.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from kubernetes import client

from ..providers.probe import TERMINATION_REQUESTED_MESSAGE, TERMINATION_REQUESTED_REASON

TERMINATING_CONDITION_TYPE = "Terminating"
CONDITION_TRUE = "True"


def now() -> datetime:
    # API server timestamps have second precision
    return datetime.now(timezone.utc).replace(microsecond=0)


def termination_condition(
    at: Optional[datetime] = None,
    reason: str = TERMINATION_REQUESTED_REASON,
    message: str = TERMINATION_REQUESTED_MESSAGE,
) -> client.V1NodeCondition:
    at = at or now()
    return client.V1NodeCondition(
        type=TERMINATING_CONDITION_TYPE,
        status=CONDITION_TRUE,
        last_heartbeat_time=at,
        last_transition_time=at,
        reason=reason,
        message=message,
    )


def has_termination_condition(node: client.V1Node) -> bool:
    """True if the node already has a condition of type Terminating."""
    for condition in _conditions(node):
        if condition.type == TERMINATING_CONDITION_TYPE:
            return True
    return False


def _conditions(node: client.V1Node) -> List[client.V1NodeCondition]:
    if node.status is None:
        return []
    return node.status.conditions or []


def add_termination_condition(
    node: client.V1Node,
    condition: Optional[client.V1NodeCondition] = None,
) -> bool:
    """
    Merge a Terminating=True condition into ``node.status.conditions``.

    - absent: appended at the end
    - present with status True: left untouched (timestamps included)
    - present with any other status: replaced in place

    Returns True if the condition list changed.
    """
    condition = condition or termination_condition()

    if node.status is None:
        node.status = client.V1NodeStatus()

    if not has_termination_condition(node):
        node.status.conditions = list(_conditions(node)) + [condition]
        return True

    changed = False
    merged: List[client.V1NodeCondition] = []
    for existing in _conditions(node):
        if existing.type != TERMINATING_CONDITION_TYPE:
            merged.append(existing)
            continue
        if existing.status == CONDITION_TRUE:
            merged.append(existing)
            continue
        merged.append(condition)
        changed = True

    node.status.conditions = merged
    return changed
