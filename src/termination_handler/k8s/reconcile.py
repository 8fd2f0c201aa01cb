# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/k8s/reconcile.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..errors import FetchError, UpdateError
from ..observers.dispatcher import EventBus
from ..observers.events import NodeConditionCommitted, stamp
from ..providers.probe import TERMINATION_REQUESTED_MESSAGE, TERMINATION_REQUESTED_REASON
from .client import NodeClient
from .conditions import add_termination_condition, now, termination_condition

log = logging.getLogger("termination_handler")


class ConditionReconciler:
    """
    One fetch, merge and commit cycle against the node's status.
    No retries: the fetch/write pair is not transactional and a conflicting
    writer surfaces as an UpdateError.
    """

    def __init__(
        self,
        client: NodeClient,
        *,
        reason: str = TERMINATION_REQUESTED_REASON,
        message: str = TERMINATION_REQUESTED_MESSAGE,
        bus: Optional[EventBus] = None,
        run_ctx: Optional[dict] = None,
        clock: Callable[[], datetime] = now,
    ):
        self.client = client
        self.reason = reason
        self.message = message
        self.bus = bus
        self.run_ctx = run_ctx or {}
        self._clock = clock

    def reconcile(self, node_name: str) -> bool:
        try:
            node = self.client.get_node(node_name)
        except Exception as exc:
            raise FetchError(f"error fetching node {node_name!r}: {exc}") from exc

        condition = termination_condition(self._clock(), reason=self.reason, message=self.message)
        changed = add_termination_condition(node, condition)
        if not changed:
            log.debug("Node %s already has a Terminating=True condition", node_name)

        try:
            self.client.update_node_status(node)
        except Exception as exc:
            raise UpdateError(f"error updating status of node {node_name!r}: {exc}") from exc

        if self.bus and self.run_ctx:
            self.bus.emit(NodeConditionCommitted(changed=changed, **stamp(self.run_ctx)))
        return changed
