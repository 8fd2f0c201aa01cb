# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/runtime/poller.py

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from ..observers.dispatcher import EventBus
from ..observers.events import ProbeCompleted, stamp
from ..providers.probe import TerminationProbe

log = logging.getLogger("termination_handler")


class PollingLoop:
    """
    Drives a TerminationProbe on a fixed interval.

    The first probe fires immediately; each following probe starts
    ``interval`` seconds after the previous one started. Cancellation is
    cooperative: it is observed between probes, never during a request.
    """

    def __init__(
        self,
        probe: TerminationProbe,
        interval: float,
        *,
        bus: Optional[EventBus] = None,
        run_ctx: Optional[dict] = None,
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("poll interval must be positive")
        self.probe = probe
        self.interval = interval
        self.bus = bus
        self.run_ctx = run_ctx or {}
        self.log = logger or log
        self._clock = clock
        self.attempts = 0

    def run(self, cancel: threading.Event) -> bool:
        """
        Returns True once the probe reports termination, False if cancelled
        first. Probe errors propagate unchanged.
        """
        while True:
            if cancel.is_set():
                return False

            started = self._clock()
            self.attempts += 1
            terminating = self.probe.probe()

            if self.bus and self.run_ctx:
                self.bus.emit(
                    ProbeCompleted(
                        attempt=self.attempts,
                        terminating=terminating,
                        duration_ms=int((self._clock() - started) * 1000),
                        **stamp(self.run_ctx),
                    )
                )

            if terminating:
                return True

            self.log.debug("Instance not marked for termination")

            remaining = self.interval - (self._clock() - started)
            if cancel.wait(max(remaining, 0.0)):
                return False
