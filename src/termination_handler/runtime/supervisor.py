# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/runtime/supervisor.py

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Callable, Optional

log = logging.getLogger("termination_handler")

# How often the stop signal is re-checked while the unit is running.
_SELECT_TICK_SECONDS = 0.1


class Supervisor:
    """
    Runs one cancellable unit of work in a background thread and races it
    against an external stop signal.

    On stop: the unit's cancellation token is set and ``run`` blocks until
    the unit has fully unwound, then returns None. On completion: the unit's
    result is returned (or its exception re-raised) without further waiting.
    """

    def __init__(
        self,
        unit: Callable[[threading.Event], object],
        *,
        name: str = "termination-handler",
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
        tick: float = _SELECT_TICK_SECONDS,
    ):
        self.unit = unit
        self.name = name
        self.log = logger or log
        self.tick = tick
        self.cancel = threading.Event()
        self._started = False
        self._lock = threading.Lock()

    def run(self, stop: threading.Event):
        with self._lock:
            if self._started:
                raise RuntimeError(f"{self.name} supervisor already ran")
            self._started = True

        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=self.name
        )
        try:
            future = executor.submit(self.unit, self.cancel)

            while not stop.is_set():
                done, _ = concurrent.futures.wait([future], timeout=self.tick)
                if done:
                    self.cancel.set()
                    return future.result()

            self.cancel.set()
            self.log.debug("Stop requested, waiting for %s to finish", self.name)
            exc = future.exception()
            if exc is not None:
                self.log.warning("%s exited with an error after stop was requested: %s", self.name, exc)
            return None
        finally:
            executor.shutdown(wait=True)
