# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/cli/signals.py
from __future__ import annotations

import os
import signal
import threading

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def setup_signal_handler() -> threading.Event:
    """
    Return an Event that is set on the first SIGINT/SIGTERM.
    A second signal exits immediately with status 1.
    Must be called from the main thread.
    """
    stop = threading.Event()

    def _handle(signum, frame):
        if stop.is_set():
            os._exit(1)
        stop.set()

    for sig in SHUTDOWN_SIGNALS:
        signal.signal(sig, _handle)
    return stop
