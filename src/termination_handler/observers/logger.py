# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

import logging

from .events import BaseEvent


class LoggerObserver:
    def __init__(self, logger: logging.Logger, level: int = logging.DEBUG):
        self.logger = logger
        self.level = level

    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        etype = event.__class__.__name__
        msg = ", ".join(f"{k}={v}" for k, v in d.items() if k not in ("ts",))

        self.logger.log(self.level, f"[EVENT] {etype}: {msg}")
