# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/logging/log.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path


def init_logging(
    *,
    name: str = "termination_handler",
    verbose: bool = False,
    log_dir: Path | None = None,
) -> logging.Logger:
    """
    Initializes:
      - console output (INFO, DEBUG when --debug is passed)
      - optional full-trace log file under log_dir
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        fh = logging.FileHandler(log_dir / f"{name}-{ts}.log")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    return logger


class ContextAdapter(logging.LoggerAdapter):
    """Prefixes every message with key=value pairs, e.g. ``node=ip-10-0-0-1``."""

    def process(self, msg, kwargs):
        ctx = " ".join(f"{k}={v}" for k, v in self.extra.items() if v)
        if ctx:
            msg = f"[{ctx}] {msg}"
        return msg, kwargs


def with_values(logger: logging.Logger | logging.LoggerAdapter, **values) -> ContextAdapter:
    """Return an adapter carrying ``values`` (merged with any existing context)."""
    extra = {}
    if isinstance(logger, logging.LoggerAdapter):
        extra.update(logger.extra or {})
        logger = logger.logger
    extra.update(values)
    return ContextAdapter(logger, extra)
