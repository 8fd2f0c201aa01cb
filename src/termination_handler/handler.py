# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/handler.py

from __future__ import annotations

import logging
import threading
from typing import List, Optional

import requests

from .config.models import HandlerConfig
from .errors import ConfigurationError
from .k8s.client import KubernetesNodeClient, NodeClient, load_cluster_config
from .k8s.reconcile import ConditionReconciler
from .logging.log import with_values
from .observers.dispatcher import EventBus
from .observers.interface import Observer
from .observers.events import (
    CANCELLED,
    DETECTED,
    DONE,
    FAILED,
    POLLING,
    RECONCILING,
    HandlerStateChanged,
    new_ctx,
    stamp,
)
from .providers.probe import TerminationProbe
from .providers.registry import select_probe
from .runtime.poller import PollingLoop
from .runtime.supervisor import Supervisor

log = logging.getLogger("termination_handler")


class TerminationHandler:
    """
    Watches the provider's termination-notice endpoint for one node and, once
    the instance is marked for termination, sets a Terminating condition on
    the node status.

    One handler performs one run: Polling -> Detected -> Reconciling -> Done,
    or ends in Failed / Cancelled.
    """

    def __init__(
        self,
        cfg: HandlerConfig,
        probe: TerminationProbe,
        node_client: NodeClient,
        *,
        observers: Optional[List[Observer]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.cfg = cfg
        self.probe = probe
        self.node_client = node_client
        self.bus = EventBus(observers or [])
        self.run_ctx = new_ctx(node=cfg.node_name, provider=probe.provider, namespace=cfg.namespace)
        self.log = with_values(logger or log, node=cfg.node_name, namespace=cfg.namespace)
        self.state: Optional[str] = None

        self.poller = PollingLoop(
            probe,
            cfg.poll_interval_seconds,
            bus=self.bus,
            run_ctx=self.run_ctx,
            logger=self.log,
        )
        self.reconciler = ConditionReconciler(
            node_client,
            reason=probe.reason,
            message=probe.message,
            bus=self.bus,
            run_ctx=self.run_ctx,
        )
        self.supervisor = Supervisor(self._run, logger=self.log)

    def _transition(self, state: str, error: Optional[BaseException] = None) -> None:
        previous, self.state = self.state, state
        self.bus.emit(
            HandlerStateChanged(
                state=state,
                previous=previous,
                error=str(error) if error else None,
                **stamp(self.run_ctx),
            )
        )

    def _run(self, cancel: threading.Event) -> None:
        self._transition(POLLING)
        self.log.info("Monitoring node termination (provider=%s, url=%s)", self.probe.provider, self.probe.url)

        try:
            detected = self.poller.run(cancel)
        except Exception as exc:
            self._transition(FAILED, exc)
            raise

        if not detected:
            self._transition(CANCELLED)
            return

        self._transition(DETECTED)
        self.log.info("Instance marked for termination, setting Terminating condition on node")

        self._transition(RECONCILING)
        try:
            self.reconciler.reconcile(self.cfg.node_name)
        except Exception as exc:
            self._transition(FAILED, exc)
            raise

        self._transition(DONE)
        self.log.info("Node marked as terminating")

    def run(self, stop: threading.Event) -> None:
        """
        Block until the run reaches a terminal state or ``stop`` is set.
        Errors from probing or reconciliation are raised to the caller.
        """
        self.supervisor.run(stop)


def new_handler(
    cfg: HandlerConfig,
    *,
    node_client: Optional[NodeClient] = None,
    session: Optional[requests.Session] = None,
    observers: Optional[List[Observer]] = None,
    logger: Optional[logging.Logger] = None,
) -> TerminationHandler:
    """
    Build a handler for the configured cloud provider.

    Raises ConfigurationError for an unknown provider or when the cluster
    credentials cannot be loaded.
    """
    probe = select_probe(
        cfg.cloud_provider,
        timeout=cfg.request_timeout_seconds,
        session=session,
    )

    if node_client is None:
        try:
            load_cluster_config(cfg.kube_context)
        except Exception as exc:
            raise ConfigurationError(f"error loading cluster configuration: {exc}") from exc
        node_client = KubernetesNodeClient()

    return TerminationHandler(cfg, probe, node_client, observers=observers, logger=logger)
