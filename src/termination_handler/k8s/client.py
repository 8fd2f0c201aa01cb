# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/k8s/client.py
from __future__ import annotations

import logging
from typing import Optional, Protocol

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

log = logging.getLogger("termination_handler")


class NodeClient(Protocol):
    def get_node(self, name: str) -> client.V1Node: ...
    def update_node_status(self, node: client.V1Node) -> None: ...


def load_cluster_config(kube_context: Optional[str] = None) -> None:
    """
    Load cluster credentials: in-cluster service account first, then the
    local kubeconfig (optionally a specific context).
    """
    if kube_context is None:
        try:
            config.load_incluster_config()
            log.debug("Using in-cluster configuration")
            return
        except ConfigException:
            log.debug("Not running in a cluster, falling back to kubeconfig")

    config.load_kube_config(context=kube_context)


class KubernetesNodeClient:
    """NodeClient backed by the CoreV1 API."""

    def __init__(self, api: Optional[client.CoreV1Api] = None):
        self.api = api or client.CoreV1Api()

    def get_node(self, name: str) -> client.V1Node:
        return self.api.read_node(name=name)

    def update_node_status(self, node: client.V1Node) -> None:
        # Carries metadata.resourceVersion, so a concurrent writer makes this 409.
        self.api.replace_node_status(name=node.metadata.name, body=node)
