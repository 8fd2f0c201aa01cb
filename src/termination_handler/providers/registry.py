# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/providers/registry.py

from __future__ import annotations

from typing import Dict, Optional

import requests

from ..errors import ConfigurationError
from .probe import (
    DEFAULT_REQUEST_TIMEOUT,
    TerminationProbe,
    plain_text_signal,
    scheduled_events_signal,
    status_code_signal,
)

AWS = "aws"
AZURE = "azure"
GCP = "gcp"

AWS_TERMINATION_ENDPOINT_URL = "http://169.254.169.254/latest/meta-data/spot/termination-time"
# https://docs.microsoft.com/en-us/azure/virtual-machines/linux/scheduled-events#endpoint-discovery
AZURE_TERMINATION_ENDPOINT_URL = "http://169.254.169.254/metadata/scheduledevents?api-version=2019-08-01"
GCP_TERMINATION_ENDPOINT_URL = "http://169.254.169.254/computeMetadata/v1/instance/preempted"

PROBES: Dict[str, TerminationProbe] = {
    AWS: TerminationProbe(
        provider=AWS,
        url=AWS_TERMINATION_ENDPOINT_URL,
        predicate=status_code_signal,
    ),
    AZURE: TerminationProbe(
        provider=AZURE,
        url=AZURE_TERMINATION_ENDPOINT_URL,
        headers={"Metadata": "true"},
        predicate=scheduled_events_signal,
    ),
    GCP: TerminationProbe(
        provider=GCP,
        url=GCP_TERMINATION_ENDPOINT_URL,
        headers={"Metadata-Flavor": "Google"},
        predicate=plain_text_signal,
    ),
}


def supported_providers() -> list[str]:
    return sorted(PROBES)


def select_probe(
    provider: str,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT,
    session: Optional[requests.Session] = None,
    url: Optional[str] = None,
) -> TerminationProbe:
    """
    Pick the termination probe for ``provider``.

    ``url`` replaces the provider's well-known endpoint (fake endpoints in
    tests, metadata proxies).
    """
    key = (provider or "").strip().lower()
    if not key:
        raise ConfigurationError(
            f"cloud provider not specified; supported: {', '.join(supported_providers())}"
        )
    if key not in PROBES:
        raise ConfigurationError(
            f"cloud provider {provider!r} not supported; supported: {', '.join(supported_providers())}"
        )

    changes = {"timeout": timeout, "session": session}
    if url:
        changes["url"] = url
    return PROBES[key].with_options(**changes)
