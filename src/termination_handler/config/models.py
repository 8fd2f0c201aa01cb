# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/config/models.py

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class HandlerConfig(BaseModel):
    """
    Settings for one termination handler instance.

    ``namespace`` is accepted and carried into the log context, but it does not
    scope node lookup or update: nodes are cluster-scoped.
    """

    cloud_provider: str = ""
    node_name: str
    poll_interval_seconds: float = Field(default=5, gt=0)
    namespace: Optional[str] = None
    request_timeout_seconds: float = Field(default=5, gt=0)
    kube_context: Optional[str] = None

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @field_validator("node_name")
    @classmethod
    def _node_name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("node_name must not be empty")
        return v

    @field_validator("cloud_provider")
    @classmethod
    def _normalize_provider(cls, v: str) -> str:
        return v.strip().lower()
