# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from termination_handler.config.loader import build_config
from termination_handler.errors import TerminationHandlerError
from termination_handler.handler import new_handler
from termination_handler.logging.log import init_logging
from termination_handler.observers.logger import LoggerObserver
from termination_handler.providers.registry import supported_providers
from termination_handler.cli.signals import setup_signal_handler


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Cloud termination notice handler for Kubernetes nodes")


@app.command()
def run(
    poll_interval_seconds: Optional[float] = typer.Option(
        None,
        "--poll-interval-seconds",
        help="Interval in seconds at which the termination notice endpoint is checked (default: 5)",
    ),
    node_name: Optional[str] = typer.Option(
        None,
        "--node-name",
        envvar="NODE_NAME",
        help="Name of the node the termination handler is running on",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        help="Namespace the machine for the node should live in",
    ),
    cloud_provider: Optional[str] = typer.Option(
        None,
        "--cloud-provider",
        help=f"Cloud provider the handler is running on ({', '.join(supported_providers())})",
    ),
    request_timeout_seconds: Optional[float] = typer.Option(
        None,
        "--request-timeout-seconds",
        help="Timeout for a single metadata request (default: 5)",
    ),
    context: Optional[str] = typer.Option(None, "--context", help="kubeconfig context (outside a cluster)"),
    config: Optional[Path] = typer.Option(None, "--config", help="Handler config YAML"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write a full DEBUG log here"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Poll the termination notice endpoint and mark the node when it fires."""
    logger = init_logging(verbose=debug, log_dir=log_dir)

    try:
        cfg = build_config(
            config,
            overrides={
                "poll_interval_seconds": poll_interval_seconds,
                "node_name": node_name,
                "namespace": namespace,
                "cloud_provider": cloud_provider,
                "request_timeout_seconds": request_timeout_seconds,
                "kube_context": context,
            },
        )
        handler = new_handler(cfg, observers=[LoggerObserver(logger)], logger=logger)
    except TerminationHandlerError as exc:
        logger.error(f"Error constructing termination handler: {exc}")
        raise typer.Exit(code=1)

    stop = setup_signal_handler()

    try:
        handler.run(stop)
    except TerminationHandlerError as exc:
        logger.error(f"Error running termination handler: {exc}")
        raise typer.Exit(code=1)

    logger.info(f"Termination handler finished (state={handler.state})")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
