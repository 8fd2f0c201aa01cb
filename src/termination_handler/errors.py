# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/errors.py


class TerminationHandlerError(RuntimeError):
    """Base class for termination handler failures."""


class ConfigurationError(TerminationHandlerError):
    """Raised when a handler cannot be constructed from its configuration."""


class PollError(TerminationHandlerError):
    """Base class for failures while probing a termination endpoint."""


class NetworkError(PollError):
    """The request to the metadata endpoint did not complete."""


class ProtocolError(PollError):
    """The metadata endpoint answered with an unexpected status code."""


class ParseError(PollError):
    """The metadata endpoint answered with a body of the wrong shape."""


class ReconcileError(TerminationHandlerError):
    """Base class for failures while updating the node status."""


class FetchError(ReconcileError):
    pass


class UpdateError(ReconcileError):
    pass
