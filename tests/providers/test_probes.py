# tests/providers/test_probes.py
from __future__ import annotations

import json

import pytest
import requests

from termination_handler.errors import ConfigurationError, NetworkError, ParseError, ProtocolError
from termination_handler.providers.registry import (
    AWS_TERMINATION_ENDPOINT_URL,
    AZURE_TERMINATION_ENDPOINT_URL,
    GCP_TERMINATION_ENDPOINT_URL,
    select_probe,
    supported_providers,
)

from tests.fakes import FakeSession, connection_refused


def _events(*types):
    return json.dumps({"Events": [{"EventType": t} for t in types]})


# ---- Handler selection ----

def test_supported_providers():
    assert supported_providers() == ["aws", "azure", "gcp"]


def test_select_probe_is_case_insensitive():
    assert select_probe("AWS").url == AWS_TERMINATION_ENDPOINT_URL


@pytest.mark.parametrize("provider", ["", "   ", "openstack"])
def test_select_probe_rejects_unknown_provider(provider):
    with pytest.raises(ConfigurationError):
        select_probe(provider)


def test_select_probe_allows_fake_endpoint():
    probe = select_probe("gcp", url="http://127.0.0.1:8080/preempted", timeout=1.5)
    assert probe.url == "http://127.0.0.1:8080/preempted"
    assert probe.timeout == 1.5
    assert probe.headers == {"Metadata-Flavor": "Google"}
    # registry entry is unchanged
    assert select_probe("gcp").url == GCP_TERMINATION_ENDPOINT_URL


# ---- Variant A: status code ----

def test_aws_not_terminating_on_404_then_terminating_on_200():
    session = FakeSession([(404, "Not Found"), (200, "2026-10-19T10:00:00Z")])
    probe = select_probe("aws", session=session)

    assert probe.probe() is False
    assert probe.probe() is True
    assert session.calls[0]["url"] == AWS_TERMINATION_ENDPOINT_URL
    assert session.calls[0]["headers"] == {}


def test_aws_unexpected_status_is_protocol_error():
    probe = select_probe("aws", session=FakeSession([(500, "boom")]))
    with pytest.raises(ProtocolError) as ei:
        probe.probe()
    assert "500" in str(ei.value)


# ---- Variant B: scheduled events ----

def test_azure_sends_metadata_header_and_detects_preempt():
    session = FakeSession([(200, _events("Reboot")), (200, _events("Freeze", "Preempt"))])
    probe = select_probe("azure", session=session)

    assert probe.probe() is False
    assert probe.probe() is True
    assert session.calls[0]["url"] == AZURE_TERMINATION_ENDPOINT_URL
    assert session.calls[0]["headers"] == {"Metadata": "true"}


def test_azure_empty_events_is_not_terminating():
    probe = select_probe("azure", session=FakeSession([(200, json.dumps({"DocumentIncarnation": 1, "Events": []}))]))
    assert probe.probe() is False


@pytest.mark.parametrize("body", ['{"Events": null}', "{}", '{"Events": [{"EventId": "x"}]}'])
def test_azure_null_or_missing_events_is_not_terminating(body):
    probe = select_probe("azure", session=FakeSession([(200, body)]))
    assert probe.probe() is False


@pytest.mark.parametrize("body", [
    "not json",
    "[1, 2]",
    '{"Events": "Preempt"}',
    '{"Events": {}}',
    '{"Events": ""}',
    '{"Events": [1]}',
    '{"Events": [{"EventType": 5}]}',
])
def test_azure_malformed_body_is_parse_error(body):
    probe = select_probe("azure", session=FakeSession([(200, body)]))
    with pytest.raises(ParseError):
        probe.probe()


# ---- Variant C: plain text ----

@pytest.mark.parametrize("body,expected", [("TRUE", True), ("FALSE", False), ("true", False), ("TRUE\n", False)])
def test_gcp_plain_text(body, expected):
    session = FakeSession([(200, body)])
    probe = select_probe("gcp", session=session)
    assert probe.probe() is expected
    assert session.calls[0]["headers"] == {"Metadata-Flavor": "Google"}


# ---- Transport ----

@pytest.mark.parametrize("provider", ["aws", "azure", "gcp"])
def test_transport_failure_is_network_error(provider):
    probe = select_probe(provider, session=FakeSession([connection_refused]))
    with pytest.raises(NetworkError) as ei:
        probe.probe()
    assert probe.url in str(ei.value)
    assert isinstance(ei.value.__cause__, requests.ConnectionError)


def test_timeout_is_passed_to_transport():
    session = FakeSession([(404, "")])
    select_probe("aws", session=session, timeout=2).probe()
    assert session.calls[0]["timeout"] == 2
