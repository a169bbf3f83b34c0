"""Shared fixtures."""

import pytest

from core.models import SubmittedAddress, VerificationOutcome
from core.settings import Settings
from tools import mcp_server


class FakeVerificationClient:
    """Returns a fixed outcome and records what it was asked to verify."""

    def __init__(self, outcome: VerificationOutcome) -> None:
        self.outcome = outcome
        self.calls: list[SubmittedAddress] = []

    def verify(self, submitted: SubmittedAddress) -> VerificationOutcome:
        self.calls.append(submitted)
        return self.outcome


@pytest.fixture
def install_client():
    """Install a FakeVerificationClient on the MCP server for one test."""

    def _install(outcome: VerificationOutcome) -> FakeVerificationClient:
        fake = FakeVerificationClient(outcome)
        mcp_server.configure(Settings(), fake)
        return fake

    return _install


@pytest.fixture(autouse=True)
def _reset_server_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mcp_server, "_settings", Settings())
    monkeypatch.setattr(mcp_server, "_verification_client", None)
