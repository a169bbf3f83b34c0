# =============================================================================
# core/models.py  —  Data Models (the "nouns" of address validation)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# between the USPS client, the verdict engine, and the MCP tool layer.
#
# THE THREE STAGES:
#   1. SubmittedAddress   — what the caller typed (never modified)
#   2. VerificationOutcome — what USPS said: Matched(...) or Unmatched(...)
#   3. Verdict            — what we tell the caller: Valid, CorrectedSuggestion,
#                           AccuracySuggestion or Invalid
#
# Every model is frozen.  A verification is evaluated once and thrown away;
# nothing here has a lifecycle beyond a single tool call.
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Union


# -----------------------------------------------------------------------------
# SubmittedAddress — the caller's input
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SubmittedAddress:
    """An address exactly as the caller provided it."""

    street: str                        # "123 Main St"
    city: str                          # "Springfield"
    state: str                         # 2-letter code, "IL"
    zip_code: Optional[str] = None     # 5-digit ZIP, optional


# -----------------------------------------------------------------------------
# VerifiedAddress — the USPS-normalized address
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class VerifiedAddress:
    """The standardized address returned by the verification service."""

    street: str                        # "123 MAIN ST"
    city: str                          # "SPRINGFIELD"
    state: str                         # "IL"
    zip_code: str                      # "62704"
    zip_plus4: str = ""                # "1234" (USPS may leave it empty)


# -----------------------------------------------------------------------------
# ConfirmationCode — the DPV (delivery point validation) signal
# -----------------------------------------------------------------------------
# USPS reports DPVConfirmation as a single letter.  Anything we don't
# recognize collapses into NO_MATCH so an unknown code can never be read
# as a positive confirmation.
# -----------------------------------------------------------------------------
class ConfirmationCode(str, Enum):
    CONFIRMED = "Confirmed"                    # DPV "Y"
    SECONDARY_MISSING = "SecondaryMissing"     # DPV "D"
    SECONDARY_INVALID = "SecondaryInvalid"     # DPV "S"
    NO_MATCH = "NoMatch"                       # DPV "N", absent, or unknown

    @classmethod
    def from_dpv(cls, value: Any) -> "ConfirmationCode":
        """Map a raw DPVConfirmation letter to a ConfirmationCode."""
        if not isinstance(value, str):
            return cls.NO_MATCH
        return _DPV_CODES.get(value.strip().upper(), cls.NO_MATCH)


_DPV_CODES: dict[str, ConfirmationCode] = {
    "Y": ConfirmationCode.CONFIRMED,
    "D": ConfirmationCode.SECONDARY_MISSING,
    "S": ConfirmationCode.SECONDARY_INVALID,
}


# -----------------------------------------------------------------------------
# VerificationOutcome — Matched | Unmatched
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Matched:
    """USPS found a standardized address for the submission."""

    address: VerifiedAddress
    code: ConfirmationCode = ConfirmationCode.NO_MATCH


@dataclass(frozen=True)
class Unmatched:
    """USPS found nothing, or the lookup failed before it could answer."""

    reason: Optional[str] = None       # Service-supplied explanation, if any


VerificationOutcome = Union[Matched, Unmatched]


# -----------------------------------------------------------------------------
# Verdict — the engine's output
# -----------------------------------------------------------------------------
# Each variant knows the exact text to surface to the MCP caller.  The
# formatter in core/address_verdict.py just reads `.message`.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Valid:
    @property
    def message(self) -> str:
        return "Address is valid."


@dataclass(frozen=True)
class CorrectedSuggestion:
    formatted_address: str

    @property
    def message(self) -> str:
        return f"Address was corrected. Suggested address: {self.formatted_address}"


@dataclass(frozen=True)
class AccuracySuggestion:
    formatted_address: str

    @property
    def message(self) -> str:
        return f"Address could be more accurate. Suggested address: {self.formatted_address}"


@dataclass(frozen=True)
class Invalid:
    reason: Optional[str] = None       # None → generic "Address is invalid."

    @property
    def message(self) -> str:
        if self.reason:
            return f"Invalid Address. Reason: {self.reason}"
        return "Address is invalid."


Verdict = Union[Valid, CorrectedSuggestion, AccuracySuggestion, Invalid]


# -----------------------------------------------------------------------------
# VerificationClient — the capability the tool layer depends on
# -----------------------------------------------------------------------------
# Anything with a `verify()` method that turns a SubmittedAddress into a
# VerificationOutcome will do.  core/usps.py provides the real one; tests
# pass in fakes.  Implementations must not raise.
# -----------------------------------------------------------------------------
class VerificationClient(Protocol):
    def verify(self, submitted: SubmittedAddress) -> VerificationOutcome: ...
