# =============================================================================
# core/address_verdict.py  —  Address Verdict Engine
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Takes the caller's SubmittedAddress and the VerificationOutcome from USPS
#   and decides ONE verdict: Valid, CorrectedSuggestion, AccuracySuggestion,
#   or Invalid.
#
# THE DECISION ORDER (this order matters):
#   1. Unmatched                          → Invalid(reason)
#   2. Street was rewritten by USPS       → CorrectedSuggestion
#      (wins even over a "Confirmed" DPV code)
#   3. Street unchanged, DPV Confirmed    → Valid
#   4. Street unchanged, secondary issue  → AccuracySuggestion
#   5. Street unchanged, anything else    → Invalid (generic)
#
# PURITY:
#   evaluate() has no I/O, no state, and cannot raise.  Same inputs, same
#   verdict, every time, safe to call from any number of tool calls at once.
# =============================================================================

from core.models import (
    AccuracySuggestion,
    ConfirmationCode,
    CorrectedSuggestion,
    Invalid,
    SubmittedAddress,
    Unmatched,
    Valid,
    Verdict,
    VerificationOutcome,
    VerifiedAddress,
)

_SECONDARY_CODES = {
    ConfirmationCode.SECONDARY_MISSING,
    ConfirmationCode.SECONDARY_INVALID,
}


def normalize_street(street: str) -> str:
    """Trim and uppercase a street line for comparison.

    Internal whitespace and punctuation are left alone, so "123 Main  St"
    and "123 Main St." both count as corrections of "123 MAIN ST".
    """
    return street.strip().upper()


def format_address(address: VerifiedAddress) -> str:
    """Render a verified address as "STREET, CITY, ST 12345-6789"."""
    return (
        f"{address.street}, {address.city}, {address.state} "
        f"{address.zip_code}-{address.zip_plus4}"
    )


def evaluate(submitted: SubmittedAddress, outcome: VerificationOutcome) -> Verdict:
    """Classify a verification outcome into a single verdict.

    Args:
        submitted: The address as the caller sent it.
        outcome: Matched(verified, code) or Unmatched(reason) from the client.

    Returns:
        Exactly one of Valid, CorrectedSuggestion, AccuracySuggestion, Invalid.
    """
    if isinstance(outcome, Unmatched):
        return Invalid(outcome.reason)

    verified = outcome.address
    suggested = format_address(verified)

    # Street mismatch is checked BEFORE the DPV code and overrides it.
    if normalize_street(submitted.street) != normalize_street(verified.street):
        return CorrectedSuggestion(suggested)

    if outcome.code is ConfirmationCode.CONFIRMED:
        return Valid()
    if outcome.code in _SECONDARY_CODES:
        return AccuracySuggestion(suggested)
    return Invalid()


def render_verdict(verdict: Verdict) -> str:
    """Turn a verdict into the text returned by the validate-address tool."""
    return verdict.message
