# =============================================================================
# core/usps.py  —  USPS Addresses v3 client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a SubmittedAddress into a VerificationOutcome by talking to USPS:
#
#     1. POST /oauth2/v3/token          (client_credentials → bearer token)
#     2. GET  /addresses/v3/address     (submitted fields as query params)
#     3. Map the reply:
#          address present       → Matched(VerifiedAddress, DPV code)
#          address absent        → Unmatched(errors[0].text or None)
#          anything went wrong   → Unmatched(<what went wrong>)
#
# NEVER RAISES:
#   Missing credentials, network errors, bad status codes and malformed
#   replies all come back as Unmatched.  The verdict engine downstream only
#   ever sees the two outcome variants.
#
# NOT HANDLED HERE:
#   Token caching and retries.  Every verify() call does a fresh token
#   exchange.
# =============================================================================

import logging
from typing import Any

from core.http import UpstreamError, fetch_json, first_error_text
from core.models import (
    ConfirmationCode,
    Matched,
    SubmittedAddress,
    Unmatched,
    VerificationOutcome,
    VerifiedAddress,
)
from core.settings import Settings

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth2/v3/token"
ADDRESS_PATH = "/addresses/v3/address"

# USPS field name → VerifiedAddress field name
_REQUIRED_FIELDS = {
    "streetAddress": "street",
    "city": "city",
    "state": "state",
    "ZIPCode": "zip_code",
}


class USPSClient:
    """Address Verification Client backed by the USPS v3 REST API."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = Settings.usps_base_url,
        timeout: float = Settings.http_timeout,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "USPSClient":
        return cls(
            client_id=settings.usps_client_id,
            client_secret=settings.usps_client_secret,
            base_url=settings.usps_base_url,
            timeout=settings.http_timeout,
        )

    def verify(self, submitted: SubmittedAddress) -> VerificationOutcome:
        """Look up `submitted` with USPS.  Always returns, never raises."""
        if not (self._client_id and self._client_secret):
            logger.warning("USPS credentials are not configured")
            return Unmatched("USPS credentials are not configured.")

        try:
            token = self._get_access_token()
            data = self._lookup(submitted, token)
        except UpstreamError as e:
            logger.warning("USPS lookup failed: %s", e.message)
            return Unmatched(e.message)

        return parse_address_response(data)

    # -------------------------------------------------------------------------
    # HTTP calls
    # -------------------------------------------------------------------------
    def _get_access_token(self) -> str:
        try:
            data = fetch_json(
                f"{self._base_url}{TOKEN_PATH}",
                method="POST",
                form={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                },
                timeout=self._timeout,
            )
        except UpstreamError as e:
            raise UpstreamError(f"Failed to get USPS access token: {e.message}", e.status) from e

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise UpstreamError("Failed to get USPS access token: no access_token in response")
        return token

    def _lookup(self, submitted: SubmittedAddress, token: str) -> Any:
        params = {
            "streetAddress": submitted.street,
            "city": submitted.city,
            "state": submitted.state,
        }
        if submitted.zip_code:
            params["ZIPCode"] = submitted.zip_code

        return fetch_json(
            f"{self._base_url}{ADDRESS_PATH}",
            params=params,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self._timeout,
        )


def parse_address_response(data: Any) -> VerificationOutcome:
    """Map a decoded /addresses/v3/address reply onto a VerificationOutcome."""
    if not isinstance(data, dict):
        return Unmatched("USPS returned an unexpected response.")

    address = data.get("address")
    if not address:
        return Unmatched(first_error_text(data.get("errors")))
    if not isinstance(address, dict):
        return Unmatched("USPS returned an unexpected response.")

    missing = [name for name in _REQUIRED_FIELDS if not address.get(name)]
    if missing:
        return Unmatched(
            f"USPS response was missing the verified address fields: {', '.join(missing)}"
        )

    verified = VerifiedAddress(
        **{ours: str(address[theirs]) for theirs, ours in _REQUIRED_FIELDS.items()},
        zip_plus4=str(address.get("ZIPPlus4") or ""),
    )
    additional = data.get("additionalInfo") or {}
    dpv: Any = additional.get("DPVConfirmation") if isinstance(additional, dict) else None
    return Matched(verified, ConfirmationCode.from_dpv(dpv))
