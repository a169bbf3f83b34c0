"""Unit tests for the USPS address verification client."""

import http.client
from unittest.mock import MagicMock, patch

from core.http import UpstreamError
from core.models import ConfirmationCode, Matched, SubmittedAddress, Unmatched, VerifiedAddress
from core.settings import Settings
from core.usps import USPSClient, parse_address_response

SUBMITTED = SubmittedAddress(street="123 Main St", city="Springfield", state="IL", zip_code="62704")

ADDRESS_REPLY = {
    "address": {
        "streetAddress": "123 MAIN ST",
        "city": "SPRINGFIELD",
        "state": "IL",
        "ZIPCode": "62704",
        "ZIPPlus4": "1234",
    },
    "additionalInfo": {"DPVConfirmation": "Y"},
}


class TestParseAddressResponse:
    def test_matched_with_dpv(self) -> None:
        outcome = parse_address_response(ADDRESS_REPLY)
        assert outcome == Matched(
            VerifiedAddress("123 MAIN ST", "SPRINGFIELD", "IL", "62704", "1234"),
            ConfirmationCode.CONFIRMED,
        )

    def test_missing_additional_info_is_no_match_code(self) -> None:
        outcome = parse_address_response({"address": ADDRESS_REPLY["address"]})
        assert isinstance(outcome, Matched)
        assert outcome.code is ConfirmationCode.NO_MATCH

    def test_missing_plus4_becomes_empty_string(self) -> None:
        address = dict(ADDRESS_REPLY["address"], ZIPPlus4=None)
        outcome = parse_address_response({"address": address})
        assert isinstance(outcome, Matched)
        assert outcome.address.zip_plus4 == ""

    def test_no_address_with_errors_uses_first_error_text(self) -> None:
        data = {"errors": [{"text": "Address Not Found."}, {"text": "second"}]}
        assert parse_address_response(data) == Unmatched("Address Not Found.")

    def test_no_address_no_errors(self) -> None:
        assert parse_address_response({}) == Unmatched(None)
        assert parse_address_response({"errors": []}) == Unmatched(None)

    def test_missing_required_fields_reported(self) -> None:
        outcome = parse_address_response({"address": {"streetAddress": "1 A ST", "city": "B"}})
        assert isinstance(outcome, Unmatched)
        assert "state" in outcome.reason
        assert "ZIPCode" in outcome.reason

    def test_non_dict_reply(self) -> None:
        assert isinstance(parse_address_response(["nope"]), Unmatched)

    def test_non_string_dpv_is_no_match_code(self) -> None:
        for dpv in (1, True, ["Y"], {"code": "Y"}):
            data = dict(ADDRESS_REPLY, additionalInfo={"DPVConfirmation": dpv})
            outcome = parse_address_response(data)
            assert isinstance(outcome, Matched)
            assert outcome.code is ConfirmationCode.NO_MATCH

    def test_non_dict_additional_info(self) -> None:
        outcome = parse_address_response(dict(ADDRESS_REPLY, additionalInfo="Y"))
        assert isinstance(outcome, Matched)
        assert outcome.code is ConfirmationCode.NO_MATCH


class TestUSPSClientVerify:
    def setup_method(self) -> None:
        self.client = USPSClient("id", "secret", base_url="https://usps.test/", timeout=5)

    def test_missing_credentials_skips_network(self) -> None:
        client = USPSClient("", "")
        with patch("core.usps.fetch_json") as mock_fetch:
            outcome = client.verify(SUBMITTED)
        mock_fetch.assert_not_called()
        assert outcome == Unmatched("USPS credentials are not configured.")

    def test_token_exchange_then_lookup(self) -> None:
        with patch("core.usps.fetch_json", side_effect=[{"access_token": "tok"}, ADDRESS_REPLY]) as mock_fetch:
            outcome = self.client.verify(SUBMITTED)

        assert isinstance(outcome, Matched)
        token_call, lookup_call = mock_fetch.call_args_list

        assert token_call.args[0] == "https://usps.test/oauth2/v3/token"
        assert token_call.kwargs["method"] == "POST"
        assert token_call.kwargs["form"] == {
            "grant_type": "client_credentials",
            "client_id": "id",
            "client_secret": "secret",
        }
        assert token_call.kwargs["timeout"] == 5

        assert lookup_call.args[0] == "https://usps.test/addresses/v3/address"
        assert lookup_call.kwargs["params"] == {
            "streetAddress": "123 Main St",
            "city": "Springfield",
            "state": "IL",
            "ZIPCode": "62704",
        }
        assert lookup_call.kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_zip_omitted_when_not_given(self) -> None:
        submitted = SubmittedAddress(street="1 A ST", city="B", state="CA")
        with patch("core.usps.fetch_json", side_effect=[{"access_token": "tok"}, {}]) as mock_fetch:
            self.client.verify(submitted)
        assert "ZIPCode" not in mock_fetch.call_args_list[1].kwargs["params"]

    def test_token_failure_collapses_to_unmatched(self) -> None:
        with patch("core.usps.fetch_json", side_effect=UpstreamError("invalid_client", status=401)):
            outcome = self.client.verify(SUBMITTED)
        assert outcome == Unmatched("Failed to get USPS access token: invalid_client")

    def test_token_reply_without_access_token(self) -> None:
        with patch("core.usps.fetch_json", return_value={"token_type": "Bearer"}) as mock_fetch:
            outcome = self.client.verify(SUBMITTED)
        assert mock_fetch.call_count == 1
        assert isinstance(outcome, Unmatched)
        assert "no access_token" in outcome.reason

    def test_lookup_failure_collapses_to_unmatched(self) -> None:
        with patch(
            "core.usps.fetch_json",
            side_effect=[{"access_token": "tok"}, UpstreamError("Address Not Found.", status=404)],
        ):
            outcome = self.client.verify(SUBMITTED)
        assert outcome == Unmatched("Address Not Found.")

    def test_from_settings(self) -> None:
        settings = Settings(
            usps_client_id="a", usps_client_secret="b", usps_base_url="https://x.test", http_timeout=3
        )
        client = USPSClient.from_settings(settings)
        with patch("core.usps.fetch_json", side_effect=[{"access_token": "t"}, {}]) as mock_fetch:
            client.verify(SUBMITTED)
        assert mock_fetch.call_args_list[0].args[0] == "https://x.test/oauth2/v3/token"
        assert mock_fetch.call_args_list[0].kwargs["timeout"] == 3

    def test_truncated_reply_collapses_to_unmatched(self) -> None:
        """A body cut off mid-read comes back as Unmatched, not an exception."""
        token_response = MagicMock()
        token_response.__enter__.return_value.read.return_value = b'{"access_token": "tok"}'
        truncated = MagicMock()
        truncated.__enter__.return_value.read.side_effect = http.client.IncompleteRead(b"{", 10)

        with patch("urllib.request.urlopen", side_effect=[token_response, truncated]):
            outcome = self.client.verify(SUBMITTED)

        assert isinstance(outcome, Unmatched)
        assert outcome.reason.startswith("Request failed:")

    def test_truncated_token_reply_collapses_to_unmatched(self) -> None:
        truncated = MagicMock()
        truncated.__enter__.return_value.read.side_effect = http.client.IncompleteRead(b"", 20)

        with patch("urllib.request.urlopen", return_value=truncated):
            outcome = self.client.verify(SUBMITTED)

        assert isinstance(outcome, Unmatched)
        assert outcome.reason.startswith("Failed to get USPS access token: Request failed:")
