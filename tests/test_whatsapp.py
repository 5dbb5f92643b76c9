"""Tests for WhatsApp bill links."""

from urllib.parse import parse_qs, unquote, urlparse

import pytest

from dajaj_pos.billing.whatsapp import build_bill_message, build_whatsapp_link, normalize_mobile
from dajaj_pos.errors import InvalidMobileNumberError


class TestNormalizeMobile:
    """Mobile numbers reduce to 10 national digits."""

    @pytest.mark.parametrize("raw", [
        "9876543210",
        "+91 98765 43210",
        "+919876543210",
        "919876543210",
        "98765-43210",
    ])
    def test_valid_numbers(self, raw):
        assert normalize_mobile(raw) == "9876543210"

    def test_ten_digit_number_starting_with_91_is_kept(self):
        assert normalize_mobile("9123456789") == "9123456789"

    @pytest.mark.parametrize("raw", ["", "12345", "98765432101234", "+1 555 0100", None])
    def test_invalid_numbers(self, raw):
        with pytest.raises(InvalidMobileNumberError):
            normalize_mobile(raw)


class TestBuildLink:
    """Link and message contents."""

    def test_message_format(self):
        message = build_bill_message("DAJAJ-000001", 170, "https://x/bill/DAJAJ-000001?token=t")
        assert message.splitlines() == [
            "Thank you for ordering from DAJAJ 🍗",
            "Bill No: DAJAJ-000001",
            "Total: ₹170.00",
            "",
            "View & Download Bill:",
            "https://x/bill/DAJAJ-000001?token=t",
        ]

    def test_link_targets_normalized_number(self):
        link = build_whatsapp_link("+91 98765 43210", "DAJAJ-000001", 170, "tok-123", "https://pos.example.test")

        parsed = urlparse(link)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://wa.me/919876543210"
        text = parse_qs(parsed.query)["text"][0]
        assert "Bill No: DAJAJ-000001" in text
        assert "Total: ₹170.00" in text
        assert "https://pos.example.test/bill/DAJAJ-000001?token=tok-123" in text

    def test_message_is_uri_component_encoded(self):
        link = build_whatsapp_link("9876543210", "DAJAJ-000001", 99.5, "tok", "https://pos.example.test")
        query = link.split("?text=", 1)[1]
        assert " " not in query
        assert "%0A" in query
        assert "Total: ₹99.50" in unquote(query)

    def test_invalid_mobile_builds_nothing(self):
        with pytest.raises(InvalidMobileNumberError):
            build_whatsapp_link("123", "DAJAJ-000001", 10, "tok", "https://pos.example.test")

    @pytest.mark.parametrize("bill_no,token", [("", "tok"), ("DAJAJ-000001", "")])
    def test_bill_number_and_token_required(self, bill_no, token):
        with pytest.raises(ValueError):
            build_whatsapp_link("9876543210", bill_no, 10, token, "https://pos.example.test")
