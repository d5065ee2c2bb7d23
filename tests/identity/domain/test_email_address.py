"""Tests for the EmailAddress value object and email normalization."""

import pytest
from identity.shared.email import EmailAddress, normalize_email
from protean.exceptions import ValidationError
from protean.utils import DomainObjects

INVALID_ADDRESSES = [
    "plainaddress",
    "two@@example.com",
    "a@b@example.com",
    ".jane@example.com",
    "jane.@example.com",
    "ja..ne@example.com",
    "jane@localhost",
    "jane@-example.com",
    "jane@example..com",
    "jane doe@example.com",
    "jane;doe@example.com",
]


class TestNormalizeEmail:
    @pytest.mark.parametrize(
        "address",
        ["jane.doe@example.com", "a+tag@sub.example.co.uk", "x_y@example-shop.io"],
    )
    def test_valid_addresses(self, address):
        assert normalize_email(address) == address

    def test_trims_and_lowercases(self):
        assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"

    @pytest.mark.parametrize("address", ["", *INVALID_ADDRESSES])
    def test_invalid_addresses(self, address):
        with pytest.raises(ValueError):
            normalize_email(address)


class TestEmailAddress:
    def test_element_type(self):
        assert EmailAddress.element_type == DomainObjects.VALUE_OBJECT

    def test_requires_address(self):
        with pytest.raises(ValidationError):
            EmailAddress()

    def test_has_max_length(self):
        with pytest.raises(ValidationError):
            EmailAddress(address="a" * 243 + "@example.com")

    def test_parse_normalizes(self):
        assert EmailAddress.parse(" Jane@Example.com ").address == "jane@example.com"

    def test_uppercase_address_rejected(self):
        with pytest.raises((ValueError, ValidationError)):
            EmailAddress(address="Jane@example.com")

    @pytest.mark.parametrize("address", INVALID_ADDRESSES)
    def test_invalid_addresses(self, address):
        with pytest.raises((ValueError, ValidationError)):
            EmailAddress(address=address)

    def test_equality_by_value(self):
        assert EmailAddress(address="jane@example.com") == EmailAddress(address="jane@example.com")
