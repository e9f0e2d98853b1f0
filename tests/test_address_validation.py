from __future__ import annotations

import pytest

from cityroots.domain.checkout import AddressData, CustomerData, validate_address

from conftest import make_address


def test_valid_address_passes() -> None:
    assert validate_address(make_address()) is None


@pytest.mark.parametrize("postal_code", ["000001", "12345", "1100011", "11000A"])
def test_invalid_pin_codes_are_rejected(postal_code: str) -> None:
    assert validate_address(make_address(postal_code=postal_code)) == "Please enter a valid 6-digit PIN code"


def test_110001_is_accepted() -> None:
    assert validate_address(make_address(postal_code="110001")) is None


def test_missing_fields_are_listed() -> None:
    error = validate_address(make_address(full_name=" ", city=""))
    assert error == "Please fill in all required fields: full name, city"


@pytest.mark.parametrize("phone", ["98765", "98765432101", "98765-4321"])
def test_invalid_phone_is_rejected(phone: str) -> None:
    assert validate_address(make_address(phone=phone)) == "Please enter a valid 10-digit phone number"


def test_unknown_state_is_rejected() -> None:
    assert validate_address(make_address(state="Atlantis")) == "Please select a valid state"


def test_delivery_outside_india_is_rejected() -> None:
    error = validate_address(make_address(country="Nepal"))
    assert error == "Delivery is only available within India"


def test_address_from_camel_case_payload() -> None:
    address = AddressData.from_dict(
        {
            "fullName": " Asha Rao ",
            "addressLine1": "12 MG Road",
            "city": "New Delhi",
            "state": "Delhi",
            "postalCode": "110001",
            "phone": "9876543210",
        }
    )
    assert address.full_name == "Asha Rao"
    assert address.country == "India"
    assert address.to_dict()["postalCode"] == "110001"


def test_customer_is_synthesized_from_address() -> None:
    customer = CustomerData.from_address(make_address())
    assert customer == CustomerData(phone="9876543210", name="Asha Rao", email="", is_verified=True)
