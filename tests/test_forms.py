from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from donation_tracker.errors import ValidationError
from donation_tracker.forms import (
    compose_address,
    organization_form_defaults,
    split_address,
    validate_donation_form,
    validate_donor_form,
    validate_organization_form,
)
from donation_tracker.models import Organization


def _donor_values(**overrides: str) -> dict[str, str]:
    values = {
        "first_name": " Ann ",
        "last_name": "Lee",
        "street": "12 Elm Street",
        "city": "Springfield",
        "state": "IL",
        "zip": "62701",
        "country": "USA",
        "phone": "555-0101",
        "email": "ann.lee@example.org",
    }
    values.update(overrides)
    return values


def test_donor_form_strips_values() -> None:
    fields = validate_donor_form(_donor_values())
    assert fields.first_name == "Ann"
    assert fields.email == "ann.lee@example.org"


@pytest.mark.parametrize("missing", ["first_name", "city", "country", "email"])
def test_donor_form_requires_every_field(missing: str) -> None:
    with pytest.raises(ValidationError, match="fill in all fields"):
        validate_donor_form(_donor_values(**{missing: "  "}))


@pytest.mark.parametrize("email", ["ann", "ann@example", "ann at example.org"])
def test_donor_form_rejects_malformed_email(email: str) -> None:
    with pytest.raises(ValidationError, match="valid email"):
        validate_donor_form(_donor_values(email=email))


def test_donation_form_parses_values() -> None:
    form = validate_donation_form(
        {"donor_id": "7", "amount": "123.4", "date": date(2024, 5, 6), "payment_method": "Check"}
    )
    assert form.donor_id == 7
    assert form.amount == Decimal("123.40")
    assert form.date == "2024-05-06"
    assert form.payment_method == "Check"

    text_date = validate_donation_form(
        {"donor_id": "7", "amount": "5", "date": "2024-01-31", "payment_method": "Cash"}
    )
    assert text_date.date == "2024-01-31"


@pytest.mark.parametrize("amount", ["abc", "-1", "12.345", "10000000.01", "NaN"])
def test_donation_form_rejects_bad_amounts(amount: str) -> None:
    with pytest.raises(ValidationError, match="valid amount"):
        validate_donation_form(
            {"donor_id": "1", "amount": amount, "date": "2024-01-01", "payment_method": "Cash"}
        )


def test_donation_form_rejects_missing_fields_and_bad_ids() -> None:
    with pytest.raises(ValidationError, match="fill in all fields"):
        validate_donation_form({"donor_id": "1", "amount": "5", "date": "2024-01-01", "payment_method": ""})
    with pytest.raises(ValidationError, match="whole number"):
        validate_donation_form(
            {"donor_id": "one", "amount": "5", "date": "2024-01-01", "payment_method": "Cash"}
        )
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        validate_donation_form(
            {"donor_id": "1", "amount": "5", "date": "01/02/2024", "payment_method": "Cash"}
        )


def test_organization_form_composes_address() -> None:
    form = validate_organization_form(
        {
            "name": "Helping Hands",
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "zip": "62701",
            "country": "USA",
        }
    )
    assert form.address == "1 Main St, Springfield, IL 62701, USA"
    assert form.to_organization() == Organization(
        name="Helping Hands",
        address="1 Main St, Springfield, IL 62701, USA",
    )

    with pytest.raises(ValidationError):
        validate_organization_form({"name": "Helping Hands"})


def test_split_address_reverses_compose_and_falls_back_to_street() -> None:
    address = compose_address("1 Main St", "Springfield", "IL", "62701", "USA")
    assert split_address(address) == {
        "street": "1 Main St",
        "city": "Springfield",
        "state": "IL",
        "zip": "62701",
        "country": "USA",
    }

    multi_word_state = split_address("1 Main St, Salem, New Hampshire 03079, USA")
    assert multi_word_state["state"] == "New Hampshire 03079"
    assert multi_word_state["zip"] == ""

    assert split_address("PO Box 9")["street"] == "PO Box 9"


def test_organization_form_defaults() -> None:
    assert organization_form_defaults(None)["name"] == ""

    defaults = organization_form_defaults(
        Organization(name="Helping Hands", address="1 Main St, Springfield, IL 62701, USA")
    )
    assert defaults["name"] == "Helping Hands"
    assert defaults["city"] == "Springfield"
    assert defaults["zip"] == "62701"
