"""Validation for the donor, donation, and organization edit forms.

Each ``validate_*`` function takes the raw values a form produced and returns
clean values or raises :class:`ValidationError` with the message to show. No
storage is touched, so a rejected form can stay open for correction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Mapping

from .errors import ValidationError
from .models import DONOR_FIELD_NAMES, DonorFields, Organization

EMAIL_PATTERN = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,4}\b", re.IGNORECASE)

MAX_DONATION_AMOUNT = Decimal("10000000.00")

DONOR_FIELD_LABELS = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "street": "Street",
    "city": "City",
    "state": "State",
    "zip": "ZIP Code",
    "country": "Country",
    "phone": "Phone",
    "email": "Email",
}

ORGANIZATION_FIELD_LABELS = {
    "name": "Name",
    "street": "Street",
    "city": "City",
    "state": "State",
    "zip": "ZIP Code",
    "country": "Country",
}

_FILL_ALL = "Please fill in all fields."


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_donor_form(values: Mapping[str, object]) -> DonorFields:
    cleaned = {name: _clean(values.get(name)) for name in DONOR_FIELD_NAMES}
    if not all(cleaned.values()):
        raise ValidationError(_FILL_ALL)
    if not EMAIL_PATTERN.search(cleaned["email"]):
        raise ValidationError("Please enter a valid email address.")
    return DonorFields(**cleaned)


@dataclass(frozen=True)
class DonationForm:
    donor_id: int
    amount: Decimal
    date: str
    payment_method: str


def _parse_amount(raw: str) -> Decimal:
    try:
        amount = Decimal(raw)
    except InvalidOperation as exc:
        raise ValidationError("Please enter a valid amount (e.g., 123.45).") from exc

    exponent = amount.as_tuple().exponent
    if (
        not amount.is_finite()
        or amount < 0
        or amount > MAX_DONATION_AMOUNT
        or (isinstance(exponent, int) and exponent < -2)
    ):
        raise ValidationError("Please enter a valid amount (e.g., 123.45).")
    return amount.quantize(Decimal("0.01"))


def _parse_date(raw: object) -> str:
    if isinstance(raw, date):
        return raw.isoformat()
    text = _clean(raw)
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError as exc:
        raise ValidationError("Please enter the date as YYYY-MM-DD.") from exc


def validate_donation_form(values: Mapping[str, object]) -> DonationForm:
    donor_id_text = _clean(values.get("donor_id"))
    amount_text = _clean(values.get("amount"))
    payment_method = _clean(values.get("payment_method"))
    raw_date = values.get("date")

    if not donor_id_text or not amount_text or not payment_method or not _clean(raw_date):
        raise ValidationError(_FILL_ALL)

    try:
        donor_id = int(donor_id_text)
    except ValueError as exc:
        raise ValidationError("Donor ID must be a whole number.") from exc

    return DonationForm(
        donor_id=donor_id,
        amount=_parse_amount(amount_text),
        date=_parse_date(raw_date),
        payment_method=payment_method,
    )


@dataclass(frozen=True)
class OrganizationForm:
    name: str
    street: str
    city: str
    state: str
    zip: str
    country: str

    @property
    def address(self) -> str:
        return compose_address(self.street, self.city, self.state, self.zip, self.country)

    def to_organization(self) -> Organization:
        return Organization(name=self.name, address=self.address)


def compose_address(street: str, city: str, state: str, zip_code: str, country: str) -> str:
    return f"{street}, {city}, {state} {zip_code}, {country}"


def split_address(address: str) -> dict[str, str]:
    """Best-effort reverse of :func:`compose_address` for prefilling the form."""
    parts = [part for part in address.split(", ") if part]
    fields = {"street": "", "city": "", "state": "", "zip": "", "country": ""}
    if len(parts) < 4:
        fields["street"] = address
        return fields

    fields["street"] = parts[0]
    fields["city"] = parts[1]
    state_zip = parts[2].split()
    if len(state_zip) == 2:
        fields["state"], fields["zip"] = state_zip
    else:
        fields["state"] = parts[2]
    fields["country"] = parts[3]
    return fields


def organization_form_defaults(organization: Organization | None) -> dict[str, str]:
    if organization is None:
        return {name: "" for name in ORGANIZATION_FIELD_LABELS}
    return {"name": organization.name, **split_address(organization.address)}


def validate_organization_form(values: Mapping[str, object]) -> OrganizationForm:
    cleaned = {name: _clean(values.get(name)) for name in ORGANIZATION_FIELD_LABELS}
    if not all(cleaned.values()):
        raise ValidationError(_FILL_ALL)
    return OrganizationForm(**cleaned)
