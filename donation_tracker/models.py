"""Record types and money helpers shared by the store, letters, and UI."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields as dataclass_fields
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_CENT = Decimal("0.01")


def cents_from_amount(amount: Decimal | int | float | str) -> int:
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"Amount {amount!r} is not a number.") from exc
    if not value.is_finite():
        raise ValueError(f"Amount {amount!r} is not a number.")
    return int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def amount_from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(_CENT)


def format_amount(cents: int) -> str:
    """Plain two-decimal amount, e.g. ``35.50``."""
    return f"{amount_from_cents(cents):.2f}"


def format_currency(cents: int) -> str:
    return f"${amount_from_cents(cents):,.2f}"


def iso_date(value: date | str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return value.strip()


@dataclass(frozen=True)
class DonorFields:
    """Every editable donor field; updates replace all of them at once."""

    first_name: str
    last_name: str
    street: str
    city: str
    state: str
    zip: str
    country: str
    phone: str
    email: str

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


DONOR_FIELD_NAMES = tuple(field.name for field in dataclass_fields(DonorFields))


@dataclass(frozen=True)
class Donor:
    id: int
    fields: DonorFields

    @property
    def first_name(self) -> str:
        return self.fields.first_name

    @property
    def last_name(self) -> str:
        return self.fields.last_name

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.fields.as_dict()}


@dataclass(frozen=True)
class Donation:
    id: int
    donor_id: int
    amount_cents: int
    date: str
    payment_method: str

    @property
    def amount(self) -> Decimal:
        return amount_from_cents(self.amount_cents)


@dataclass(frozen=True)
class Organization:
    name: str
    address: str


@dataclass(frozen=True)
class DonorYearTotal:
    """A donor's mailing details with their summed gifts for one year."""

    donor_id: int
    fields: DonorFields
    year: int
    total_cents: int

    @property
    def total(self) -> Decimal:
        return amount_from_cents(self.total_cents)


def donor_display_name(donor: Donor | DonorFields | dict[str, Any]) -> str:
    if isinstance(donor, Donor):
        donor = donor.fields
    if isinstance(donor, DonorFields):
        first_name, last_name = donor.first_name, donor.last_name
    else:
        first_name, last_name = donor.get("first_name"), donor.get("last_name")

    full_name = f"{(first_name or '').strip()} {(last_name or '').strip()}".strip()
    return full_name or "Unnamed donor"
