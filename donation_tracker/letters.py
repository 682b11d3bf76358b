"""Yearly acknowledgment letters, one text file per donor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .errors import FileWriteError
from .models import DonorYearTotal, Organization, format_amount
from .store import DonationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LetterFailure:
    donor_id: int
    path: Path
    message: str


@dataclass
class LetterRun:
    """Outcome of one generation pass; failed letters do not stop the others."""

    year: int
    written: list[Path] = field(default_factory=list)
    failures: list[LetterFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


def letter_filename(first_name: str, last_name: str, year: int) -> str:
    return f"{first_name}_{last_name}_{year}_donation_letter.txt"


def format_letter_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def render_letter(organization: Organization, total: DonorYearTotal, today: date) -> str:
    donor = total.fields
    lines = [
        organization.name,
        organization.address,
        "",
        format_letter_date(today),
        "",
        f"{donor.first_name} {donor.last_name}",
        donor.street,
        f"{donor.city}, {donor.state} {donor.zip}",
        donor.country,
        "",
        f"Dear {donor.first_name},",
        "",
        (
            f"Thank you for your generous total donation of ${format_amount(total.total_cents)}"
            f" to {organization.name} in {total.year}."
        ),
        "Your support makes a significant difference to our mission.",
        "",
        "Sincerely,",
        organization.name,
    ]
    return "\n".join(lines) + "\n"


class LetterGenerator:
    def __init__(
        self,
        store: DonationStore,
        output_dir: str | Path = "letters",
        today: date | None = None,
    ) -> None:
        self.store = store
        self.output_dir = Path(output_dir)
        self._today = today

    def generate_letters(self, year: int) -> LetterRun:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create letters directory %s.", self.output_dir, exc_info=True)
            raise FileWriteError(f"Cannot create letters directory {self.output_dir}: {exc}") from exc

        organization = self.store.get_organization() or Organization(name="", address="")
        today = self._today or date.today()
        run = LetterRun(year=year)

        for total in self.store.donor_totals_for_year(year):
            path = self.output_dir / letter_filename(
                total.fields.first_name, total.fields.last_name, year
            )
            try:
                path.write_text(render_letter(organization, total, today), encoding="utf-8")
            except (OSError, ValueError) as exc:
                logger.warning("Could not write letter %s: %s", path, exc)
                run.failures.append(LetterFailure(donor_id=total.donor_id, path=path, message=str(exc)))
                continue
            run.written.append(path)

        logger.info(
            "Generated %s letter(s) for %s with %s failure(s).",
            len(run.written),
            year,
            len(run.failures),
        )
        return run
