"""SQLite-backed persistence layer for donors, donations, and the organization."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterator

from .errors import DonationNotFoundError, DonorNotFoundError, SchemaError, StorageError
from .models import (
    DONOR_FIELD_NAMES,
    Donation,
    Donor,
    DonorFields,
    DonorYearTotal,
    Organization,
    cents_from_amount,
    iso_date,
)
from .search import CASEFOLD_FUNCTION, build_donor_search, casefold

logger = logging.getLogger(__name__)

ORGANIZATION_ID = 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS donors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT,
    last_name TEXT,
    street TEXT,
    city TEXT,
    state TEXT,
    zip TEXT,
    country TEXT,
    phone TEXT,
    email TEXT
);

CREATE TABLE IF NOT EXISTS donations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    donor_id INTEGER,
    amount_cents INTEGER NOT NULL,
    date TEXT NOT NULL,
    payment_method TEXT
);

CREATE TABLE IF NOT EXISTS organization (
    id INTEGER PRIMARY KEY,
    name TEXT,
    address TEXT
);

CREATE INDEX IF NOT EXISTS idx_donations_donor ON donations (donor_id);
CREATE INDEX IF NOT EXISTS idx_donations_date ON donations (date);

CREATE TRIGGER IF NOT EXISTS donors_delete_donations
AFTER DELETE ON donors
BEGIN
    DELETE FROM donations WHERE donor_id = OLD.id;
END;
"""


def _lastrowid(cursor: sqlite3.Cursor) -> int:
    row_id = cursor.lastrowid
    if row_id is None:
        raise StorageError("Insert did not return a row id.")
    return row_id


def _text(row: sqlite3.Row, column: str) -> str:
    value = row[column]
    return "" if value is None else str(value)


def _row_to_donor(row: sqlite3.Row) -> Donor:
    return Donor(
        id=int(row["id"]),
        fields=DonorFields(**{name: _text(row, name) for name in DONOR_FIELD_NAMES}),
    )


def _row_to_donation(row: sqlite3.Row) -> Donation:
    return Donation(
        id=int(row["id"]),
        donor_id=int(row["donor_id"]),
        amount_cents=int(row["amount_cents"]),
        date=_text(row, "date"),
        payment_method=_text(row, "payment_method"),
    )


class DonationStore:
    """Persistence operations for donors, donations, and the organization letterhead."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        connection.create_function(CASEFOLD_FUNCTION, 1, casefold, deterministic=True)
        return connection

    @contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and map sqlite failures to StorageError."""
        try:
            connection = self._connect()
        except (OSError, sqlite3.Error) as exc:
            logger.error("Cannot open database %s while trying to %s.", self.db_path, action, exc_info=True)
            raise StorageError(f"Cannot open database: {exc}") from exc

        try:
            with connection:
                yield connection
        except sqlite3.Error as exc:
            logger.error("Failed to %s.", action, exc_info=True)
            raise StorageError(f"Failed to {action}: {exc}") from exc
        finally:
            connection.close()

    def init_db(self) -> None:
        try:
            with self._session("create tables") as connection:
                connection.executescript(SCHEMA)
        except StorageError as exc:
            raise SchemaError(str(exc)) from exc
        logger.debug("Schema ready in %s.", self.db_path)

    def add_donor(self, fields: DonorFields) -> int:
        columns = ", ".join(DONOR_FIELD_NAMES)
        placeholders = ", ".join("?" for _ in DONOR_FIELD_NAMES)
        with self._session("add donor") as connection:
            cursor = connection.execute(
                f"INSERT INTO donors ({columns}) VALUES ({placeholders})",
                tuple(getattr(fields, name) for name in DONOR_FIELD_NAMES),
            )
            donor_id = _lastrowid(cursor)
        logger.info("Added donor #%s.", donor_id)
        return donor_id

    def update_donor(self, donor_id: int, fields: DonorFields) -> None:
        assignments = ", ".join(f"{name} = ?" for name in DONOR_FIELD_NAMES)
        with self._session("update donor") as connection:
            cursor = connection.execute(
                f"UPDATE donors SET {assignments} WHERE id = ?",
                (*(getattr(fields, name) for name in DONOR_FIELD_NAMES), donor_id),
            )
            if cursor.rowcount == 0:
                raise DonorNotFoundError(donor_id)
        logger.info("Updated donor #%s.", donor_id)

    def delete_donor(self, donor_id: int) -> None:
        """Delete a donor; the ``donors_delete_donations`` trigger removes their donations."""
        with self._session("delete donor") as connection:
            cursor = connection.execute("DELETE FROM donors WHERE id = ?", (donor_id,))
            if cursor.rowcount == 0:
                raise DonorNotFoundError(donor_id)
        logger.info("Deleted donor #%s and their donations.", donor_id)

    def get_donor_ids(self) -> list[int]:
        with self._session("list donor ids") as connection:
            rows = connection.execute("SELECT id FROM donors ORDER BY id").fetchall()
        return [int(row["id"]) for row in rows]

    def get_donor_details(self, donor_id: int) -> Donor:
        with self._session("load donor") as connection:
            row = connection.execute(
                "SELECT * FROM donors WHERE id = ?",
                (donor_id,),
            ).fetchone()
        if row is None:
            raise DonorNotFoundError(donor_id)
        return _row_to_donor(row)

    def search_donors(self, term: str = "", include_all: bool = False) -> list[Donor]:
        query = build_donor_search(term, include_all=include_all)
        with self._session("search donors") as connection:
            rows = connection.execute(query.sql, query.parameters).fetchall()
        return [_row_to_donor(row) for row in rows]

    def add_donation(
        self,
        donor_id: int,
        amount: Decimal | int | float | str,
        donation_date: date | str,
        payment_method: str,
    ) -> int:
        with self._session("add donation") as connection:
            cursor = connection.execute(
                """
                INSERT INTO donations (donor_id, amount_cents, date, payment_method)
                VALUES (?, ?, ?, ?)
                """,
                (donor_id, cents_from_amount(amount), iso_date(donation_date), payment_method),
            )
            donation_id = _lastrowid(cursor)
        logger.info("Added donation #%s for donor #%s.", donation_id, donor_id)
        return donation_id

    def update_donation(
        self,
        donation_id: int,
        donor_id: int,
        amount: Decimal | int | float | str,
        donation_date: date | str,
        payment_method: str,
    ) -> None:
        with self._session("update donation") as connection:
            cursor = connection.execute(
                """
                UPDATE donations
                SET donor_id = ?, amount_cents = ?, date = ?, payment_method = ?
                WHERE id = ?
                """,
                (
                    donor_id,
                    cents_from_amount(amount),
                    iso_date(donation_date),
                    payment_method,
                    donation_id,
                ),
            )
            if cursor.rowcount == 0:
                raise DonationNotFoundError(donation_id)
        logger.info("Updated donation #%s.", donation_id)

    def delete_donation(self, donation_id: int) -> None:
        with self._session("delete donation") as connection:
            cursor = connection.execute("DELETE FROM donations WHERE id = ?", (donation_id,))
            if cursor.rowcount == 0:
                raise DonationNotFoundError(donation_id)
        logger.info("Deleted donation #%s.", donation_id)

    def get_donation(self, donation_id: int) -> Donation:
        with self._session("load donation") as connection:
            row = connection.execute(
                "SELECT * FROM donations WHERE id = ?",
                (donation_id,),
            ).fetchone()
        if row is None:
            raise DonationNotFoundError(donation_id)
        return _row_to_donation(row)

    def get_donations_for_donor(self, donor_id: int) -> list[Donation]:
        with self._session("list donations") as connection:
            rows = connection.execute(
                """
                SELECT id, donor_id, amount_cents, date, payment_method
                FROM donations
                WHERE donor_id = ?
                ORDER BY date DESC, id DESC
                """,
                (donor_id,),
            ).fetchall()
        return [_row_to_donation(row) for row in rows]

    def get_organization(self) -> Organization | None:
        with self._session("load organization details") as connection:
            row = connection.execute(
                "SELECT name, address FROM organization WHERE id = ?",
                (ORGANIZATION_ID,),
            ).fetchone()
        if row is None:
            return None
        return Organization(name=_text(row, "name"), address=_text(row, "address"))

    def set_organization(self, name: str, address: str) -> None:
        with self._session("set organization details") as connection:
            connection.execute(
                """
                INSERT INTO organization (id, name, address)
                VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET name = excluded.name, address = excluded.address
                """,
                (ORGANIZATION_ID, name, address),
            )
        logger.info("Saved organization details for %r.", name)

    def donor_totals_for_year(self, year: int) -> list[DonorYearTotal]:
        """Sum each donor's gifts whose date text starts with ``year``."""
        donor_columns = ", ".join(f"d.{name}" for name in DONOR_FIELD_NAMES)
        with self._session("total donations for letters") as connection:
            rows = connection.execute(
                f"""
                SELECT d.id, {donor_columns}, SUM(dn.amount_cents) AS total_cents
                FROM donors d
                JOIN donations dn ON dn.donor_id = d.id
                WHERE SUBSTR(dn.date, 1, 4) = ?
                GROUP BY d.id
                ORDER BY d.id
                """,
                (str(year),),
            ).fetchall()

        totals: list[DonorYearTotal] = []
        for row in rows:
            donor = _row_to_donor(row)
            totals.append(
                DonorYearTotal(
                    donor_id=donor.id,
                    fields=donor.fields,
                    year=year,
                    total_cents=int(row["total_cents"]),
                )
            )
        return totals

