"""Donor search query construction."""

from __future__ import annotations

from dataclasses import dataclass

SEARCH_COLUMNS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "city",
    "state",
    "zip",
    "country",
)

DONOR_COLUMNS = (
    "id",
    "first_name",
    "last_name",
    "street",
    "city",
    "state",
    "zip",
    "country",
    "phone",
    "email",
)

CASEFOLD_FUNCTION = "tracker_casefold"

_SELECT_DONORS = f"SELECT {', '.join(DONOR_COLUMNS)} FROM donors"


@dataclass(frozen=True)
class DonorSearchQuery:
    sql: str
    parameters: tuple[str, ...]

    @property
    def lists_everyone(self) -> bool:
        return not self.parameters


def casefold(value: object) -> str:
    return "" if value is None else str(value).casefold()


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_donor_search(term: str, include_all: bool = False) -> DonorSearchQuery:
    """
    Build the SQL for a donor search.

    With ``include_all`` or an empty term every donor is listed by first then
    last name. Otherwise the case-folded term, taken as typed, must appear as a
    substring of at least one of ``SEARCH_COLUMNS``; results keep storage order.
    The SQL calls ``CASEFOLD_FUNCTION``, which must be registered on the
    connection (SQLite's ``LOWER`` folds ASCII only).
    """
    if include_all or not term:
        return DonorSearchQuery(
            sql=f"{_SELECT_DONORS} ORDER BY first_name, last_name",
            parameters=(),
        )

    where_sql = " OR ".join(
        f"{CASEFOLD_FUNCTION}(COALESCE({column}, '')) LIKE ? ESCAPE '\\'" for column in SEARCH_COLUMNS
    )
    pattern = _like_pattern(casefold(term))
    return DonorSearchQuery(
        sql=f"{_SELECT_DONORS} WHERE {where_sql}",
        parameters=tuple(pattern for _ in SEARCH_COLUMNS),
    )
