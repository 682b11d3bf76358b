"""Cursor over the ascending donor id sequence used for first/previous/next/last browsing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigationButtons:
    first: bool
    previous: bool
    next: bool
    last: bool


@dataclass(frozen=True)
class CursorState:
    donor_ids: tuple[int, ...]
    index: int | None
    current_id: int | None

    @property
    def is_empty(self) -> bool:
        return not self.donor_ids


class NavigationCursor:
    """
    Position within the donor id sequence, kept in step with the store.

    ``index`` is ``None`` when no donor is positioned. Call :meth:`refresh`
    after any add or delete so the sequence and index match the store again.
    """

    def __init__(self, load_ids: Callable[[], Sequence[int]]) -> None:
        self._load_ids = load_ids
        self._donor_ids: tuple[int, ...] = ()
        self._index: int | None = None
        self._current_id: int | None = None

    @property
    def donor_ids(self) -> tuple[int, ...]:
        return self._donor_ids

    @property
    def index(self) -> int | None:
        return self._index

    @property
    def current_id(self) -> int | None:
        return self._current_id

    @property
    def state(self) -> CursorState:
        return CursorState(
            donor_ids=self._donor_ids,
            index=self._index,
            current_id=self._current_id,
        )

    def refresh(self) -> None:
        self._donor_ids = tuple(self._load_ids())
        if self._current_id is None:
            return
        if self._current_id in self._donor_ids:
            self._index = self._donor_ids.index(self._current_id)
        else:
            logger.debug("Donor #%s is gone; clearing cursor position.", self._current_id)
            self.clear()

    def clear(self) -> None:
        self._index = None
        self._current_id = None

    def _move_to(self, index: int) -> int:
        self._index = index
        self._current_id = self._donor_ids[index]
        return self._current_id

    def first(self) -> int | None:
        self.refresh()
        if not self._donor_ids:
            self.clear()
            return None
        return self._move_to(0)

    def last(self) -> int | None:
        self.refresh()
        if not self._donor_ids:
            self.clear()
            return None
        return self._move_to(len(self._donor_ids) - 1)

    def previous(self) -> int | None:
        if self._index is not None and self._index > 0:
            return self._move_to(self._index - 1)
        return self._current_id

    def next(self) -> int | None:
        if self._index is not None and self._index < len(self._donor_ids) - 1:
            return self._move_to(self._index + 1)
        return self._current_id

    def select_by_id(self, donor_id: int) -> bool:
        if donor_id not in self._donor_ids:
            logger.debug("Donor #%s is not in the navigation sequence.", donor_id)
            return False
        self._move_to(self._donor_ids.index(donor_id))
        return True

    @property
    def buttons(self) -> NavigationButtons:
        return navigation_buttons(self.state)


def navigation_buttons(state: CursorState) -> NavigationButtons:
    if state.is_empty or state.index is None:
        return NavigationButtons(first=False, previous=False, next=False, last=False)

    at_start = state.index == 0
    at_end = state.index == len(state.donor_ids) - 1
    return NavigationButtons(
        first=not at_start,
        previous=not at_start,
        next=not at_end,
        last=not at_end,
    )
