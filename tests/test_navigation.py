from __future__ import annotations

from donation_tracker.models import DonorFields
from donation_tracker.navigation import NavigationButtons, NavigationCursor
from donation_tracker.store import DonationStore


def _build_store(tmp_path) -> DonationStore:  # type: ignore[no-untyped-def]
    db_path = tmp_path / "navigation_test.db"
    store = DonationStore(db_path)
    store.init_db()
    return store


def _add_donor(store: DonationStore, first_name: str) -> int:
    return store.add_donor(
        DonorFields(
            first_name=first_name,
            last_name="Tester",
            street="1 Main St",
            city="Springfield",
            state="IL",
            zip="62701",
            country="USA",
            phone="555-0100",
            email=f"{first_name.lower()}@example.org",
        )
    )


def test_empty_store_disables_every_button(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    cursor = NavigationCursor(store.get_donor_ids)

    assert cursor.first() is None
    assert cursor.last() is None
    assert cursor.index is None
    assert cursor.current_id is None
    assert cursor.state.is_empty
    assert cursor.buttons == NavigationButtons(first=False, previous=False, next=False, last=False)


def test_first_last_previous_next_walk_the_ascending_ids(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ids = [_add_donor(store, name) for name in ("Ann", "Bob", "Cy")]
    cursor = NavigationCursor(store.get_donor_ids)

    assert cursor.first() == ids[0]
    assert cursor.buttons == NavigationButtons(first=False, previous=False, next=True, last=True)

    assert cursor.previous() == ids[0]
    assert cursor.index == 0

    assert cursor.next() == ids[1]
    assert cursor.buttons == NavigationButtons(first=True, previous=True, next=True, last=True)

    assert cursor.last() == ids[2]
    assert cursor.buttons == NavigationButtons(first=True, previous=True, next=False, last=False)

    assert cursor.next() == ids[2]
    assert cursor.index == 2

    assert cursor.previous() == ids[1]


def test_refresh_relocates_current_donor_after_earlier_delete(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ids = [_add_donor(store, name) for name in ("Ann", "Bob", "Cy")]
    cursor = NavigationCursor(store.get_donor_ids)
    cursor.last()
    assert cursor.index == 2

    store.delete_donor(ids[0])
    cursor.refresh()

    assert cursor.current_id == ids[2]
    assert cursor.index == 1
    assert cursor.donor_ids == (ids[1], ids[2])


def test_refresh_clears_position_when_current_donor_is_deleted(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ids = [_add_donor(store, name) for name in ("Ann", "Bob")]
    cursor = NavigationCursor(store.get_donor_ids)
    cursor.first()

    store.delete_donor(ids[0])
    cursor.refresh()

    assert cursor.current_id is None
    assert cursor.index is None
    assert cursor.previous() is None
    assert cursor.next() is None
    assert cursor.buttons == NavigationButtons(first=False, previous=False, next=False, last=False)

    assert cursor.first() == ids[1]


def test_refresh_picks_up_added_donors(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ann_id = _add_donor(store, "Ann")
    cursor = NavigationCursor(store.get_donor_ids)
    cursor.first()
    assert cursor.buttons.next is False

    bob_id = _add_donor(store, "Bob")
    cursor.refresh()

    assert cursor.current_id == ann_id
    assert cursor.buttons.next is True
    assert cursor.next() == bob_id


def test_previous_and_next_are_noops_at_the_ends_after_mutations(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ids = [_add_donor(store, name) for name in ("Ann", "Bob", "Cy", "Dee")]
    store.delete_donor(ids[1])
    _add_donor(store, "Eve")
    store.delete_donor(ids[3])

    cursor = NavigationCursor(store.get_donor_ids)
    cursor.first()
    cursor.refresh()
    start = cursor.state
    cursor.previous()
    assert cursor.state == start

    cursor.last()
    cursor.refresh()
    end = cursor.state
    cursor.next()
    assert cursor.state == end
    assert end.index == len(end.donor_ids) - 1


def test_select_by_id_positions_or_leaves_state_unchanged(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ids = [_add_donor(store, name) for name in ("Ann", "Bob", "Cy")]
    cursor = NavigationCursor(store.get_donor_ids)
    cursor.first()

    assert cursor.select_by_id(ids[1]) is True
    assert cursor.index == 1
    assert cursor.current_id == ids[1]

    before = cursor.state
    assert cursor.select_by_id(9999) is False
    assert cursor.state == before


def test_clear_drops_position_but_keeps_sequence(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = _build_store(tmp_path)
    ids = [_add_donor(store, name) for name in ("Ann", "Bob")]
    cursor = NavigationCursor(store.get_donor_ids)
    cursor.last()

    cursor.clear()

    assert cursor.current_id is None
    assert cursor.donor_ids == tuple(ids)
