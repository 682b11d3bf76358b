from __future__ import annotations

from donation_tracker.store import DonationStore
from donation_tracker_app import _hero_details


def test_hero_details_escape_organization_markup(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = DonationStore(tmp_path / "app_test.db")
    store.init_db()
    store.set_organization("<b>Hands</b> & Co", "1 Main St")

    details = _hero_details(store)

    assert details == "Organization: &lt;b&gt;Hands&lt;/b&gt; &amp; Co\n1 Main St"


def test_hero_details_when_organization_is_not_set(tmp_path) -> None:  # type: ignore[no-untyped-def]
    store = DonationStore(tmp_path / "app_test.db")
    store.init_db()
    assert _hero_details(store) == "Organization: Not set"


def test_hero_details_report_storage_failure_instead_of_raising(tmp_path) -> None:  # type: ignore[no-untyped-def]
    # Without init_db the organization table does not exist.
    store = DonationStore(tmp_path / "app_test.db")

    details = _hero_details(store)

    assert details.startswith("Organization details unavailable.")
