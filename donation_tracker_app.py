"""Streamlit app for donor records, donations, and yearly acknowledgment letters."""

from __future__ import annotations

import html
from datetime import date
from typing import Iterable

import pandas as pd
import streamlit as st

from donation_tracker import (
    DonationStore,
    DonationTrackerError,
    DonorFields,
    LetterGenerator,
    NavigationCursor,
    SchemaError,
    TrackerSettings,
    ValidationError,
    configure_logging,
    donor_display_name,
    format_currency,
)
from donation_tracker.forms import (
    DONOR_FIELD_LABELS,
    ORGANIZATION_FIELD_LABELS,
    organization_form_defaults,
    validate_donation_form,
    validate_donor_form,
    validate_organization_form,
)
from donation_tracker.models import Donation, Donor

SETTINGS = TrackerSettings()
STORE = DonationStore(SETTINGS.db_path)

DONOR_TABLE_LABELS = {
    "id": "ID",
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

DONATION_TABLE_LABELS = {
    "id": "ID",
    "donor_id": "Donor ID",
    "amount": "Amount",
    "date": "Date",
    "payment_method": "Payment Method",
}


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
          :root {
            --dt-green-700: #1f4d3a;
            --dt-green-500: #2e7d5b;
            --dt-paper: #f7f5f0;
            --dt-text: #1c1c1a;
          }

          .stApp {
            background: linear-gradient(170deg, var(--dt-paper) 0%, #ffffff 100%);
            color: var(--dt-text);
          }

          .tracker-hero {
            background: linear-gradient(124deg, var(--dt-green-700), var(--dt-green-500));
            border-radius: 16px;
            color: #ffffff;
            padding: 1rem 1.2rem;
            margin-bottom: 1rem;
          }

          .tracker-hero h1,
          .tracker-hero p {
            color: #ffffff !important;
            margin: 0;
          }

          .tracker-hero p {
            margin-top: 0.4rem;
            white-space: pre-line;
            opacity: 0.92;
          }

          .section-note {
            color: #555453;
            font-weight: 500;
            margin-top: -0.2rem;
            margin-bottom: 0.8rem;
          }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _hero_details(store: DonationStore) -> str:
    """Letterhead line for the page header, escaped for raw HTML."""
    try:
        organization = store.get_organization()
    except DonationTrackerError as exc:
        details = f"Organization details unavailable. {exc}"
    else:
        if organization is None:
            details = "Organization: Not set"
        else:
            details = f"Organization: {organization.name}\n{organization.address}"
    return html.escape(details)


def _hero() -> None:
    details = _hero_details(STORE)
    st.markdown(
        f"""
        <div class="tracker-hero">
          <h1>Donation Tracker</h1>
          <p>{details}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _section_note(text: str) -> None:
    st.markdown(f"<p class='section-note'>{text}</p>", unsafe_allow_html=True)


def _table_or_info(frame: pd.DataFrame, empty_message: str) -> None:
    if frame.empty:
        st.info(empty_message)
        return
    st.dataframe(frame, use_container_width=True, hide_index=True)


def _donor_frame(donors: Iterable[Donor]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {DONOR_TABLE_LABELS[key]: value for key, value in donor.as_dict().items()}
            for donor in donors
        ],
        columns=list(DONOR_TABLE_LABELS.values()),
    )


def _donation_frame(donations: Iterable[Donation]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "ID": donation.id,
                "Donor ID": donation.donor_id,
                "Amount": format_currency(donation.amount_cents),
                "Date": donation.date,
                "Payment Method": donation.payment_method,
            }
            for donation in donations
        ],
        columns=list(DONATION_TABLE_LABELS.values()),
    )


def _cursor() -> NavigationCursor:
    if "donor_cursor" not in st.session_state:
        st.session_state.donor_cursor = NavigationCursor(STORE.get_donor_ids)
    cursor: NavigationCursor = st.session_state.donor_cursor
    cursor.refresh()
    if cursor.current_id is None and cursor.donor_ids:
        cursor.first()
    return cursor


def _flash(message: str) -> None:
    st.session_state.flash_message = message


def _show_flash() -> None:
    message = st.session_state.pop("flash_message", None)
    if message:
        st.success(message)


def _donor_form_fields(key_prefix: str, initial: DonorFields | None) -> dict[str, str]:
    values: dict[str, str] = {}
    first_col, second_col = st.columns(2)
    for position, (name, label) in enumerate(DONOR_FIELD_LABELS.items()):
        column = first_col if position % 2 == 0 else second_col
        with column:
            values[name] = st.text_input(
                f"{label} *",
                value=getattr(initial, name) if initial else "",
                key=f"{key_prefix}-{name}",
            )
    return values


def _render_navigation(cursor: NavigationCursor) -> None:
    buttons = cursor.buttons
    first_col, previous_col, next_col, last_col = st.columns(4)
    with first_col:
        if st.button("First", disabled=not buttons.first, use_container_width=True):
            cursor.first()
            st.rerun()
    with previous_col:
        if st.button("Previous", disabled=not buttons.previous, use_container_width=True):
            cursor.previous()
            st.rerun()
    with next_col:
        if st.button("Next", disabled=not buttons.next, use_container_width=True):
            cursor.next()
            st.rerun()
    with last_col:
        if st.button("Last", disabled=not buttons.last, use_container_width=True):
            cursor.last()
            st.rerun()

    if cursor.index is not None:
        st.caption(f"Donor {cursor.index + 1} of {len(cursor.donor_ids)}")


def _render_add_donor(cursor: NavigationCursor) -> None:
    with st.expander("Add Donor"):
        with st.form("donor-add-form", clear_on_submit=False):
            values = _donor_form_fields("donor-add", None)
            submit = st.form_submit_button("Save Donor", use_container_width=True)
            if submit:
                try:
                    donor_id = STORE.add_donor(validate_donor_form(values))
                except ValidationError as exc:
                    st.warning(str(exc))
                except DonationTrackerError as exc:
                    st.error(f"Failed to add donor. {exc}")
                else:
                    cursor.refresh()
                    cursor.select_by_id(donor_id)
                    _flash("Donor added successfully.")
                    st.rerun()


def _render_edit_donor(cursor: NavigationCursor, donor: Donor) -> None:
    with st.expander("Edit Donor"):
        with st.form(f"donor-edit-form-{donor.id}", clear_on_submit=False):
            values = _donor_form_fields(f"donor-edit-{donor.id}", donor.fields)
            submit = st.form_submit_button("Update Donor", use_container_width=True)
            if submit:
                try:
                    STORE.update_donor(donor.id, validate_donor_form(values))
                except ValidationError as exc:
                    st.warning(str(exc))
                except DonationTrackerError as exc:
                    st.error(f"Failed to update donor. {exc}")
                else:
                    _flash("Donor updated successfully.")
                    st.rerun()

    with st.expander("Delete Donor"):
        st.write(
            f"Delete {donor_display_name(donor)} and all associated donations? This cannot be undone."
        )
        confirmed = st.checkbox("Yes, delete this donor", key=f"donor-delete-confirm-{donor.id}")
        if st.button("Delete Donor", disabled=not confirmed, key=f"donor-delete-{donor.id}"):
            try:
                STORE.delete_donor(donor.id)
            except DonationTrackerError as exc:
                st.error(f"Failed to delete donor. {exc}")
            else:
                cursor.refresh()
                cursor.first()
                _flash("Donor and associated donations deleted successfully.")
                st.rerun()


def _render_donations(donor: Donor) -> None:
    st.markdown("#### Donations")
    try:
        donations = STORE.get_donations_for_donor(donor.id)
    except DonationTrackerError as exc:
        st.error(str(exc))
        return

    _table_or_info(_donation_frame(donations), "No donations recorded for this donor yet.")

    add_col, edit_col = st.columns(2, gap="large")
    with add_col:
        st.markdown("##### Add Donation")
        with st.form(f"donation-add-form-{donor.id}", clear_on_submit=False):
            donor_id = st.text_input("Donor ID *", value=str(donor.id), key=f"donation-add-donor-{donor.id}")
            amount = st.text_input("Amount *", placeholder="e.g. 123.45", key=f"donation-add-amount-{donor.id}")
            donation_date = st.date_input("Date *", value=date.today(), key=f"donation-add-date-{donor.id}")
            payment_method = st.text_input("Payment Method *", key=f"donation-add-method-{donor.id}")
            submit = st.form_submit_button("Save Donation", use_container_width=True)
            if submit:
                try:
                    form = validate_donation_form(
                        {
                            "donor_id": donor_id,
                            "amount": amount,
                            "date": donation_date,
                            "payment_method": payment_method,
                        }
                    )
                    STORE.add_donation(form.donor_id, form.amount, form.date, form.payment_method)
                except ValidationError as exc:
                    st.warning(str(exc))
                except DonationTrackerError as exc:
                    st.error(f"Failed to add donation. {exc}")
                else:
                    _flash("Donation added successfully.")
                    st.rerun()

    with edit_col:
        st.markdown("##### Edit or Delete Donation")
        if not donations:
            st.info("Select a donor with donations to edit them.")
            return

        donation_map = {donation.id: donation for donation in donations}
        selected_id = st.selectbox(
            "Donation",
            options=list(donation_map.keys()),
            format_func=lambda item_id: (
                f"#{item_id} {donation_map[item_id].date} "
                f"{format_currency(donation_map[item_id].amount_cents)}"
            ),
            key=f"donation-select-{donor.id}",
        )
        selected = donation_map[selected_id]

        with st.form(f"donation-edit-form-{selected.id}", clear_on_submit=False):
            edit_donor_id = st.text_input(
                "Donor ID *", value=str(selected.donor_id), key=f"donation-edit-donor-{selected.id}"
            )
            edit_amount = st.text_input(
                "Amount *", value=f"{selected.amount:.2f}", key=f"donation-edit-amount-{selected.id}"
            )
            edit_date = st.date_input(
                "Date *", value=_date_or_today(selected.date), key=f"donation-edit-date-{selected.id}"
            )
            edit_method = st.text_input(
                "Payment Method *", value=selected.payment_method, key=f"donation-edit-method-{selected.id}"
            )
            save = st.form_submit_button("Update Donation", use_container_width=True)
            if save:
                try:
                    form = validate_donation_form(
                        {
                            "donor_id": edit_donor_id,
                            "amount": edit_amount,
                            "date": edit_date,
                            "payment_method": edit_method,
                        }
                    )
                    STORE.update_donation(
                        selected.id, form.donor_id, form.amount, form.date, form.payment_method
                    )
                except ValidationError as exc:
                    st.warning(str(exc))
                except DonationTrackerError as exc:
                    st.error(f"Failed to update donation. {exc}")
                else:
                    _flash("Donation updated successfully.")
                    st.rerun()

        confirmed = st.checkbox("Yes, delete this donation", key=f"donation-delete-confirm-{selected.id}")
        if st.button("Delete Donation", disabled=not confirmed, key=f"donation-delete-{selected.id}"):
            try:
                STORE.delete_donation(selected.id)
            except DonationTrackerError as exc:
                st.error(f"Failed to delete donation. {exc}")
            else:
                _flash("Donation deleted successfully.")
                st.rerun()


def _date_or_today(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return date.today()


def render_donors_tab() -> None:
    st.markdown("### Donor Details")
    _section_note("Browse donors in ID order, edit their details, and record donations.")

    cursor = _cursor()
    _render_navigation(cursor)
    _render_add_donor(cursor)

    if cursor.current_id is None:
        st.info("No donors yet. Add your first donor to get started.")
        return

    try:
        donor = STORE.get_donor_details(cursor.current_id)
    except DonationTrackerError as exc:
        cursor.clear()
        st.warning(f"Failed to load donor details. {exc}")
        return

    profile = pd.DataFrame(
        [
            {"Field": DONOR_TABLE_LABELS[key], "Value": str(value)}
            for key, value in donor.as_dict().items()
        ]
    )
    st.dataframe(profile, use_container_width=True, hide_index=True)

    _render_edit_donor(cursor, donor)
    _render_donations(donor)


def render_search_tab() -> None:
    st.markdown("### Search Donors")
    _section_note("Matches name, email, phone, city, state, ZIP, or country, ignoring case.")

    search_col, all_col = st.columns([4, 1])
    with search_col:
        search_term = st.text_input("Search", placeholder="e.g. spring or ann@example.org")
    with all_col:
        include_all = st.checkbox("Show all donors", value=False)

    try:
        donors = STORE.search_donors(search_term, include_all=include_all)
    except DonationTrackerError as exc:
        st.error(str(exc))
        return

    _table_or_info(_donor_frame(donors), "No donors matched your search.")

    if donors:
        donor_map = {donor.id: donor for donor in donors}
        selected_id = st.selectbox(
            "Open Donor",
            options=list(donor_map.keys()),
            format_func=lambda donor_id: f"{donor_display_name(donor_map[donor_id])} (#{donor_id})",
        )
        if st.button("Show in Donor Details"):
            cursor = _cursor()
            if cursor.select_by_id(selected_id):
                _flash(f"Showing {donor_display_name(donor_map[selected_id])} in Donor Details.")
                st.rerun()
            st.warning("That donor is no longer available.")


def render_organization_tab() -> None:
    st.markdown("### Organization")
    _section_note("Letterhead name and address used on every donation letter.")

    try:
        organization = STORE.get_organization()
    except DonationTrackerError as exc:
        st.error(f"Failed to load organization details. {exc}")
        return

    defaults = organization_form_defaults(organization)
    with st.form("organization-form", clear_on_submit=False):
        values = {
            name: st.text_input(f"{label} *", value=defaults[name], key=f"organization-{name}")
            for name, label in ORGANIZATION_FIELD_LABELS.items()
        }
        save = st.form_submit_button("Save Organization", use_container_width=True)
        if save:
            try:
                form = validate_organization_form(values)
                STORE.set_organization(form.name, form.address)
            except ValidationError as exc:
                st.warning(str(exc))
            except DonationTrackerError as exc:
                st.error(f"Failed to save organization details. {exc}")
            else:
                _flash("Organization details saved.")
                st.rerun()


def render_letters_tab() -> None:
    st.markdown("### Donation Letters")
    _section_note(
        f"Writes one letter per donor with donations in the chosen year to the "
        f"'{SETTINGS.letters_dir}' folder."
    )

    year = int(
        st.number_input(
            "Year",
            min_value=1900,
            max_value=2100,
            value=date.today().year,
            step=1,
        )
    )

    try:
        totals = STORE.donor_totals_for_year(year)
    except DonationTrackerError as exc:
        st.error(str(exc))
        return

    preview = pd.DataFrame(
        [
            {
                "Donor": donor_display_name(total.fields),
                "City": total.fields.city,
                "Total": format_currency(total.total_cents),
            }
            for total in totals
        ]
    )
    _table_or_info(preview, f"No donations recorded in {year}.")

    if st.button("Generate Donation Letters", disabled=not totals):
        try:
            run = LetterGenerator(STORE, SETTINGS.letters_dir).generate_letters(year)
        except DonationTrackerError as exc:
            st.error(f"Failed to generate donation letters. {exc}")
            return

        if run.success:
            st.success(
                f"Generated {len(run.written)} donation letter(s) in the '{SETTINGS.letters_dir}' folder."
            )
        else:
            st.warning(
                f"Generated {len(run.written)} letter(s); {len(run.failures)} could not be written. "
                "Check file permissions."
            )
            failures = pd.DataFrame(
                [
                    {"Donor ID": failure.donor_id, "File": str(failure.path), "Error": failure.message}
                    for failure in run.failures
                ]
            )
            st.dataframe(failures, use_container_width=True, hide_index=True)


def main() -> None:
    st.set_page_config(
        page_title="Donation Tracker",
        page_icon=":envelope:",
        layout="wide",
    )
    configure_logging(SETTINGS.log_level)
    try:
        STORE.init_db()
    except SchemaError as exc:
        st.error(f"Cannot open the donation database. {exc}")
        st.stop()

    _inject_styles()
    _hero()
    _show_flash()

    tabs = st.tabs(["Donors", "Search", "Organization", "Letters"])

    with tabs[0]:
        render_donors_tab()
    with tabs[1]:
        render_search_tab()
    with tabs[2]:
        render_organization_tab()
    with tabs[3]:
        render_letters_tab()


if __name__ == "__main__":
    main()
