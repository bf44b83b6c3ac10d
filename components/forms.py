"""Skjemaer"""
from datetime import date
from typing import Optional

import pandas as pd
import streamlit as st

from config.settings import DEFAULT_LOAN_RATE, DEFAULT_TERM_MONTHS
from data_manager.excel_handler import get_config_float
from utils.money import nok_to_oere


def _to_date(value) -> Optional[date]:
    if value is None or (not isinstance(value, str) and pd.isna(value)) or value == "":
        return None
    return pd.to_datetime(value).date()


def render_loan_form(
    key_prefix: str = "new",
    loan_data: Optional[pd.Series] = None,
) -> dict | None:
    """Skjema for nytt eller endret lån; returnerer dict når det sendes inn

    Args:
        key_prefix: prefiks for widget-nøkler
        loan_data: eksisterende lån ved redigering
    """
    is_edit = loan_data is not None
    st.subheader("Endre lån" if is_edit else "Nytt lån")

    if is_edit:
        default_name = str(loan_data["name"])
        default_principal = int(loan_data["principal_oere"]) / 100
        default_rate = float(loan_data["annual_rate_pct"])
        default_term = int(loan_data["term_months"])
        default_start = _to_date(loan_data["start_date"]) or date.today()
        opening_date = _to_date(loan_data.get("opening_balance_date"))
        opening_raw = loan_data.get("opening_balance_oere")
        default_opening = None if opening_raw is None or pd.isna(opening_raw) else int(opening_raw) / 100
        default_notes = "" if pd.isna(loan_data.get("notes", "")) else str(loan_data.get("notes", ""))
    else:
        default_name = "Boliglån"
        default_principal = 3_000_000.0
        default_rate = get_config_float("default_rate", DEFAULT_LOAN_RATE)
        default_term = int(get_config_float("default_term_months", DEFAULT_TERM_MONTHS))
        default_start = date.today()
        opening_date = None
        default_opening = None
        default_notes = ""

    with st.form(f"{key_prefix}_loan_form"):
        name = st.text_input("Navn", value=default_name, key=f"{key_prefix}_name")

        c1, c2, c3 = st.columns(3)
        with c1:
            principal = st.number_input(
                "Lånebeløp (kr)", min_value=0.0, value=default_principal,
                step=10_000.0, key=f"{key_prefix}_principal")
        with c2:
            rate = st.number_input(
                "Nominell rente (%)", min_value=0.0, max_value=30.0,
                value=default_rate, step=0.05, format="%.2f", key=f"{key_prefix}_rate")
        with c3:
            term = st.number_input(
                "Løpetid (mnd)", min_value=1, max_value=600, value=default_term,
                key=f"{key_prefix}_term")

        start_date = st.date_input("Startdato", value=default_start, key=f"{key_prefix}_start")

        use_opening = st.checkbox(
            "Oppgi kjent saldo på en dato", value=default_opening is not None,
            key=f"{key_prefix}_use_opening",
            help="Nyttig når lånet er refinansiert eller du vet nøyaktig restgjeld fra banken.",
        )
        c1, c2 = st.columns(2)
        with c1:
            opening_balance = st.number_input(
                "Inngående saldo (kr)", min_value=0.0, value=default_opening or 0.0,
                step=10_000.0, key=f"{key_prefix}_opening")
        with c2:
            opening_balance_date = st.date_input(
                "Saldodato", value=opening_date or date.today(), key=f"{key_prefix}_opening_date")

        notes = st.text_area("Notat", value=default_notes, key=f"{key_prefix}_notes")

        submitted = st.form_submit_button(
            "Lagre endringer" if is_edit else "Legg til lån", width='stretch', type="primary")

        if submitted:
            try:
                principal_oere = nok_to_oere(str(principal))
                opening_oere = nok_to_oere(str(opening_balance)) if use_opening else None
            except ValueError as exc:
                st.error(str(exc))
                return None
            return {
                "name": name,
                "principal_oere": principal_oere,
                "annual_rate_pct": rate,
                "term_months": int(term),
                "start_date": start_date,
                "opening_balance_oere": opening_oere,
                "opening_balance_date": opening_balance_date if use_opening else None,
                "notes": notes,
            }
    return None


def render_extra_payment_form(key_prefix: str = "extra") -> dict | None:
    with st.form(f"{key_prefix}_form", clear_on_submit=True):
        st.subheader("Registrer ekstra innbetaling")
        c1, c2 = st.columns(2)
        with c1:
            amount = st.number_input(
                "Beløp (kr)", min_value=0.0, value=10_000.0, step=1_000.0,
                key=f"{key_prefix}_amount")
        with c2:
            paid_on = st.date_input("Dato", value=date.today(), key=f"{key_prefix}_date")
        notes = st.text_input("Notat", key=f"{key_prefix}_notes")

        if st.form_submit_button("Registrer", width='stretch'):
            try:
                amount_oere = nok_to_oere(str(amount))
            except ValueError as exc:
                st.error(str(exc))
                return None
            return {
                "amount_oere": amount_oere,
                "date": paid_on,
                "notes": notes,
            }
    return None
