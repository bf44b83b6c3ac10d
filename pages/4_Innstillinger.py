"""Innstillinger"""
import streamlit as st

from config.settings import (
    DEFAULT_LOAN_RATE, DEFAULT_SAMPLE_LINES, DEFAULT_SAVINGS_RETURN, DEFAULT_TERM_MONTHS, EXCEL_FILE,
)
from data_manager.excel_handler import get_all_config, get_config_float, init_excel, set_config

st.set_page_config(page_title="Innstillinger", page_icon="⚙️", layout="wide")
st.title("⚙️ Innstillinger")

init_excel()

current_rate = get_config_float("default_rate", DEFAULT_LOAN_RATE)
current_term = int(get_config_float("default_term_months", DEFAULT_TERM_MONTHS))
current_return = get_config_float("savings_return", DEFAULT_SAVINGS_RETURN)
current_sample = int(get_config_float("csv_sample_lines", DEFAULT_SAMPLE_LINES))

st.info("Verdiene lagres i arbeidsboken og brukes som standard i skjemaer og kalkulatorer.")

with st.form("settings_form"):
    st.subheader("Lån")
    c1, c2 = st.columns(2)
    with c1:
        new_rate = st.number_input(
            "Standard rente (%)", min_value=0.0, max_value=30.0,
            value=current_rate, step=0.05, format="%.2f",
        )
    with c2:
        new_term = st.number_input(
            "Standard løpetid (mnd)", min_value=1, max_value=600, value=current_term,
        )

    st.subheader("Sparing og import")
    c3, c4 = st.columns(2)
    with c3:
        new_return = st.number_input(
            "Forventet avkastning (%)", min_value=0.0, max_value=30.0,
            value=current_return, step=0.5, format="%.1f",
        )
    with c4:
        new_sample = st.number_input(
            "Linjer som undersøkes ved CSV-import", min_value=1, max_value=500, value=current_sample,
            help="Flere linjer gir sikrere gjenkjenning av store filer",
        )

    if st.form_submit_button("Lagre", width='stretch', type="primary"):
        set_config("default_rate", str(new_rate), "Standard rente (%)")
        set_config("default_term_months", str(int(new_term)), "Standard løpetid (mnd)")
        set_config("savings_return", str(new_return), "Forventet avkastning sparing (%)")
        set_config("csv_sample_lines", str(int(new_sample)), "Linjer som undersøkes ved CSV-import")
        st.success("Innstillingene er lagret")
        st.rerun()

st.divider()
st.subheader("Lagrede verdier")
config_df = get_all_config()
if not config_df.empty:
    st.dataframe(
        config_df.rename(columns={
            "key": "Nøkkel", "value": "Verdi", "description": "Beskrivelse", "updated_at": "Oppdatert",
        }),
        width='stretch', hide_index=True,
    )

st.caption(f"Data lagres i `{EXCEL_FILE}`")
