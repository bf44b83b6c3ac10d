"""Import av kontoutskrift fra banken"""
import pandas as pd
import streamlit as st

from components.tables import render_transactions_table
from config.constants import BankHint, ColumnField, DateFormat, DecimalSeparator, Delimiter
from config.settings import DEFAULT_SAMPLE_LINES
from core.csv_import import (
    decode_bank_file, guess_column_mapping, mark_duplicates, read_bank_csv, to_transactions,
)
from core.errors import CsvImportError
from data_manager.data_validator import validate_column_mapping
from data_manager.excel_handler import get_config_float

st.set_page_config(page_title="CSV-import", page_icon="📥", layout="wide")
st.title("📥 Import av kontoutskrift")
st.caption("Støtter eksport fra DNB, Nordea, Sparebank 1 og de fleste andre norske banker.")

if "imported_transactions" not in st.session_state:
    st.session_state.imported_transactions = None

uploaded = st.file_uploader("Velg CSV-fil", type=["csv", "txt"])
if uploaded is None:
    st.stop()

raw = decode_bank_file(uploaded.getvalue())
sample_lines = int(get_config_float("csv_sample_lines", DEFAULT_SAMPLE_LINES))

try:
    detection, frame = read_bank_csv(raw, sample_lines=sample_lines)
except CsvImportError as exc:
    st.error(str(exc))
    st.stop()

st.subheader("Gjenkjent format")
c1, c2, c3, c4, c5 = st.columns(5)
with c1:
    st.metric("Bank", BankHint(detection.bank_hint).label)
with c2:
    st.metric("Skilletegn", Delimiter(detection.delimiter).label)
with c3:
    st.metric("Desimaltegn", DecimalSeparator(detection.decimal_separator).label)
with c4:
    st.metric("Datoformat", DateFormat(detection.date_format).label)
with c5:
    st.metric("Tegnsett", detection.encoding_hint)

if not detection.confident:
    st.warning("Formatet ble ikke gjenkjent med sikkerhet. Kontroller valgene under.")

decimal_separator = st.radio(
    "Desimaltegn",
    options=[d.value for d in DecimalSeparator],
    index=[d.value for d in DecimalSeparator].index(detection.decimal_separator),
    format_func=lambda x: DecimalSeparator(x).label,
    horizontal=True,
)

st.subheader("Kolonner")
headers = list(frame.columns)
guessed = guess_column_mapping(headers)
mapping = {}
cols = st.columns(len(ColumnField))
for col, field in zip(cols, ColumnField):
    with col:
        mapping[field.value] = st.selectbox(
            field.label, headers, index=headers.index(guessed[field.value]) if guessed[field.value] in headers else 0,
            key=f"map_{field.value}",
        )

ok, msg = validate_column_mapping(mapping, headers)
if not ok:
    st.error(msg)
    st.stop()

transactions = to_transactions(frame, mapping, decimal_separator)
previous = st.session_state.imported_transactions
checked = mark_duplicates(transactions, previous)

st.subheader(f"Forhåndsvisning ({len(checked)} transaksjoner)")
duplicates = int(checked["is_duplicate"].sum()) if not checked.empty else 0
if duplicates:
    st.warning(f"{duplicates} transaksjoner finnes allerede i tidligere import")
render_transactions_table(checked)

if st.button("Behold transaksjonene", type="primary", disabled=checked.empty):
    fresh = checked[~checked["is_duplicate"]].drop(columns=["is_duplicate"])
    if previous is None or previous.empty:
        st.session_state.imported_transactions = fresh.reset_index(drop=True)
    else:
        st.session_state.imported_transactions = pd.concat([previous, fresh], ignore_index=True)
    st.success(f"{len(fresh)} nye transaksjoner lagt til")
