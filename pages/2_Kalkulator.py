"""Kalkulatorer: nedbetaling og sparing"""
import streamlit as st

from components.charts import create_savings_chart
from components.metrics import render_payoff_metrics
from config.settings import DEFAULT_LOAN_RATE, DEFAULT_SAVINGS_RETURN, SAVINGS_HORIZONS_YEARS
from core.loan_math import calc_loan_payoff, compute_monthly_payment
from core.savings_math import calc_savings_projection, savings_projection_series
from data_manager.excel_handler import get_config_float
from utils.formatters import format_nok
from utils.money import nok_to_oere

st.set_page_config(page_title="Kalkulator", page_icon="🧮", layout="wide")
st.title("🧮 Kalkulator")

tab_payoff, tab_payment, tab_savings = st.tabs(["Nedbetaling", "Terminbeløp", "Sparing"])

with tab_payoff:
    st.caption("Hvor lang tid tar det å bli gjeldfri med en fast månedlig betaling?")
    c1, c2, c3 = st.columns(3)
    with c1:
        balance = st.number_input("Restgjeld (kr)", min_value=0.0, value=250_000.0, step=5_000.0)
    with c2:
        rate = st.number_input(
            "Rente (%)", min_value=0.0, max_value=30.0,
            value=get_config_float("default_rate", DEFAULT_LOAN_RATE), step=0.1, key="payoff_rate")
    with c3:
        payment = st.number_input("Betaling per måned (kr)", min_value=0.0, value=5_000.0, step=500.0)

    try:
        result = calc_loan_payoff(nok_to_oere(str(balance)), rate, nok_to_oere(str(payment)))
    except ValueError as exc:
        st.error(str(exc))
    else:
        render_payoff_metrics(result)
        if result.total_paid_oere is not None:
            st.write(f"Totalt betalt: **{format_nok(result.total_paid_oere)}**")

with tab_payment:
    c1, c2, c3 = st.columns(3)
    with c1:
        principal = st.number_input("Lånebeløp (kr)", min_value=1.0, value=3_000_000.0, step=50_000.0)
    with c2:
        loan_rate = st.number_input(
            "Rente (%)", min_value=0.0, max_value=30.0,
            value=get_config_float("default_rate", DEFAULT_LOAN_RATE), step=0.1, key="payment_rate")
    with c3:
        years = st.number_input("Løpetid (år)", min_value=1, max_value=50, value=25)

    try:
        monthly = compute_monthly_payment(nok_to_oere(str(principal)), loan_rate, int(years) * 12)
    except ValueError as exc:
        st.error(str(exc))
    else:
        st.metric("Terminbeløp", format_nok(monthly))
        st.write(f"Totalt over {int(years)} år: **{format_nok(monthly * int(years) * 12)}**")

with tab_savings:
    c1, c2, c3 = st.columns(3)
    with c1:
        initial = st.number_input("Startbeløp (kr)", min_value=0.0, value=50_000.0, step=5_000.0)
    with c2:
        contrib = st.number_input("Sparing per måned (kr)", min_value=0.0, value=2_000.0, step=500.0)
    with c3:
        annual_return = st.number_input(
            "Forventet avkastning (%)", min_value=0.0, max_value=30.0,
            value=get_config_float("savings_return", DEFAULT_SAVINGS_RETURN), step=0.5)

    try:
        initial_oere = nok_to_oere(str(initial))
        contrib_oere = nok_to_oere(str(contrib))
    except ValueError as exc:
        st.error(str(exc))
        st.stop()

    cols = st.columns(len(SAVINGS_HORIZONS_YEARS))
    for col, horizon in zip(cols, SAVINGS_HORIZONS_YEARS):
        with col:
            st.metric(f"Om {horizon} år", format_nok(
                calc_savings_projection(initial_oere, contrib_oere, annual_return, horizon)))

    series = savings_projection_series(initial_oere, contrib_oere, annual_return, max(SAVINGS_HORIZONS_YEARS))
    st.plotly_chart(create_savings_chart(series), width='stretch')
