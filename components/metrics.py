"""Nøkkeltall-kort"""
import streamlit as st

from data_manager.schema import EarlyPayoffResult, LoanBalanceResult, LoanPayoffResult
from utils.formatters import format_nok, fmt_months, fmt_percent


def render_loan_metrics(result: LoanBalanceResult):
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Restgjeld", format_nok(result.current_balance_oere))
    with c2:
        st.metric("Terminbeløp", format_nok(result.monthly_payment_oere))
    with c3:
        st.metric("Gjenstående", fmt_months(result.remaining_months))
    with c4:
        st.metric("Nedbetalt", fmt_percent(result.principal_paid_pct))


def render_overview_totals(total_balance_oere: int, total_monthly_oere: int, loan_count: int):
    """Summer for alle lån"""
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Samlet gjeld", format_nok(total_balance_oere))
    with c2:
        st.metric("Sum terminbeløp", format_nok(total_monthly_oere))
    with c3:
        st.metric("Antall lån", str(loan_count))


def render_early_payoff_metrics(result: EarlyPayoffResult):
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Ny nedbetalingstid", fmt_months(result.new_months),
                  delta=f"-{fmt_months(result.months_saved)}", delta_color="inverse")
    with c2:
        st.metric("Spart tid", fmt_months(result.months_saved))
    with c3:
        st.metric("Spart rente", format_nok(result.interest_saved_oere))


def render_payoff_metrics(result: LoanPayoffResult):
    if result.months is None:
        st.warning("Betalingen dekker ikke rentene, lånet blir aldri nedbetalt.")
        return
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Nedbetalingstid", fmt_months(result.months))
    with c2:
        st.metric("Nedbetalt", result.payoff_date.strftime("%m.%Y"))
    with c3:
        st.metric("Totale renter", format_nok(result.total_interest_oere))
