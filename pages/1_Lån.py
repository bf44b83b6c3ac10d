"""Lån: oversikt, detaljer, ekstra innbetalinger og hva-om"""
import logging
from datetime import date

import streamlit as st

from components.charts import create_balance_line, create_interest_cumulative, create_what_if_chart
from components.forms import render_extra_payment_form, render_loan_form
from components.metrics import render_early_payoff_metrics, render_loan_metrics, render_overview_totals
from components.tables import render_extra_payments_table, render_loan_overview_table, render_schedule_table
from core.errors import InvalidArgument
from core.loan_math import compute_early_payoff, generate_amortization_schedule, payoff_path
from core.loan_register import extra_payments_for, loan_balance_for, loan_from_row, loan_overview
from data_manager.data_validator import validate_extra_payment, validate_loan
from data_manager.excel_handler import (
    delete_extra_payment, delete_loan, get_all_loans, get_extra_payments,
    save_extra_payment, save_loan,
)
from utils.date_utils import parse_iso_date
from utils.id_generator import generate_loan_id, generate_payment_id

logger = logging.getLogger(__name__)

st.set_page_config(page_title="Lån", page_icon="🏠", layout="wide")
st.title("🏠 Lån")


def _loan_row(form: dict, loan_id: str) -> dict:
    return {
        "loan_id": loan_id,
        "name": form["name"].strip(),
        "principal_oere": form["principal_oere"],
        "annual_rate_pct": form["annual_rate_pct"],
        "term_months": form["term_months"],
        "start_date": form["start_date"].isoformat(),
        "opening_balance_oere": form["opening_balance_oere"],
        "opening_balance_date": form["opening_balance_date"].isoformat() if form["opening_balance_date"] else None,
        "notes": form["notes"],
    }


def _check(form: dict):
    return validate_loan(
        form["name"], form["principal_oere"], form["annual_rate_pct"],
        form["term_months"], form["start_date"],
        form["opening_balance_oere"], form["opening_balance_date"],
    )


loans = get_all_loans()
payments = get_extra_payments()
today = date.today()

tab_overview, tab_detail, tab_new = st.tabs(["Oversikt", "Detaljer", "Nytt lån"])

with tab_new:
    form = render_loan_form("new")
    if form:
        ok, msg = _check(form)
        if not ok:
            st.error(msg)
        else:
            save_loan(_loan_row(form, generate_loan_id()))
            st.success(f"Lånet «{form['name']}» er lagret")
            st.rerun()

with tab_overview:
    if loans.empty:
        st.info("Ingen lån ennå. Legg til et lån under «Nytt lån».")
    else:
        try:
            overview = loan_overview(loans, payments, today=today)
        except InvalidArgument as exc:
            st.error(f"Kunne ikke beregne saldo: {exc}")
        else:
            render_overview_totals(
                int(overview["current_balance_oere"].sum()),
                int(overview["monthly_payment_oere"].sum()),
                len(overview),
            )
            render_loan_overview_table(overview)

with tab_detail:
    if loans.empty:
        st.info("Ingen lån ennå.")
        st.stop()

    names = loans["name"].astype(str).tolist()
    ids = loans["loan_id"].astype(str).tolist()
    selected = st.selectbox("Velg lån", range(len(ids)), format_func=lambda i: names[i])
    row = loans.iloc[selected]
    loan = loan_from_row(row)

    try:
        result = loan_balance_for(loan, payments, today=today)
    except InvalidArgument as exc:
        st.error(f"Ugyldige lånedata: {exc}")
        st.stop()

    render_loan_metrics(result)

    loan_payments = get_extra_payments(loan.loan_id)
    schedule = generate_amortization_schedule(
        loan.principal_oere, loan.annual_rate_pct, loan.term_months, loan.start_date,
        extra_payments_for(loan.loan_id, payments),
        loan.opening_balance_oere, loan.opening_balance_date,
    )

    c1, c2 = st.columns(2)
    with c1:
        st.plotly_chart(create_balance_line(schedule), width='stretch')
    with c2:
        st.plotly_chart(create_interest_cumulative(schedule), width='stretch')

    with st.expander("Nedbetalingsplan"):
        render_schedule_table(schedule)

    st.divider()
    st.subheader("Hva om jeg betaler ekstra hver måned?")
    extra_monthly = st.slider("Ekstra per måned (kr)", 0, 20_000, 2_000, step=500)
    projection = compute_early_payoff(
        result.current_balance_oere, loan.annual_rate_pct,
        result.monthly_payment_oere, extra_monthly * 100,
    )
    if projection is None:
        st.info("Ingen fremskrivning mulig: lånet er nedbetalt eller terminbeløpet dekker ikke renten.")
    else:
        render_early_payoff_metrics(projection)
        regular = payoff_path(result.current_balance_oere, loan.annual_rate_pct, result.monthly_payment_oere)
        faster = payoff_path(
            result.current_balance_oere, loan.annual_rate_pct,
            result.monthly_payment_oere, extra_monthly * 100,
        )
        st.plotly_chart(create_what_if_chart(regular, faster), width='stretch')

    st.divider()
    st.subheader("Ekstra innbetalinger")
    render_extra_payments_table(loan_payments)

    extra = render_extra_payment_form(f"extra_{loan.loan_id}")
    if extra:
        ok, msg = validate_extra_payment(extra["amount_oere"], extra["date"], parse_iso_date(loan.start_date))
        if not ok:
            st.error(msg)
        else:
            save_extra_payment({
                "payment_id": generate_payment_id(),
                "loan_id": loan.loan_id,
                "date": extra["date"].isoformat(),
                "amount_oere": extra["amount_oere"],
                "notes": extra["notes"],
            })
            st.success("Innbetalingen er registrert")
            st.rerun()

    if not loan_payments.empty:
        labels = {
            str(r["payment_id"]): f"{str(r['date'])[:10]}  {int(r['amount_oere']) / 100:,.2f} kr"
            for _, r in loan_payments.iterrows()
        }
        to_remove = st.selectbox("Slett innbetaling", list(labels), format_func=labels.get)
        if st.button("Slett valgt innbetaling"):
            delete_extra_payment(to_remove)
            st.rerun()

    st.divider()
    with st.expander("Endre eller slett lånet"):
        edited = render_loan_form(f"edit_{loan.loan_id}", row)
        if edited:
            ok, msg = _check(edited)
            if not ok:
                st.error(msg)
            else:
                save_loan(_loan_row(edited, loan.loan_id))
                st.success("Endringene er lagret")
                st.rerun()

        if st.button("Slett lånet", type="secondary"):
            delete_loan(loan.loan_id)
            logger.info("deleted loan %s from the dashboard", loan.loan_id)
            st.rerun()
