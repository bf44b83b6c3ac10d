"""Formaterte tabeller"""
import pandas as pd
import streamlit as st

from utils.formatters import format_nok, fmt_months, fmt_percent


def _format_money_columns(df: pd.DataFrame, columns: list) -> pd.DataFrame:
    for col in columns:
        if col in df.columns:
            df[col] = df[col].apply(lambda x: format_nok(int(x)))
    return df


def render_schedule_table(schedule: pd.DataFrame, show_all: bool = False):
    """Nedbetalingsplan med norske kolonnenavn"""
    if schedule.empty:
        st.info("Ingen nedbetalingsplan å vise")
        return

    col_map = {
        "period": "Termin",
        "month": "Måned",
        "opening_balance_oere": "Inngående saldo",
        "interest_oere": "Renter",
        "scheduled_payment_oere": "Terminbeløp",
        "extra_payment_oere": "Ekstra",
        "closing_balance_oere": "Utgående saldo",
        "cumulative_interest_oere": "Sum renter",
    }
    display_df = schedule[[c for c in col_map if c in schedule.columns]].copy()
    display_df = _format_money_columns(display_df, [c for c in col_map if c.endswith("_oere")])
    display_df = display_df.rename(columns=col_map)

    if not show_all and len(display_df) > 24:
        st.dataframe(display_df, width='stretch', height=600, hide_index=True)
    else:
        st.dataframe(display_df, width='stretch', hide_index=True)


def render_loan_overview_table(overview: pd.DataFrame):
    if overview.empty:
        st.info("Ingen lån registrert")
        return

    display = overview.copy()
    display = _format_money_columns(display, ["current_balance_oere", "monthly_payment_oere"])
    display["remaining_months"] = display["remaining_months"].apply(fmt_months)
    display["principal_paid_pct"] = display["principal_paid_pct"].apply(fmt_percent)
    display = display.drop(columns=["loan_id"]).rename(columns={
        "name": "Lån",
        "current_balance_oere": "Restgjeld",
        "monthly_payment_oere": "Terminbeløp",
        "remaining_months": "Gjenstående",
        "principal_paid_pct": "Nedbetalt",
    })
    st.dataframe(display, width='stretch', hide_index=True)


def render_extra_payments_table(payments: pd.DataFrame):
    if payments.empty:
        st.caption("Ingen ekstra innbetalinger registrert")
        return
    display = payments[["date", "amount_oere", "notes"]].copy()
    display["date"] = display["date"].astype(str).str[:10]
    display = _format_money_columns(display, ["amount_oere"])
    display = display.rename(columns={"date": "Dato", "amount_oere": "Beløp", "notes": "Notat"})
    st.dataframe(display, width='stretch', hide_index=True)


def render_transactions_table(transactions: pd.DataFrame):
    """Forhåndsvisning av importerte transaksjoner; duplikater markeres"""
    if transactions.empty:
        st.info("Ingen gyldige transaksjoner funnet")
        return
    display = transactions.copy()
    display = _format_money_columns(display, ["amount_oere"])
    if "is_duplicate" in display.columns:
        display["is_duplicate"] = display["is_duplicate"].apply(lambda x: "⚠️" if x else "")
    display = display.rename(columns={
        "date": "Dato",
        "amount_oere": "Beløp",
        "description": "Beskrivelse",
        "is_duplicate": "Duplikat",
    })
    st.dataframe(display, width='stretch', hide_index=True)
