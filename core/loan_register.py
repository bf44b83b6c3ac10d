"""Saldo for lagrede lån

Leser lån og ekstra innbetalinger slik de ligger i Excel og regner ut
gjeldende saldo på nytt ved hvert kall. Ingenting caches.
"""
from datetime import date, datetime
from typing import List, Optional

import pandas as pd

from config.constants import LOAN_OVERVIEW_COLUMNS
from core.loan_math import compute_balance_for_terms
from data_manager.schema import ExtraPayment, LoanBalanceResult, LoanRecord, LoanTerms, OpeningCheckpoint


def _parse_date(d) -> Optional[str]:
    """Excel gir datoer som Timestamp, tekst eller tomme celler"""
    if d is None or (not isinstance(d, str) and pd.isna(d)):
        return None
    if isinstance(d, (pd.Timestamp, datetime)):
        return d.date().isoformat()
    if isinstance(d, date):
        return d.isoformat()
    s = str(d).strip()
    return s[:10] if s else None


def _optional_int(value) -> Optional[int]:
    if value is None or (not isinstance(value, str) and pd.isna(value)) or value == "":
        return None
    return int(value)


def loan_from_row(row: pd.Series) -> LoanRecord:
    return LoanRecord(
        loan_id=str(row["loan_id"]),
        name=str(row.get("name", "")),
        principal_oere=int(row["principal_oere"]),
        annual_rate_pct=float(row["annual_rate_pct"]),
        term_months=int(row["term_months"]),
        start_date=_parse_date(row["start_date"]),
        opening_balance_oere=_optional_int(row.get("opening_balance_oere")),
        opening_balance_date=_parse_date(row.get("opening_balance_date")),
        notes="" if pd.isna(row.get("notes", "")) else str(row.get("notes", "")),
    )


def extra_payments_for(loan_id: str, payments: Optional[pd.DataFrame]) -> List[ExtraPayment]:
    if payments is None or payments.empty or "loan_id" not in payments.columns:
        return []
    rows = payments[payments["loan_id"].astype(str) == str(loan_id)]
    return [
        ExtraPayment(date=_parse_date(r["date"]), amount_oere=int(r["amount_oere"]))
        for _, r in rows.iterrows()
    ]


def loan_balance_for(
    loan: LoanRecord,
    payments: Optional[pd.DataFrame],
    today: Optional[date] = None,
) -> LoanBalanceResult:
    terms = LoanTerms(
        principal_oere=loan.principal_oere,
        annual_rate_pct=loan.annual_rate_pct,
        term_months=loan.term_months,
        start_date=loan.start_date,
    )
    checkpoint = None
    if loan.opening_balance_oere is not None and loan.opening_balance_date:
        checkpoint = OpeningCheckpoint(
            balance_oere=loan.opening_balance_oere,
            date=loan.opening_balance_date,
        )
    return compute_balance_for_terms(
        terms, extra_payments_for(loan.loan_id, payments), checkpoint, today=today,
    )


def loan_overview(
    loans: pd.DataFrame,
    payments: Optional[pd.DataFrame],
    today: Optional[date] = None,
) -> pd.DataFrame:
    """Én rad per lån med gjeldende saldo, terminbeløp, restløpetid og andel nedbetalt"""
    now = today if today is not None else date.today()
    rows = []
    for _, row in loans.iterrows():
        loan = loan_from_row(row)
        result = loan_balance_for(loan, payments, today=now)
        rows.append({
            "loan_id": loan.loan_id,
            "name": loan.name,
            "current_balance_oere": result.current_balance_oere,
            "monthly_payment_oere": result.monthly_payment_oere,
            "remaining_months": result.remaining_months,
            "principal_paid_pct": result.principal_paid_pct,
        })
    return pd.DataFrame(rows, columns=LOAN_OVERVIEW_COLUMNS)
