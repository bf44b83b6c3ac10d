from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class LoanTerms:
    principal_oere: int
    annual_rate_pct: float
    term_months: int
    start_date: str  # yyyy-mm-dd


@dataclass(frozen=True)
class OpeningCheckpoint:
    balance_oere: int
    date: str  # yyyy-mm-dd


@dataclass(frozen=True)
class ExtraPayment:
    date: str  # yyyy-mm-dd
    amount_oere: int


@dataclass
class LoanBalanceResult:
    current_balance_oere: int
    monthly_payment_oere: int
    remaining_months: int
    principal_paid_pct: int  # 0-100


@dataclass
class EarlyPayoffResult:
    regular_months: int
    new_months: int
    months_saved: int
    interest_saved_oere: int


@dataclass
class LoanPayoffResult:
    months: Optional[int] = None
    payoff_date: Optional[date] = None
    total_interest_oere: Optional[int] = None
    total_paid_oere: Optional[int] = None


@dataclass
class CsvDetectionResult:
    delimiter: str  # ; , \t
    decimal_separator: str  # . ,
    date_format: str  # dd.mm.yyyy / yyyy-mm-dd / unknown
    encoding_hint: str  # UTF-8 / ISO-8859-1
    confident: bool
    bank_hint: str = "unknown"  # dnb / nordea / sparebank1 / unknown


@dataclass
class LoanRecord:
    loan_id: str
    name: str
    principal_oere: int
    annual_rate_pct: float
    term_months: int
    start_date: str
    opening_balance_oere: Optional[int] = None
    opening_balance_date: Optional[str] = None
    notes: str = ""
