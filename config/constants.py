from enum import Enum


class Delimiter(str, Enum):
    SEMICOLON = ";"
    COMMA = ","
    TAB = "\t"

    @property
    def label(self) -> str:
        return {
            ";": "Semikolon (;)",
            ",": "Komma (,)",
            "\t": "Tab (⇥)",
        }[self.value]


class DecimalSeparator(str, Enum):
    DOT = "."
    COMMA = ","

    @property
    def label(self) -> str:
        return {
            ".": "Punktum (1234.56)",
            ",": "Komma (1234,56)",
        }[self.value]


class DateFormat(str, Enum):
    DD_MM_YYYY = "dd.mm.yyyy"
    YYYY_MM_DD = "yyyy-mm-dd"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return {
            "dd.mm.yyyy": "dd.mm.åååå",
            "yyyy-mm-dd": "åååå-mm-dd",
            "unknown": "Ukjent",
        }[self.value]


class EncodingHint(str, Enum):
    UTF_8 = "UTF-8"
    ISO_8859_1 = "ISO-8859-1"


class BankHint(str, Enum):
    DNB = "dnb"
    NORDEA = "nordea"
    SPAREBANK1 = "sparebank1"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return {
            "dnb": "DNB",
            "nordea": "Nordea",
            "sparebank1": "Sparebank 1",
            "unknown": "Ukjent bank",
        }[self.value]


class ColumnField(str, Enum):
    DATE = "date"
    AMOUNT = "amount"
    DESCRIPTION = "description"

    @property
    def label(self) -> str:
        return {
            "date": "Dato",
            "amount": "Beløp",
            "description": "Beskrivelse",
        }[self.value]


# Nøkkelord for å gjette kolonner i bankeksporter, i prioritert rekkefølge
COLUMN_KEYWORDS = {
    ColumnField.DATE.value: ["dato", "date", "bokf", "registrert", "tid"],
    ColumnField.AMOUNT.value: ["beløp", "belop", "amount", "sum", "nok", "kr"],
    ColumnField.DESCRIPTION.value: [
        "tekst", "beskrivelse", "description", "forklaring",
        "tittel", "title", "navn", "mottaker", "avsender",
    ],
}

# Sheet-navn
SHEET_LOANS = "Lån"
SHEET_EXTRA_PAYMENTS = "Ekstra innbetalinger"
SHEET_CONFIG = "Innstillinger"

# Kolonnedefinisjoner
LOANS_COLUMNS = [
    "loan_id", "name", "principal_oere", "annual_rate_pct", "term_months",
    "start_date", "opening_balance_oere", "opening_balance_date", "notes",
]

EXTRA_PAYMENTS_COLUMNS = [
    "payment_id", "loan_id", "date", "amount_oere", "notes",
]

CONFIG_COLUMNS = ["key", "value", "description", "updated_at"]

SCHEDULE_COLUMNS = [
    "period", "month", "opening_balance_oere", "interest_oere",
    "scheduled_payment_oere", "extra_payment_oere",
    "closing_balance_oere", "cumulative_interest_oere",
]

TRANSACTION_COLUMNS = ["date", "amount_oere", "description"]

LOAN_OVERVIEW_COLUMNS = [
    "loan_id", "name", "current_balance_oere", "monthly_payment_oere",
    "remaining_months", "principal_paid_pct",
]
