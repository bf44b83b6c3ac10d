from datetime import date
from typing import Dict, List, Optional, Tuple

from config.constants import ColumnField
from config.settings import MAX_OERE


def validate_loan(
    name: str,
    principal_oere: int,
    annual_rate_pct: float,
    term_months: int,
    start_date: date,
    opening_balance_oere: Optional[int] = None,
    opening_balance_date: Optional[date] = None,
) -> Tuple[bool, str]:
    """Valider låneinput, returnerer (gyldig, feilmelding)"""
    if not name or not name.strip():
        return False, "Navn på lånet kan ikke være tomt"

    if principal_oere is None or principal_oere <= 0:
        return False, "Lånebeløp må være større enn 0"

    if principal_oere > MAX_OERE:
        return False, "Lånebeløp er for stort"

    if annual_rate_pct is None or annual_rate_pct < 0 or annual_rate_pct > 30:
        return False, "Renten må være mellom 0 og 30 %"

    if term_months is None or term_months <= 0 or term_months > 600:
        return False, "Løpetiden må være mellom 1 og 600 måneder"

    if start_date is None:
        return False, "Startdato mangler"

    # inngående saldo må ha både beløp og dato
    if (opening_balance_oere is None) != (opening_balance_date is None):
        return False, "Inngående saldo krever både beløp og dato"

    if opening_balance_oere is not None:
        if opening_balance_oere < 0:
            return False, "Inngående saldo kan ikke være negativ"
        if opening_balance_date < start_date:
            return False, "Dato for inngående saldo kan ikke være før startdato"

    return True, ""


def validate_extra_payment(
    amount_oere: int,
    payment_date: date,
    start_date: Optional[date] = None,
) -> Tuple[bool, str]:
    if amount_oere is None or amount_oere <= 0:
        return False, "Beløpet må være større enn 0"

    if amount_oere > MAX_OERE:
        return False, "Beløpet er for stort"

    if payment_date is None:
        return False, "Dato mangler"

    if start_date is not None and payment_date < start_date:
        return False, "Innbetalingen kan ikke være før lånets startdato"

    return True, ""


def validate_column_mapping(mapping: Dict[str, str], headers: List[str]) -> Tuple[bool, str]:
    """Sjekk at dato, beløp og beskrivelse peker på kolonner som finnes"""
    for field in ColumnField:
        column = mapping.get(field.value)
        if not column:
            return False, f"Velg kolonne for {field.label.lower()}"
        if column not in headers:
            return False, f"Kolonnen finnes ikke: {column}"

    if mapping[ColumnField.DATE.value] == mapping[ColumnField.AMOUNT.value]:
        return False, "Dato og beløp kan ikke være samme kolonne"

    return True, ""
