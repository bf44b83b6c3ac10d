"""Lånemotor: annuitetsbeløp, saldo-simulering og ekstra nedbetaling

Alle beløp er heltall i øre. Saldoen rundes til nærmeste øre etter hver
renteberegning, så simuleringen går måned for måned i stedet for å bruke en
lukket formel for restsaldo.
"""
import logging
import math
from datetime import date
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import pandas as pd

from config.constants import SCHEDULE_COLUMNS
from core.errors import InvalidArgument
from data_manager.schema import (
    EarlyPayoffResult,
    ExtraPayment,
    LoanBalanceResult,
    LoanPayoffResult,
    LoanTerms,
    OpeningCheckpoint,
)
from utils.date_utils import DateLike, add_months, month_index, parse_iso_date
from utils.money import round_half_up

logger = logging.getLogger(__name__)

PaymentLike = Union[ExtraPayment, Mapping]


def _monthly_rate(annual_rate_pct: float) -> float:
    return annual_rate_pct / 100 / 12


def _check_terms(annual_rate_pct: float, term_months: int) -> None:
    if term_months is None or term_months <= 0:
        raise InvalidArgument(f"Løpetid må være minst 1 måned, fikk {term_months}")
    if annual_rate_pct is None or annual_rate_pct < 0 or not math.isfinite(annual_rate_pct):
        raise InvalidArgument(f"Rente må være et tall fra 0 og oppover, fikk {annual_rate_pct}")


def compute_monthly_payment(
    principal_oere: int,
    annual_rate_pct: float,
    term_months: int,
) -> int:
    """Fast månedlig terminbeløp for et annuitetslån (øre)

    Rentefrie lån rundes opp slik at lånet aldri blir stående med en rest.
    Ved svært lang løpetid går beløpet mot ren rente, ``principal * r``.
    """
    _check_terms(annual_rate_pct, term_months)
    if annual_rate_pct == 0:
        return math.ceil(principal_oere / term_months)
    r = _monthly_rate(annual_rate_pct)
    try:
        factor = (1 + r) ** term_months
    except OverflowError:
        factor = math.inf
    if factor == 1:
        # renten er så lav at den forsvinner i flyttallspresisjon
        return math.ceil(principal_oere / term_months)
    payment = principal_oere * r * factor / (factor - 1) if math.isfinite(factor) else math.nan
    if not math.isfinite(payment):
        logger.debug("annuity factor overflows for %d months, using interest-only limit", term_months)
        payment = principal_oere * r
        if not math.isfinite(payment):
            raise InvalidArgument(f"Renten {annual_rate_pct} gir et terminbeløp utenfor gyldig område")
    return round_half_up(payment)


def months_to_payoff(
    balance_oere: int,
    annual_rate_pct: float,
    payment_oere: int,
) -> Optional[int]:
    """Antall måneder til nedbetalt med fast betaling, None hvis betalingen ikke dekker renten"""
    if payment_oere <= 0:
        return None
    r = _monthly_rate(annual_rate_pct)
    if r == 0:
        return math.ceil(balance_oere / payment_oere)
    ratio = r * balance_oere / payment_oere
    if ratio >= 1:
        return None
    return math.ceil(-math.log(1 - ratio) / math.log(1 + r))


def _payment_fields(payment: PaymentLike) -> Tuple[date, int]:
    if isinstance(payment, Mapping):
        raw_date = payment.get("date")
        amount = payment.get("amount_oere")
    else:
        raw_date = payment.date
        amount = payment.amount_oere
    if amount is None:
        raise InvalidArgument(f"Ekstra innbetaling mangler beløp: {payment!r}")
    return parse_iso_date(raw_date), int(amount)


def aggregate_extra_payments(
    extra_payments: Iterable[PaymentLike],
    since: Optional[date] = None,
) -> Dict[int, int]:
    """Summer ekstra innbetalinger per absolutt månedsindeks

    Innbetalinger datert før ``since`` hoppes over (de ligger allerede i
    inngående saldo).
    """
    by_month: Dict[int, int] = {}
    for payment in extra_payments:
        paid_on, amount = _payment_fields(payment)
        if since is not None and paid_on < since:
            continue
        idx = month_index(paid_on)
        by_month[idx] = by_month.get(idx, 0) + amount
    return by_month


def _amortize(
    balance: int,
    monthly_rate: float,
    payment: int,
    start_idx: int,
    steps: int,
    extra_by_month: Dict[int, int],
) -> Iterator[Tuple[int, int, int, int, int, int]]:
    """Én rad per simulert måned: (steg, inngående, rente, betalt, ekstra, utgående)"""
    for step in range(steps):
        if balance <= 0:
            break
        opening = balance
        if monthly_rate > 0:
            balance = round_half_up(balance + balance * monthly_rate)
        interest = balance - opening

        paid = min(payment, balance)
        balance = max(0, balance - payment)

        extra = extra_by_month.get(start_idx + step, 0)
        applied_extra = 0
        if extra > 0:
            applied_extra = min(extra, balance)
            balance = max(0, balance - extra)

        yield step, opening, interest, paid, applied_extra, balance


def _simulation_start(
    principal_oere: int,
    start_date: DateLike,
    opening_balance_oere: Optional[int],
    opening_balance_date: Optional[DateLike],
) -> Tuple[date, int, Optional[date]]:
    """Returnerer (startdato, startsaldo, filterdato for ekstra innbetalinger)"""
    if opening_balance_oere is not None and opening_balance_date is not None:
        if opening_balance_oere < 0:
            raise InvalidArgument(f"Inngående saldo kan ikke være negativ: {opening_balance_oere}")
        checkpoint = parse_iso_date(opening_balance_date)
        # startdatoen valideres likevel, den er en del av lånet
        parse_iso_date(start_date)
        return checkpoint, int(opening_balance_oere), checkpoint
    return parse_iso_date(start_date), int(principal_oere), None


def _remaining_months(
    balance: int,
    monthly_rate: float,
    payment: int,
    term_months: int,
    steps: int,
) -> int:
    if balance <= 0:
        return 0
    if payment <= 0:
        return term_months
    if monthly_rate == 0:
        return math.ceil(balance / payment)
    ratio = monthly_rate * balance / payment
    if ratio >= 1:
        # betalingen dekker ikke renten, bruk gjenværende kontraktstid
        return max(0, term_months - steps)
    return math.ceil(-math.log(1 - ratio) / math.log(1 + monthly_rate))


def compute_loan_balance(
    principal_oere: int,
    annual_rate_pct: float,
    term_months: int,
    start_date: DateLike,
    extra_payments: Iterable[PaymentLike] = (),
    opening_balance_oere: Optional[int] = None,
    opening_balance_date: Optional[DateLike] = None,
    today: Optional[date] = None,
) -> LoanBalanceResult:
    """Simuler nedbetaling fra start til i dag

    Terminbeløpet trekkes hver måned, og registrerte innbetalinger kommer i
    tillegg som ekstra nedbetaling. Med både ``opening_balance_oere`` og
    ``opening_balance_date`` starter simuleringen fra denne saldoen, og bare
    innbetalinger på eller etter datoen tas med. ``principal_oere`` brukes da
    kun til andel nedbetalt.
    """
    if principal_oere is None or principal_oere <= 0:
        raise InvalidArgument(f"Lånebeløp må være større enn 0, fikk {principal_oere}")
    monthly_payment = compute_monthly_payment(principal_oere, annual_rate_pct, term_months)
    monthly_rate = _monthly_rate(annual_rate_pct)

    sim_start, balance, payments_since = _simulation_start(
        principal_oere, start_date, opening_balance_oere, opening_balance_date,
    )
    start_idx = month_index(sim_start)
    now = today if today is not None else date.today()
    months_elapsed = max(0, month_index(now) - start_idx)

    extra_by_month = aggregate_extra_payments(extra_payments, since=payments_since)

    steps = min(months_elapsed, term_months)
    for _, _, _, _, _, closing in _amortize(
        balance, monthly_rate, monthly_payment, start_idx, steps, extra_by_month,
    ):
        balance = closing

    remaining = _remaining_months(balance, monthly_rate, monthly_payment, term_months, steps)
    paid_pct = round_half_up((principal_oere - balance) / principal_oere * 100)

    logger.debug(
        "loan balance: start=%s elapsed=%d steps=%d balance=%d remaining=%d",
        sim_start, months_elapsed, steps, balance, remaining,
    )

    return LoanBalanceResult(
        current_balance_oere=max(0, balance),
        monthly_payment_oere=monthly_payment,
        remaining_months=remaining,
        principal_paid_pct=max(0, min(100, paid_pct)),
    )


def compute_balance_for_terms(
    terms: LoanTerms,
    extra_payments: Iterable[PaymentLike] = (),
    checkpoint: Optional[OpeningCheckpoint] = None,
    today: Optional[date] = None,
) -> LoanBalanceResult:
    """Samme som compute_loan_balance, men med lånevilkår som objekter"""
    return compute_loan_balance(
        terms.principal_oere,
        terms.annual_rate_pct,
        terms.term_months,
        terms.start_date,
        extra_payments,
        checkpoint.balance_oere if checkpoint else None,
        checkpoint.date if checkpoint else None,
        today=today,
    )


def compute_early_payoff(
    current_balance_oere: int,
    annual_rate_pct: float,
    regular_monthly_payment_oere: int,
    extra_monthly_oere: int,
) -> Optional[EarlyPayoffResult]:
    """Hva hvis jeg betaler ekstra hver måned?

    None betyr at ingen fremskrivning er mulig: lånet er nedbetalt,
    terminbeløpet er 0, eller terminbeløpet dekker ikke renten.
    """
    if current_balance_oere <= 0 or regular_monthly_payment_oere <= 0:
        return None

    regular_months = months_to_payoff(
        current_balance_oere, annual_rate_pct, regular_monthly_payment_oere,
    )
    if regular_months is None:
        return None

    new_payment = regular_monthly_payment_oere + max(0, extra_monthly_oere)
    new_months = months_to_payoff(current_balance_oere, annual_rate_pct, new_payment)
    if new_months is None:
        new_months = regular_months

    interest_regular = regular_months * regular_monthly_payment_oere - current_balance_oere
    interest_new = new_months * new_payment - current_balance_oere

    return EarlyPayoffResult(
        regular_months=regular_months,
        new_months=new_months,
        months_saved=max(0, regular_months - new_months),
        interest_saved_oere=max(0, interest_regular - interest_new),
    )


def calc_loan_payoff(
    balance_oere: int,
    annual_rate_pct: float,
    monthly_payment_oere: int,
    today: Optional[date] = None,
) -> LoanPayoffResult:
    """Nedbetalingstid, sluttdato og totalkostnad for en fast månedlig betaling"""
    if balance_oere <= 0 or monthly_payment_oere <= 0:
        return LoanPayoffResult()

    now = today if today is not None else date.today()
    r = _monthly_rate(annual_rate_pct)

    if r == 0:
        months = math.ceil(balance_oere / monthly_payment_oere)
        return LoanPayoffResult(
            months=months,
            payoff_date=add_months(now, months),
            total_interest_oere=0,
            total_paid_oere=months * monthly_payment_oere,
        )

    monthly_interest = round_half_up(balance_oere * r)
    if monthly_payment_oere <= monthly_interest:
        return LoanPayoffResult()

    months = months_to_payoff(balance_oere, annual_rate_pct, monthly_payment_oere)
    total_paid = months * monthly_payment_oere
    return LoanPayoffResult(
        months=months,
        payoff_date=add_months(now, months),
        total_interest_oere=max(0, total_paid - balance_oere),
        total_paid_oere=total_paid,
    )


def generate_amortization_schedule(
    principal_oere: int,
    annual_rate_pct: float,
    term_months: int,
    start_date: DateLike,
    extra_payments: Iterable[PaymentLike] = (),
    opening_balance_oere: Optional[int] = None,
    opening_balance_date: Optional[DateLike] = None,
    max_months: Optional[int] = None,
) -> pd.DataFrame:
    """Nedbetalingsplan måned for måned med samme regler som compute_loan_balance"""
    if principal_oere is None or principal_oere <= 0:
        raise InvalidArgument(f"Lånebeløp må være større enn 0, fikk {principal_oere}")
    monthly_payment = compute_monthly_payment(principal_oere, annual_rate_pct, term_months)
    monthly_rate = _monthly_rate(annual_rate_pct)

    sim_start, balance, payments_since = _simulation_start(
        principal_oere, start_date, opening_balance_oere, opening_balance_date,
    )
    start_idx = month_index(sim_start)
    extra_by_month = aggregate_extra_payments(extra_payments, since=payments_since)

    steps = term_months if max_months is None else min(term_months, max(0, max_months))

    records = []
    cum_interest = 0
    for step, opening, interest, paid, extra, closing in _amortize(
        balance, monthly_rate, monthly_payment, start_idx, steps, extra_by_month,
    ):
        cum_interest += interest
        month = add_months(sim_start.replace(day=1), step)
        records.append({
            "period": step + 1,
            "month": month.strftime("%Y-%m"),
            "opening_balance_oere": opening,
            "interest_oere": interest,
            "scheduled_payment_oere": paid,
            "extra_payment_oere": extra,
            "closing_balance_oere": closing,
            "cumulative_interest_oere": cum_interest,
        })

    return pd.DataFrame(records, columns=SCHEDULE_COLUMNS)


def payoff_path(
    balance_oere: int,
    annual_rate_pct: float,
    payment_oere: int,
    extra_monthly_oere: int = 0,
    max_months: int = 1200,
) -> List[int]:
    """Utgående saldo måned for måned med fast betaling og fast ekstra beløp"""
    if balance_oere <= 0 or payment_oere <= 0:
        return []
    extra = max(0, extra_monthly_oere)
    extra_by_month = {step: extra for step in range(max_months)} if extra else {}
    return [
        closing for _, _, _, _, _, closing in _amortize(
            balance_oere, _monthly_rate(annual_rate_pct), payment_oere, 0, max_months, extra_by_month,
        )
    ]
