"""Tester for lånemotoren"""
from datetime import date

import pytest

from core.errors import InvalidArgument
from core.loan_math import (
    aggregate_extra_payments,
    calc_loan_payoff,
    compute_balance_for_terms,
    compute_early_payoff,
    compute_loan_balance,
    compute_monthly_payment,
    generate_amortization_schedule,
    months_to_payoff,
    payoff_path,
)
from data_manager.schema import ExtraPayment, LoanTerms, OpeningCheckpoint
from utils.date_utils import add_months

TODAY = date(2026, 10, 18)


def months_ago(n: int) -> str:
    return add_months(TODAY, -n).isoformat()


class TestMonthlyPayment:
    """Annuitetsbeløp"""

    def test_zero_rate_divides_evenly(self):
        assert compute_monthly_payment(100_000, 0, 10) == 10_000

    def test_zero_rate_rounds_up(self):
        """10 001 øre over 10 måneder -> 1 001, aldri en rest til slutt"""
        assert compute_monthly_payment(10_001, 0, 10) == 1_001

    def test_standard_mortgage(self):
        """3 mill. kr, 5 %, 25 år -> rundt 17 540 kr"""
        payment = compute_monthly_payment(300_000_000, 5, 300)
        assert 1_750_000 < payment < 1_760_000

    def test_small_loan(self):
        payment = compute_monthly_payment(120_000, 2, 12)
        assert 10_000 < payment < 11_000

    def test_returns_positive_int(self):
        payment = compute_monthly_payment(500_000, 3.5, 60)
        assert isinstance(payment, int)
        assert payment > 0

    def test_high_rate_exceeds_linear_share(self):
        assert compute_monthly_payment(100_000, 20, 12) > 100_000 / 12

    def test_single_month_is_principal_plus_interest(self):
        assert compute_monthly_payment(50_000, 5, 1) == 50_208

    def test_very_long_term_approaches_interest_only(self):
        """(1 + r) ** n flyter over, beløpet går mot ren rente"""
        assert compute_monthly_payment(100_000, 5, 10 ** 6) == 417

    def test_interest_only_limit_out_of_range(self):
        with pytest.raises(InvalidArgument):
            compute_monthly_payment(100_000, 1e308, 10 ** 6)

    @pytest.mark.parametrize("rate, term", [(5, 0), (5, -12), (-1, 12), (float("nan"), 12), (float("inf"), 12)])
    def test_invalid_terms(self, rate, term):
        with pytest.raises(InvalidArgument):
            compute_monthly_payment(100_000, rate, term)


class TestMonthsToPayoff:
    """Måneder til nedbetalt"""

    def test_zero_rate(self):
        assert months_to_payoff(100_000, 0, 30_000) == 4

    def test_with_rate(self):
        """1 000 kr, 12 %, 100 kr/mnd -> 11 måneder"""
        assert months_to_payoff(100_000, 12, 10_000) == 11

    def test_payment_below_interest(self):
        """Renten er 100 kr, betalingen 50 kr"""
        assert months_to_payoff(1_000_000, 12, 5_000) is None

    def test_zero_payment(self):
        assert months_to_payoff(1_000_000, 5, 0) is None


class TestAggregateExtraPayments:
    """Ekstra innbetalinger per måned"""

    def test_same_month_is_summed(self):
        result = aggregate_extra_payments([
            {"date": "2024-03-01", "amount_oere": 100},
            ExtraPayment(date="2024-03-28", amount_oere=50),
            {"date": "2024-04-01", "amount_oere": 7},
        ])
        assert result == {2024 * 12 + 2: 150, 2024 * 12 + 3: 7}

    def test_since_skips_earlier_payments(self):
        result = aggregate_extra_payments(
            [{"date": "2024-03-01", "amount_oere": 100}, {"date": "2024-05-01", "amount_oere": 5}],
            since=date(2024, 4, 15),
        )
        assert result == {2024 * 12 + 4: 5}

    def test_malformed_date(self):
        with pytest.raises(InvalidArgument):
            aggregate_extra_payments([{"date": "01.03.2024", "amount_oere": 100}])


class TestLoanBalance:
    """Saldo i dag"""

    def test_just_started(self):
        result = compute_loan_balance(1_000_000, 5, 120, TODAY.isoformat(), [], today=TODAY)
        assert result.current_balance_oere == 1_000_000
        assert result.principal_paid_pct == 0

    def test_balance_decreases_over_time(self):
        early = compute_loan_balance(2_000_000, 5, 120, months_ago(6), [], today=TODAY)
        later = compute_loan_balance(2_000_000, 5, 120, months_ago(12), [], today=TODAY)
        assert later.current_balance_oere < early.current_balance_oere
        assert later.remaining_months < early.remaining_months

    def test_fully_amortized(self):
        result = compute_loan_balance(100_000, 0, 5, months_ago(10), [], today=TODAY)
        assert result.current_balance_oere == 0
        assert result.remaining_months == 0
        assert result.principal_paid_pct == 100

    def test_extra_payment_clears_loan_before_term(self):
        """Et engangsbeløp større enn saldoen gir 0 i saldo lenge før løpetiden er ute"""
        start = months_ago(12)
        lump = [{"date": months_ago(10), "amount_oere": 2_000_000}]
        result = compute_loan_balance(1_000_000, 5, 120, start, lump, today=TODAY)
        assert result.current_balance_oere == 0
        assert result.remaining_months == 0
        assert result.principal_paid_pct == 100

        # simuleringen stopper i måneden innbetalingen kom
        schedule = generate_amortization_schedule(1_000_000, 5, 120, start, lump, max_months=12)
        assert len(schedule) == 3
        assert schedule["extra_payment_oere"].iloc[-1] > 0
        assert schedule["closing_balance_oere"].iloc[-1] == 0

    def test_very_long_term_does_not_overflow(self):
        result = compute_loan_balance(100_000, 5, 10 ** 6, "2020-01-01", [], today=TODAY)
        assert result.monthly_payment_oere == 417
        assert result.current_balance_oere == 100_000
        assert 0 < result.remaining_months <= 10 ** 6

    def test_monthly_payment_matches(self):
        result = compute_loan_balance(1_000_000, 4, 60, TODAY.isoformat(), [], today=TODAY)
        assert result.monthly_payment_oere == compute_monthly_payment(1_000_000, 4, 60)

    def test_zero_rate_exact(self):
        result = compute_loan_balance(120_000, 0, 12, months_ago(3), [], today=TODAY)
        assert result.current_balance_oere == 90_000
        assert result.remaining_months == 9
        assert result.principal_paid_pct == 25

    def test_zero_rate_with_extra(self):
        """120 000 - 3 x 10 000 - 20 000 = 70 000"""
        result = compute_loan_balance(
            120_000, 0, 12, months_ago(3), [{"date": months_ago(1), "amount_oere": 20_000}], today=TODAY,
        )
        assert result.current_balance_oere == 70_000
        assert result.remaining_months == 7
        assert result.principal_paid_pct == 42

    def test_extra_payment_reduces_balance(self):
        without = compute_loan_balance(1_000_000, 5, 120, months_ago(6), [], today=TODAY)
        with_extra = compute_loan_balance(
            1_000_000, 5, 120, months_ago(6), [{"date": months_ago(3), "amount_oere": 50_000}], today=TODAY,
        )
        assert with_extra.current_balance_oere < without.current_balance_oere

    def test_multiple_extra_payments_stack(self):
        one = compute_loan_balance(
            500_000, 5, 60, months_ago(6), [{"date": months_ago(4), "amount_oere": 10_000}], today=TODAY,
        )
        two = compute_loan_balance(
            500_000, 5, 60, months_ago(6),
            [{"date": months_ago(4), "amount_oere": 10_000}, {"date": months_ago(2), "amount_oere": 10_000}],
            today=TODAY,
        )
        assert two.current_balance_oere < one.current_balance_oere

    def test_same_month_extra_payments_aggregate(self):
        combined = compute_loan_balance(
            500_000, 5, 60, months_ago(6), [{"date": months_ago(3), "amount_oere": 30_000}], today=TODAY,
        )
        split = compute_loan_balance(
            500_000, 5, 60, months_ago(6),
            [{"date": months_ago(3), "amount_oere": 15_000}, {"date": months_ago(3), "amount_oere": 15_000}],
            today=TODAY,
        )
        assert split.current_balance_oere == combined.current_balance_oere

    def test_future_start_date(self):
        result = compute_loan_balance(500_000, 3, 60, add_months(TODAY, 2).isoformat(), [], today=TODAY)
        assert result.current_balance_oere == 500_000
        assert result.principal_paid_pct == 0

    def test_opening_checkpoint(self):
        result = compute_loan_balance(
            120_000, 0, 12, "2026-01-01", [],
            opening_balance_oere=60_000, opening_balance_date="2026-07-01", today=TODAY,
        )
        assert result.current_balance_oere == 30_000
        assert result.principal_paid_pct == 75

    def test_opening_checkpoint_ignores_earlier_payments(self):
        payments = [
            {"date": "2026-06-15", "amount_oere": 20_000},
            {"date": "2026-08-10", "amount_oere": 5_000},
        ]
        result = compute_loan_balance(
            120_000, 0, 12, "2026-01-01", payments,
            opening_balance_oere=60_000, opening_balance_date="2026-07-01", today=TODAY,
        )
        assert result.current_balance_oere == 25_000

    def test_payment_below_interest_uses_remaining_term(self):
        result = compute_loan_balance(
            100_000, 12, 12, "2026-10-01", [],
            opening_balance_oere=10_000_000, opening_balance_date="2026-10-01", today=TODAY,
        )
        assert result.current_balance_oere == 10_000_000
        assert result.remaining_months == 12
        assert result.principal_paid_pct == 0

    def test_invalid_principal(self):
        with pytest.raises(InvalidArgument):
            compute_loan_balance(0, 5, 120, "2024-01-01", [], today=TODAY)

    def test_invalid_start_date(self):
        with pytest.raises(InvalidArgument):
            compute_loan_balance(100_000, 5, 120, "2024-13-01", [], today=TODAY)

    def test_negative_opening_balance(self):
        with pytest.raises(InvalidArgument):
            compute_loan_balance(
                100_000, 5, 120, "2024-01-01", [],
                opening_balance_oere=-1, opening_balance_date="2025-01-01", today=TODAY,
            )

    def test_terms_objects(self):
        terms = LoanTerms(principal_oere=120_000, annual_rate_pct=0, term_months=12, start_date="2026-01-01")
        checkpoint = OpeningCheckpoint(balance_oere=60_000, date="2026-07-01")
        result = compute_balance_for_terms(terms, [], checkpoint, today=TODAY)
        assert result.current_balance_oere == 30_000


class TestEarlyPayoff:
    """Hva hvis jeg betaler ekstra"""

    def test_zero_rate(self):
        result = compute_early_payoff(100_000, 0, 10_000, 10_000)
        assert result.regular_months == 10
        assert result.new_months == 5
        assert result.months_saved == 5
        assert result.interest_saved_oere == 0

    def test_extra_saves_interest(self):
        result = compute_early_payoff(200_000_000, 5, 1_200_000, 300_000)
        assert result.new_months < result.regular_months
        assert result.interest_saved_oere > 0

    def test_zero_extra_saves_nothing(self):
        result = compute_early_payoff(200_000_000, 5, 1_200_000, 0)
        assert result.months_saved == 0
        assert result.interest_saved_oere == 0

    @pytest.mark.parametrize("balance, payment", [(0, 10_000), (100_000, 0), (1_000_000, 5_000)])
    def test_no_projection(self, balance, payment):
        assert compute_early_payoff(balance, 12, payment, 1_000) is None


class TestLoanPayoff:
    """Nedbetalingstid for fast beløp"""

    def test_zero_rate(self):
        result = calc_loan_payoff(100_000, 0, 30_000, today=TODAY)
        assert result.months == 4
        assert result.payoff_date == date(2027, 2, 18)
        assert result.total_interest_oere == 0
        assert result.total_paid_oere == 120_000

    def test_with_rate(self):
        result = calc_loan_payoff(100_000, 12, 10_000, today=TODAY)
        assert result.months == 11
        assert result.total_paid_oere == 110_000
        assert result.total_interest_oere == 10_000

    def test_payment_below_interest(self):
        result = calc_loan_payoff(1_000_000, 12, 10_000, today=TODAY)
        assert result.months is None
        assert result.payoff_date is None

    def test_nothing_to_pay(self):
        assert calc_loan_payoff(0, 5, 1_000, today=TODAY).months is None


class TestAmortizationSchedule:
    """Nedbetalingsplan"""

    def test_zero_rate_rows(self):
        schedule = generate_amortization_schedule(30_000, 0, 3, "2026-01-15")
        assert list(schedule["period"]) == [1, 2, 3]
        assert list(schedule["month"]) == ["2026-01", "2026-02", "2026-03"]
        assert list(schedule["closing_balance_oere"]) == [20_000, 10_000, 0]
        assert schedule["interest_oere"].sum() == 0

    def test_extra_payment_ends_early(self):
        schedule = generate_amortization_schedule(
            30_000, 0, 3, "2026-01-15", [{"date": "2026-02-20", "amount_oere": 15_000}],
        )
        assert len(schedule) == 2
        assert schedule["extra_payment_oere"].iloc[1] == 10_000
        assert schedule["closing_balance_oere"].iloc[-1] == 0

    def test_rows_balance(self):
        schedule = generate_amortization_schedule(300_000_000, 5, 300, "2020-01-01")
        change = schedule["opening_balance_oere"] - schedule["closing_balance_oere"]
        paid = schedule["scheduled_payment_oere"] + schedule["extra_payment_oere"] - schedule["interest_oere"]
        assert (change == paid).all()
        assert schedule["closing_balance_oere"].is_monotonic_decreasing
        assert schedule["closing_balance_oere"].iloc[-1] < compute_monthly_payment(300_000_000, 5, 300)

    def test_matches_balance(self):
        """Siste rad i planen = saldo etter like mange måneder"""
        start = months_ago(24)
        result = compute_loan_balance(2_000_000, 5, 120, start, [], today=TODAY)
        schedule = generate_amortization_schedule(2_000_000, 5, 120, start, max_months=24)
        assert schedule["closing_balance_oere"].iloc[-1] == result.current_balance_oere

    def test_max_months(self):
        schedule = generate_amortization_schedule(1_000_000, 5, 120, "2024-01-01", max_months=12)
        assert len(schedule) == 12

    def test_cumulative_interest(self):
        schedule = generate_amortization_schedule(1_000_000, 5, 12, "2024-01-01")
        assert schedule["cumulative_interest_oere"].iloc[-1] == schedule["interest_oere"].sum()


class TestPayoffPath:
    """Saldokurve for grafer"""

    def test_zero_rate(self):
        assert payoff_path(30_000, 0, 10_000) == [20_000, 10_000, 0]

    def test_extra_shortens_path(self):
        regular = payoff_path(1_000_000, 5, 50_000)
        faster = payoff_path(1_000_000, 5, 50_000, 25_000)
        assert len(faster) < len(regular)
        assert regular[-1] == 0 and faster[-1] == 0

    def test_nothing_to_pay(self):
        assert payoff_path(0, 5, 1_000) == []
