"""Unit tests for loan financial computation"""

import pytest
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from microfin_gateway.domain.loans import apply_payment, compute_loan_financials
from microfin_gateway.domain.models import Incomplete, LoanFinancials, LoanTerms, TermUnit
from microfin_gateway.domain.exceptions import InvalidArgumentError, PaymentExceedsBalanceError


def test_flat_rate_interest(loan_terms: LoanTerms):
    """Test rate is applied once per term unit, not compounded"""
    result = compute_loan_financials(loan_terms)

    assert isinstance(result, LoanFinancials)
    assert result.interest_amount == Decimal("150.00")  # 1000 * 5% * 3
    assert result.total_repayment == Decimal("1150.00")
    assert result.balance_due == result.total_repayment
    assert result.due_date == date(2024, 4, 15)


def test_rate_applied_per_term_length_for_every_unit(loan_terms: LoanTerms):
    """Test the same formula holds for days, weeks and years"""
    for unit in TermUnit:
        result = compute_loan_financials(replace(loan_terms, term_unit=unit))
        assert result.interest_amount == Decimal("150.00")


def test_total_equals_rounded_principal_plus_interest():
    """Test total repayment never drifts from principal + interest"""
    cases = [
        ("1234.56", "7.5", 5),
        ("999.99", "3.33", 7),
        ("0.01", "12.5", 1),
        ("100.005", "1", 1),
    ]
    for principal, rate, term in cases:
        terms = LoanTerms(Decimal(principal), Decimal(rate), term, "day", date(2024, 1, 1))
        result = compute_loan_financials(terms)
        assert result.total_repayment == Decimal(principal).quantize(Decimal("0.01"), "ROUND_HALF_UP") + result.interest_amount
        assert result.total_repayment.as_tuple().exponent == -2
        assert result.interest_amount.as_tuple().exponent == -2


def test_interest_rounds_half_up():
    """Test 2-place half-up rounding (0.125 -> 0.13, not banker's 0.12)"""
    terms = LoanTerms(Decimal("2.5"), Decimal("5"), 1, "day", date(2024, 1, 1))
    result = compute_loan_financials(terms)

    assert result.interest_amount == Decimal("0.13")
    assert result.total_repayment == Decimal("2.63")


def test_zero_rate_is_complete():
    """Test an interest-free loan still derives all fields"""
    terms = LoanTerms(Decimal("500"), Decimal("0"), 2, "week", date(2024, 3, 1))
    result = compute_loan_financials(terms)

    assert result.interest_amount == Decimal("0.00")
    assert result.total_repayment == Decimal("500.00")
    assert result.due_date == date(2024, 3, 15)


def test_month_end_clamping_leap_year():
    """Test Jan 31 + 1 month lands on Feb 29 in a leap year"""
    terms = LoanTerms(Decimal("100"), Decimal("1"), 1, "month", date(2024, 1, 31))
    assert compute_loan_financials(terms).due_date == date(2024, 2, 29)


def test_month_end_clamping_common_year():
    """Test Jan 31 + 1 month lands on Feb 28 in a common year"""
    terms = LoanTerms(Decimal("100"), Decimal("1"), 1, "month", date(2023, 1, 31))
    assert compute_loan_financials(terms).due_date == date(2023, 2, 28)


def test_leap_day_plus_one_year():
    """Test Feb 29 + 1 year clamps to Feb 28"""
    terms = LoanTerms(Decimal("100"), Decimal("1"), 1, "year", date(2024, 2, 29))
    assert compute_loan_financials(terms).due_date == date(2025, 2, 28)


def test_month_rollover_across_year_end():
    """Test months spill into the next year without losing the day"""
    terms = LoanTerms(Decimal("100"), Decimal("1"), 3, "months", date(2023, 11, 30))
    assert compute_loan_financials(terms).due_date == date(2024, 2, 29)


def test_weeks_equal_days():
    """Test 2 weeks and 14 days give the same due date"""
    start = date(2024, 2, 20)
    weeks = compute_loan_financials(LoanTerms(Decimal("100"), Decimal("1"), 2, "week", start))
    days = compute_loan_financials(LoanTerms(Decimal("100"), Decimal("1"), 14, "day", start))

    assert weeks.due_date == days.due_date == date(2024, 3, 5)


def test_datetime_start_uses_calendar_date():
    """Test a late-evening datetime is not shifted by any timezone conversion"""
    terms = LoanTerms(Decimal("100"), Decimal("1"), 1, "day", datetime(2024, 1, 31, 23, 30))
    assert compute_loan_financials(terms).due_date == date(2024, 2, 1)


def test_idempotent(loan_terms: LoanTerms):
    """Test identical input gives identical output"""
    assert compute_loan_financials(loan_terms) == compute_loan_financials(loan_terms)


def test_payments_made_reduce_balance_due(loan_terms: LoanTerms):
    """Test balance due is total repayment less recorded payments"""
    result = compute_loan_financials(replace(loan_terms, payments_made=Decimal("400")))

    assert result.total_repayment == Decimal("1150.00")
    assert result.balance_due == Decimal("750.00")


@pytest.mark.parametrize("field", ["principal", "rate_percent", "term_length", "start_date"])
def test_missing_input_is_incomplete(loan_terms: LoanTerms, field: str):
    """Test each missing input yields Incomplete rather than an error"""
    result = compute_loan_financials(replace(loan_terms, **{field: None}))

    assert isinstance(result, Incomplete)
    assert field in result.missing


def test_zero_principal_is_incomplete(loan_terms: LoanTerms):
    """Test a zero principal leaves the derived fields blank"""
    result = compute_loan_financials(replace(loan_terms, principal=Decimal("0")))
    assert result == Incomplete(missing=("principal",))


def test_zero_term_length_is_invalid(loan_terms: LoanTerms):
    """Test term_length=0 is a contract violation"""
    with pytest.raises(InvalidArgumentError) as exc:
        compute_loan_financials(replace(loan_terms, term_length=0))
    assert exc.value.field == "term_length"


@pytest.mark.parametrize(
    "changes",
    [
        {"principal": Decimal("-1")},
        {"rate_percent": Decimal("-0.5")},
        {"term_length": -3},
        {"term_length": 1.5},
        {"term_unit": "fortnight"},
        {"start_date": "2024-01-15"},
        {"payments_made": Decimal("-10")},
        {"principal": float("nan")},
    ],
)
def test_malformed_input_is_invalid(loan_terms: LoanTerms, changes: dict):
    """Test malformed values fail loudly instead of being guessed at"""
    with pytest.raises(InvalidArgumentError):
        compute_loan_financials(replace(loan_terms, **changes))


def test_malformed_input_rejected_even_when_incomplete(loan_terms: LoanTerms):
    """Test a negative principal is reported even while the date is blank"""
    with pytest.raises(InvalidArgumentError):
        compute_loan_financials(replace(loan_terms, principal=Decimal("-5"), start_date=None))


def test_apply_payment_reduces_balance():
    """Test a valid payment returns the new balance"""
    assert apply_payment(Decimal("1150.00"), Decimal("150.50")) == Decimal("999.50")


def test_apply_payment_can_settle_in_full():
    """Test paying exactly the balance leaves zero"""
    assert apply_payment(Decimal("200"), Decimal("200")) == Decimal("0.00")


def test_apply_payment_rejects_overpayment():
    """Test a payment above the balance due is rejected"""
    with pytest.raises(PaymentExceedsBalanceError):
        apply_payment(Decimal("100.00"), Decimal("100.01"))


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5")])
def test_apply_payment_rejects_non_positive(amount: Decimal):
    """Test zero and negative payments are rejected"""
    with pytest.raises(InvalidArgumentError):
        apply_payment(Decimal("100"), amount)


def test_payments_made_above_total_is_rejected():
    """Test recorded payments larger than the total repayment"""
    terms = LoanTerms(Decimal("100"), Decimal("5"), 1, "month", date(2024, 1, 1), payments_made=Decimal("500"))
    with pytest.raises(PaymentExceedsBalanceError) as exc:
        compute_loan_financials(terms)
    assert exc.value.field == "payments_made"


def test_payments_made_equal_to_total_settles_loan(loan_terms: LoanTerms):
    """Test a fully repaid loan has a zero balance due"""
    result = compute_loan_financials(replace(loan_terms, payments_made=Decimal("1150")))
    assert result.balance_due == Decimal("0.00")


def test_huge_principal_is_invalid(loan_terms: LoanTerms):
    """Test figures beyond cent precision fail as invalid input"""
    with pytest.raises(InvalidArgumentError):
        compute_loan_financials(replace(loan_terms, principal=Decimal("1e27")))
