"""Loan financial computation - flat-rate interest, repayment totals and due dates"""

import logging
from decimal import Decimal

from microfin_gateway.domain.exceptions import InvalidArgumentError, PaymentExceedsBalanceError
from microfin_gateway.domain.models import Incomplete, LoanFinancials, LoanTerms, TermUnit
from microfin_gateway.utils.date_utils import advance_date, ensure_date
from microfin_gateway.utils.money import round2, to_decimal

logger = logging.getLogger(__name__)


def _validate_term_length(value) -> int:
    if isinstance(value, bool):
        raise InvalidArgumentError("term_length must be an integer", "term_length")
    if isinstance(value, int):
        term_length = value
    elif isinstance(value, (float, Decimal)) and to_decimal(value, "term_length") % 1 == 0:
        term_length = int(value)
    else:
        raise InvalidArgumentError(f"term_length must be an integer, got {value!r}", "term_length")

    if term_length <= 0:
        raise InvalidArgumentError(f"term_length must be positive, got {term_length}", "term_length")
    return term_length


def compute_loan_financials(terms: LoanTerms) -> LoanFinancials | Incomplete:
    """
    Derive interest, total repayment, balance due and due date from loan terms.

    Requirements:
    - Missing principal, rate, term length or start date -> Incomplete (no error)
    - Zero principal -> Incomplete; a zero rate is a valid, interest-free loan
    - Negative amounts, non-positive term length, bad dates -> InvalidArgumentError
    - interest = round2(principal * rate% * term_length), flat, not compounded
    - total = round2(principal) + interest, so the two never drift apart
    - Payments made above the total repayment -> PaymentExceedsBalanceError

    Example:
        1000 at 5% for 3 months -> interest 150.00, total 1150.00
    """
    missing = tuple(
        name
        for name, value in (
            ("principal", terms.principal),
            ("rate_percent", terms.rate_percent),
            ("term_length", terms.term_length),
            ("start_date", terms.start_date),
        )
        if value is None
    )

    # Present values are validated even when others are still missing
    principal = to_decimal(terms.principal, "principal") if terms.principal is not None else None
    rate = to_decimal(terms.rate_percent, "rate_percent") if terms.rate_percent is not None else None
    term_length = _validate_term_length(terms.term_length) if terms.term_length is not None else None
    start_date = ensure_date(terms.start_date, "start_date") if terms.start_date is not None else None
    unit = TermUnit.parse(terms.term_unit)
    payments_made = to_decimal(terms.payments_made, "payments_made")

    if principal is not None and principal < 0:
        raise InvalidArgumentError(f"principal cannot be negative, got {principal}", "principal")
    if rate is not None and rate < 0:
        raise InvalidArgumentError(f"rate_percent cannot be negative, got {rate}", "rate_percent")
    if payments_made < 0:
        raise InvalidArgumentError(f"payments_made cannot be negative, got {payments_made}", "payments_made")

    if principal is not None and principal == 0:
        missing = ("principal",) + missing

    if missing:
        logger.debug("Loan terms incomplete", extra={"missing": list(missing)})
        return Incomplete(missing=missing)

    interest_amount = round2(principal * (rate / Decimal(100)) * term_length, "interest_amount")
    total_repayment = round2(round2(principal, "principal") + interest_amount, "total_repayment")
    paid = round2(payments_made, "payments_made")
    if paid > total_repayment:
        raise PaymentExceedsBalanceError(
            f"Payments made ({paid}) cannot exceed the total repayment ({total_repayment}).",
            "payments_made",
        )

    return LoanFinancials(
        interest_amount=interest_amount,
        total_repayment=total_repayment,
        balance_due=total_repayment - paid,
        due_date=advance_date(start_date, term_length, unit.value),
    )


def apply_payment(balance_due, amount) -> Decimal:
    """
    Validate a repayment against the outstanding balance and return the new balance.

    Payments must be positive and may not exceed the balance due.
    """
    balance = round2(balance_due, "balance_due")
    payment = to_decimal(amount, "amount")

    if payment <= 0:
        raise InvalidArgumentError("Payment amount must be a positive number.", "amount")
    if payment > balance:
        raise PaymentExceedsBalanceError(
            f"Payment amount ({payment}) cannot exceed the current balance due ({balance}).",
            "amount",
        )

    return round2(balance - payment)
