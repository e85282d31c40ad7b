"""Ledger reconciliation - running balances and debit/credit balance verification"""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple

from microfin_gateway.domain.exceptions import InvalidArgumentError
from microfin_gateway.domain.models import (
    AccountBalance,
    BalanceSheetResult,
    IncomeStatementResult,
    JournalEntryCheck,
    LedgerPosting,
    LedgerResult,
    LedgerRow,
    NormalBalance,
    StatementLine,
    TrialBalanceResult,
)
from microfin_gateway.utils.date_utils import ensure_date
from microfin_gateway.utils.money import ZERO, is_zero, round2, to_decimal

logger = logging.getLogger(__name__)


def validate_posting(posting: LedgerPosting) -> LedgerPosting:
    """
    Check a posting obeys the one-sided rule and return it with Decimal amounts.

    Exactly one of debit/credit must be non-zero and neither may be negative.
    Nothing is normalized: a bad line is rejected, not repaired.
    """
    posting_date = ensure_date(posting.date, "date")
    debit = to_decimal(posting.debit, "debit")
    credit = to_decimal(posting.credit, "credit")

    if debit < 0 or credit < 0:
        raise InvalidArgumentError(
            f"Posting {posting.reference!r} has a negative amount (debit={debit}, credit={credit})", "debit"
        )
    if debit != 0 and credit != 0:
        raise InvalidArgumentError(
            f"Posting {posting.reference!r} cannot have both a debit and a credit amount", "debit"
        )
    if debit == 0 and credit == 0:
        raise InvalidArgumentError(
            f"Posting {posting.reference!r} cannot have both debit and credit as zero", "debit"
        )

    return LedgerPosting(
        date=posting_date,
        debit=debit,
        credit=credit,
        reference=posting.reference,
        description=posting.description,
    )


def _signed_amount(posting: LedgerPosting, normal_balance: NormalBalance) -> Decimal:
    if normal_balance == NormalBalance.DEBIT:
        return posting.debit - posting.credit
    return posting.credit - posting.debit


def _parse_side(value: NormalBalance | str) -> NormalBalance:
    try:
        return NormalBalance(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise InvalidArgumentError(f"Unknown normal balance side: {value!r}", "normal_balance")


def _check_period(start_date: Optional[date], end_date: Optional[date]) -> Tuple[Optional[date], Optional[date]]:
    start = ensure_date(start_date, "start_date") if start_date is not None else None
    end = ensure_date(end_date, "end_date") if end_date is not None else None
    if start and end and start > end:
        raise InvalidArgumentError("Start date cannot be after end date.", "start_date")
    return start, end


def build_ledger(
    account_id: Any,
    postings: Iterable[LedgerPosting],
    opening_balance=ZERO,
    normal_balance: NormalBalance | str = NormalBalance.DEBIT,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> LedgerResult:
    """
    Compute running balances for one account.

    Requirements:
    - Postings processed in ascending date order; same-day ties keep input order
    - Debit-normal accounts grow with debits, credit-normal accounts with credits
    - Postings before start_date fold into the opening balance
    - Postings after end_date are left out
    - No postings -> closing balance equals opening balance

    Example:
        opening 100, [01-05 debit 50, 01-03 credit 30], debit-normal
        -> rows 70, 120; closing 120
    """
    side = _parse_side(normal_balance)
    start, end = _check_period(start_date, end_date)
    balance = to_decimal(opening_balance, "opening_balance")

    checked = [validate_posting(p) for p in postings]
    # sorted() is stable, so same-day postings stay in supplied order
    ordered = sorted(checked, key=lambda p: p.date)

    rows: List[LedgerRow] = []
    period_opening = None
    total_debits = ZERO
    total_credits = ZERO
    for posting in ordered:
        if start and posting.date < start:
            balance += _signed_amount(posting, side)
            continue
        if end and posting.date > end:
            break

        if period_opening is None:
            period_opening = balance
        balance += _signed_amount(posting, side)
        total_debits += posting.debit
        total_credits += posting.credit
        rows.append(LedgerRow(posting=posting, running_balance=round2(balance)))

    if period_opening is None:
        period_opening = balance

    logger.debug("Ledger built", extra={"account_id": str(account_id), "rows": len(rows)})

    return LedgerResult(
        account_id=account_id,
        opening_balance=round2(period_opening),
        rows=tuple(rows),
        closing_balance=round2(balance),
        total_debits=round2(total_debits),
        total_credits=round2(total_credits),
    )


def build_trial_balance(accounts: Iterable[AccountBalance]) -> TrialBalanceResult:
    """
    Sum every account's debit and credit balance and verify they agree.

    Debits and credits are totalled independently, never netted across
    accounts. Balanced means both totals are equal at 2 decimal places.
    """
    lines = []
    total_debits = ZERO
    total_credits = ZERO
    for account in accounts:
        debit = to_decimal(account.debit_balance, "debit_balance")
        credit = to_decimal(account.credit_balance, "credit_balance")
        if debit < 0 or credit < 0:
            raise InvalidArgumentError(
                f"Account {account.account_id!r} has a negative balance (debit={debit}, credit={credit})",
                "debit_balance",
            )
        total_debits += debit
        total_credits += credit
        lines.append(AccountBalance(account.account_id, debit, credit, account.account_name))

    total_debits = round2(total_debits)
    total_credits = round2(total_credits)
    difference = total_debits - total_credits
    is_balanced = is_zero(difference)

    if is_balanced:
        message = f"Trial balance is balanced: total debits equal total credits ({total_debits})."
    else:
        message = (
            f"Trial balance is NOT balanced: total debits ({total_debits}) and total credits "
            f"({total_credits}) differ by {difference}."
        )

    return TrialBalanceResult(
        accounts=tuple(lines),
        total_debits=total_debits,
        total_credits=total_credits,
        difference=difference,
        is_balanced=is_balanced,
        message=message,
    )


def _sum_lines(lines: Iterable[StatementLine], bucket: str) -> Tuple[Tuple[StatementLine, ...], Decimal]:
    checked = tuple(
        StatementLine(line.account_id, to_decimal(line.amount, bucket), line.account_name) for line in lines
    )
    return checked, round2(sum((line.amount for line in checked), ZERO))


def build_balance_sheet(
    assets: Iterable[StatementLine],
    liabilities: Iterable[StatementLine],
    equity: Iterable[StatementLine],
) -> BalanceSheetResult:
    """Total each bucket and verify assets = liabilities + equity at 2 decimal places"""
    asset_lines, total_assets = _sum_lines(assets, "assets")
    liability_lines, total_liabilities = _sum_lines(liabilities, "liabilities")
    equity_lines, total_equity = _sum_lines(equity, "equity")

    total_liabilities_and_equity = total_liabilities + total_equity
    difference = total_assets - total_liabilities_and_equity
    is_balanced = is_zero(difference)

    if is_balanced:
        message = "Balance sheet is balanced: Assets = Liabilities + Equity."
    else:
        message = (
            f"Balance sheet is NOT balanced: total assets ({total_assets}) differ from "
            f"liabilities + equity ({total_liabilities_and_equity}) by {difference}."
        )

    return BalanceSheetResult(
        assets=asset_lines,
        liabilities=liability_lines,
        equity=equity_lines,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        total_liabilities_and_equity=total_liabilities_and_equity,
        difference=difference,
        is_balanced=is_balanced,
        message=message,
    )


def build_income_statement(
    revenues: Iterable[StatementLine],
    expenses: Iterable[StatementLine],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> IncomeStatementResult:
    """Net income (loss) for a period: total revenue minus total expenses"""
    start, end = _check_period(start_date, end_date)
    revenue_lines, total_revenue = _sum_lines(revenues, "revenues")
    expense_lines, total_expenses = _sum_lines(expenses, "expenses")

    return IncomeStatementResult(
        revenues=revenue_lines,
        expenses=expense_lines,
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        net_income=total_revenue - total_expenses,
        start_date=start,
        end_date=end,
    )


def check_journal_entry(lines: Iterable[LedgerPosting]) -> JournalEntryCheck:
    """
    Verify a journal entry's lines before it is posted.

    Each line must be one-sided (see validate_posting). The entry balances
    when total debits equal total credits at 2 decimal places and the
    amounts are not all zero.
    """
    checked = tuple(validate_posting(line) for line in lines)
    total_debits = round2(sum((line.debit for line in checked), ZERO))
    total_credits = round2(sum((line.credit for line in checked), ZERO))
    difference = total_debits - total_credits

    if not checked:
        is_balanced = False
        message = "Journal entry has no lines. Please enter non-zero debit/credit amounts."
    elif is_zero(total_debits) and is_zero(total_credits):
        is_balanced = False
        message = "Journal entry totals round to 0.00. Please enter amounts of at least 0.01."
    elif difference != 0:
        is_balanced = False
        message = (
            f"Debits ({total_debits}) and Credits ({total_credits}) must balance. "
            f"Difference: {difference}."
        )
    else:
        is_balanced = True
        message = f"Journal entry is balanced ({total_debits})."

    return JournalEntryCheck(
        total_debits=total_debits,
        total_credits=total_credits,
        difference=difference,
        is_balanced=is_balanced,
        message=message,
        lines=checked,
    )
