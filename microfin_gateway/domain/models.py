"""Domain models - immutable value objects for loan terms and accounting reports"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from microfin_gateway.domain.exceptions import InvalidArgumentError


class TermUnit(str, Enum):
    """Unit in which a loan term is expressed"""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: "TermUnit | str") -> "TermUnit":
        """Accept enum members, singular names and the plural form spellings ("months")"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if name.endswith("s"):
                name = name[:-1]
            for unit in cls:
                if unit.value == name:
                    return unit
        raise InvalidArgumentError(f"Unknown term unit: {value!r}", "term_unit")


class NormalBalance(str, Enum):
    """Side on which an account's balance conventionally increases"""

    DEBIT = "debit"  # assets, expenses
    CREDIT = "credit"  # liabilities, equity, revenue


@dataclass(frozen=True)
class LoanTerms:
    """Loan form inputs; any of the first four may still be missing"""

    principal: Optional[Decimal]
    rate_percent: Optional[Decimal]  # flat rate applied once per term unit
    term_length: Optional[int]
    term_unit: TermUnit | str
    start_date: Optional[date]
    payments_made: Decimal = Decimal("0")


@dataclass(frozen=True)
class LoanFinancials:
    """Derived loan figures, always replaced together"""

    interest_amount: Decimal
    total_repayment: Decimal
    balance_due: Decimal
    due_date: date


@dataclass(frozen=True)
class Incomplete:
    """Not enough input yet - callers keep showing whatever they showed before"""

    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LedgerPosting:
    """Single debit or credit line against one account"""

    date: date
    debit: Decimal
    credit: Decimal
    reference: Any = None
    description: str = ""


@dataclass(frozen=True)
class LedgerRow:
    """Posting paired with the account balance after applying it"""

    posting: LedgerPosting
    running_balance: Decimal


@dataclass(frozen=True)
class LedgerResult:
    """General ledger for one account"""

    account_id: Any
    opening_balance: Decimal
    rows: Tuple[LedgerRow, ...]
    closing_balance: Decimal
    total_debits: Decimal
    total_credits: Decimal


@dataclass(frozen=True)
class AccountBalance:
    """Trial balance line"""

    account_id: Any
    debit_balance: Decimal
    credit_balance: Decimal
    account_name: str = ""


@dataclass(frozen=True)
class TrialBalanceResult:
    accounts: Tuple[AccountBalance, ...]
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal  # total_debits - total_credits
    is_balanced: bool
    message: str


@dataclass(frozen=True)
class StatementLine:
    """Account amount on a balance sheet or income statement"""

    account_id: Any
    amount: Decimal
    account_name: str = ""


@dataclass(frozen=True)
class BalanceSheetResult:
    assets: Tuple[StatementLine, ...]
    liabilities: Tuple[StatementLine, ...]
    equity: Tuple[StatementLine, ...]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_liabilities_and_equity: Decimal
    difference: Decimal  # total_assets - (liabilities + equity)
    is_balanced: bool
    message: str


@dataclass(frozen=True)
class IncomeStatementResult:
    revenues: Tuple[StatementLine, ...]
    expenses: Tuple[StatementLine, ...]
    total_revenue: Decimal
    total_expenses: Decimal
    net_income: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class JournalEntryCheck:
    """Verdict on whether a journal entry's lines balance"""

    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool
    message: str
    lines: Tuple[LedgerPosting, ...] = ()
