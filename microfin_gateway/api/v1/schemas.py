"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, PlainSerializer

from microfin_gateway.domain.models import NormalBalance

# Money leaves the service as a JSON number; rounding to cents happens in the domain
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class LoanFinancialsRequest(BaseModel):
    """Request body for POST /v1/loans/financials - any field may still be blank"""

    principal: Optional[Decimal] = Field(None, description="Loan amount")
    rate_percent: Optional[Decimal] = Field(None, description="Flat rate applied once per term unit")
    term_length: Optional[int] = Field(None, description="Number of term units")
    term_unit: Optional[str] = Field(None, description="day | week | month | year (plural accepted)")
    start_date: Optional[date] = None
    payments_made: Decimal = Field(Decimal("0"), description="Repayments already recorded")
    revision: Optional[int] = Field(None, description="Client input snapshot number, echoed back")


class LoanFinancialsResponse(BaseModel):
    """Response for POST /v1/loans/financials"""

    complete: bool
    missing: List[str] = []
    interest_amount: Optional[Money] = None
    total_repayment: Optional[Money] = None
    balance_due: Optional[Money] = None
    due_date: Optional[date] = None
    revision: Optional[int] = None


class PaymentRequest(BaseModel):
    """Request body for POST /v1/loans/payments"""

    balance_due: Decimal = Field(..., description="Current balance due on the loan")
    amount: Decimal = Field(..., description="Payment amount")


class PaymentResponse(BaseModel):
    """Response for POST /v1/loans/payments"""

    amount: Money
    previous_balance_due: Money
    balance_due: Money


class PostingSchema(BaseModel):
    """Single debit or credit line"""

    entry_date: date
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    reference: Optional[str] = None
    description: str = ""


class LedgerRequest(BaseModel):
    """Request body for POST /v1/ledger"""

    account_id: str = Field(..., min_length=1, description="Account identifier")
    postings: List[PostingSchema] = []
    opening_balance: Decimal = Decimal("0")
    normal_balance: NormalBalance = NormalBalance.DEBIT
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class LedgerRowSchema(PostingSchema):
    """Posting with the account balance after it"""

    debit: Money
    credit: Money
    running_balance: Money


class LedgerResponse(BaseModel):
    """Response for POST /v1/ledger"""

    account_id: str
    opening_balance: Money
    rows: List[LedgerRowSchema]
    closing_balance: Money
    total_debits: Money
    total_credits: Money


class AccountBalanceSchema(BaseModel):
    """Trial balance line"""

    account_id: str
    account_name: str = ""
    debit_balance: Money = Decimal("0")
    credit_balance: Money = Decimal("0")


class TrialBalanceRequest(BaseModel):
    """Request body for POST /v1/reports/trial-balance"""

    report_date: Optional[date] = None
    accounts: List[AccountBalanceSchema] = []


class TrialBalanceResponse(BaseModel):
    report_date: Optional[date] = None
    accounts: List[AccountBalanceSchema]
    total_debits: Money
    total_credits: Money
    difference: Money
    is_balanced: bool
    message: str


class StatementLineSchema(BaseModel):
    """Account amount on a balance sheet or income statement"""

    account_id: str
    account_name: str = ""
    amount: Money


class BalanceSheetRequest(BaseModel):
    """Request body for POST /v1/reports/balance-sheet"""

    report_date: Optional[date] = None
    assets: List[StatementLineSchema] = []
    liabilities: List[StatementLineSchema] = []
    equity: List[StatementLineSchema] = []


class BalanceSheetResponse(BaseModel):
    report_date: Optional[date] = None
    assets: List[StatementLineSchema]
    liabilities: List[StatementLineSchema]
    equity: List[StatementLineSchema]
    total_assets: Money
    total_liabilities: Money
    total_equity: Money
    total_liabilities_and_equity: Money
    difference: Money
    is_balanced: bool
    message: str


class IncomeStatementRequest(BaseModel):
    """Request body for POST /v1/reports/income-statement"""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    revenues: List[StatementLineSchema] = []
    expenses: List[StatementLineSchema] = []


class IncomeStatementResponse(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    revenues: List[StatementLineSchema]
    expenses: List[StatementLineSchema]
    total_revenue: Money
    total_expenses: Money
    net_income: Money


class JournalLineSchema(BaseModel):
    """Journal entry line; the entry date is shared by every line"""

    account_id: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    line_description: str = ""


class JournalEntryCheckRequest(BaseModel):
    """Request body for POST /v1/journal-entries/check"""

    entry_date: date
    lines: List[JournalLineSchema] = []


class JournalEntryCheckResponse(BaseModel):
    total_debits: Money
    total_credits: Money
    difference: Money
    is_balanced: bool
    message: str
