"""POST /v1/reports/* - Trial balance, balance sheet and income statement"""

import time
import logging
from typing import List
from fastapi import APIRouter, HTTPException, Request

from microfin_gateway.api.v1.schemas import (
    AccountBalanceSchema,
    BalanceSheetRequest,
    BalanceSheetResponse,
    IncomeStatementRequest,
    IncomeStatementResponse,
    StatementLineSchema,
    TrialBalanceRequest,
    TrialBalanceResponse,
)
from microfin_gateway.api.dependencies import get_request_id
from microfin_gateway.domain.ledger import build_balance_sheet, build_income_statement, build_trial_balance
from microfin_gateway.domain.models import AccountBalance, StatementLine
from microfin_gateway.domain.exceptions import InvalidArgumentError
from microfin_gateway.infrastructure.observability.metrics import invalid_argument_counter, record_report
from microfin_gateway.infrastructure.observability.logging import log_computation, log_rejection

router = APIRouter()


def _to_lines(items: List[StatementLineSchema]) -> List[StatementLine]:
    return [StatementLine(item.account_id, item.amount, item.account_name) for item in items]


def _to_schemas(lines) -> List[StatementLineSchema]:
    return [
        StatementLineSchema(account_id=line.account_id, account_name=line.account_name, amount=line.amount)
        for line in lines
    ]


def _reject(endpoint: str, request_id: str, error: InvalidArgumentError) -> HTTPException:
    invalid_argument_counter.labels(endpoint=endpoint).inc()
    log_rejection(request_id, endpoint, error)
    return HTTPException(status_code=422, detail=str(error))


@router.post("/reports/trial-balance", response_model=TrialBalanceResponse)
def trial_balance(request_body: TrialBalanceRequest, request: Request):
    """
    Total debit and credit balances across accounts and verify they agree.

    Returns:
        Totals, signed difference (debits - credits), verdict and message
    """
    start_time = time.time()
    request_id = get_request_id(request)

    accounts = [
        AccountBalance(a.account_id, a.debit_balance, a.credit_balance, a.account_name)
        for a in request_body.accounts
    ]

    try:
        result = build_trial_balance(accounts)
    except InvalidArgumentError as e:
        raise _reject("reports/trial-balance", request_id, e)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report("trial_balance", result.is_balanced)
    log_computation(request_id, "trial_balance", "balanced" if result.is_balanced else "unbalanced", duration_ms)

    return TrialBalanceResponse(
        report_date=request_body.report_date,
        accounts=[
            AccountBalanceSchema(
                account_id=a.account_id,
                account_name=a.account_name,
                debit_balance=a.debit_balance,
                credit_balance=a.credit_balance,
            )
            for a in result.accounts
        ],
        total_debits=result.total_debits,
        total_credits=result.total_credits,
        difference=result.difference,
        is_balanced=result.is_balanced,
        message=result.message,
    )


@router.post("/reports/balance-sheet", response_model=BalanceSheetResponse)
def balance_sheet(request_body: BalanceSheetRequest, request: Request):
    """Verify the accounting equation Assets = Liabilities + Equity"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = build_balance_sheet(
            _to_lines(request_body.assets),
            _to_lines(request_body.liabilities),
            _to_lines(request_body.equity),
        )
    except InvalidArgumentError as e:
        raise _reject("reports/balance-sheet", request_id, e)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report("balance_sheet", result.is_balanced)
    log_computation(request_id, "balance_sheet", "balanced" if result.is_balanced else "unbalanced", duration_ms)

    return BalanceSheetResponse(
        report_date=request_body.report_date,
        assets=_to_schemas(result.assets),
        liabilities=_to_schemas(result.liabilities),
        equity=_to_schemas(result.equity),
        total_assets=result.total_assets,
        total_liabilities=result.total_liabilities,
        total_equity=result.total_equity,
        total_liabilities_and_equity=result.total_liabilities_and_equity,
        difference=result.difference,
        is_balanced=result.is_balanced,
        message=result.message,
    )


@router.post("/reports/income-statement", response_model=IncomeStatementResponse)
def income_statement(request_body: IncomeStatementRequest, request: Request):
    """Net income (loss) for the period: revenues minus expenses"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = build_income_statement(
            _to_lines(request_body.revenues),
            _to_lines(request_body.expenses),
            start_date=request_body.start_date,
            end_date=request_body.end_date,
        )
    except InvalidArgumentError as e:
        raise _reject("reports/income-statement", request_id, e)
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report("income_statement")
    log_computation(request_id, "income_statement", "built", duration_ms)

    return IncomeStatementResponse(
        start_date=result.start_date,
        end_date=result.end_date,
        revenues=_to_schemas(result.revenues),
        expenses=_to_schemas(result.expenses),
        total_revenue=result.total_revenue,
        total_expenses=result.total_expenses,
        net_income=result.net_income,
    )
