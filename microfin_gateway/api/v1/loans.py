"""POST /v1/loans/financials and /v1/loans/payments - loan form computations"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from microfin_gateway.api.v1.schemas import (
    LoanFinancialsRequest,
    LoanFinancialsResponse,
    PaymentRequest,
    PaymentResponse,
)
from microfin_gateway.api.dependencies import get_request_id, get_settings
from microfin_gateway.config import Settings
from microfin_gateway.domain.loans import apply_payment, compute_loan_financials
from microfin_gateway.domain.models import Incomplete, LoanTerms
from microfin_gateway.domain.exceptions import InvalidArgumentError
from microfin_gateway.infrastructure.observability.metrics import (
    invalid_argument_counter,
    loan_computation_counter,
    payment_check_counter,
)
from microfin_gateway.infrastructure.observability.logging import log_computation, log_rejection
from microfin_gateway.utils.money import round2

router = APIRouter()


@router.post("/loans/financials", response_model=LoanFinancialsResponse)
def loan_financials(
    request_body: LoanFinancialsRequest,
    request: Request,
    app_settings: Settings = Depends(get_settings),
):
    """
    Derive interest, total repayment, balance due and due date for a loan form.

    Incomplete input is not an error: the response has complete=false, lists
    the missing fields and leaves the derived fields null so the client keeps
    what it already shows. The request's revision is echoed so a client
    firing requests per keystroke can drop responses older than its latest input.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    terms = LoanTerms(
        principal=request_body.principal,
        rate_percent=request_body.rate_percent,
        term_length=request_body.term_length,
        term_unit=request_body.term_unit or app_settings.default_term_unit,
        start_date=request_body.start_date,
        payments_made=request_body.payments_made,
    )

    try:
        result = compute_loan_financials(terms)
    except InvalidArgumentError as e:
        loan_computation_counter.labels(outcome="invalid").inc()
        invalid_argument_counter.labels(endpoint="loans/financials").inc()
        log_rejection(request_id, "loans/financials", e)
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000

    if isinstance(result, Incomplete):
        loan_computation_counter.labels(outcome="incomplete").inc()
        log_computation(request_id, "loan_financials", "incomplete", duration_ms, missing=list(result.missing))
        return LoanFinancialsResponse(
            complete=False,
            missing=list(result.missing),
            revision=request_body.revision,
        )

    loan_computation_counter.labels(outcome="complete").inc()
    log_computation(request_id, "loan_financials", "complete", duration_ms)

    return LoanFinancialsResponse(
        complete=True,
        interest_amount=result.interest_amount,
        total_repayment=result.total_repayment,
        balance_due=result.balance_due,
        due_date=result.due_date,
        revision=request_body.revision,
    )


@router.post("/loans/payments", response_model=PaymentResponse)
def record_payment(request_body: PaymentRequest, request: Request):
    """
    Validate a repayment and return the balance due after it.

    Rejects non-positive payments and payments larger than the balance due.
    """
    request_id = get_request_id(request)

    try:
        new_balance = apply_payment(request_body.balance_due, request_body.amount)
    except InvalidArgumentError as e:
        payment_check_counter.labels(outcome="rejected").inc()
        invalid_argument_counter.labels(endpoint="loans/payments").inc()
        log_rejection(request_id, "loans/payments", e)
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    payment_check_counter.labels(outcome="accepted").inc()

    return PaymentResponse(
        amount=round2(request_body.amount),
        previous_balance_due=round2(request_body.balance_due),
        balance_due=new_balance,
    )
