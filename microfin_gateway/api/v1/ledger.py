"""POST /v1/ledger - General ledger with running balances for one account"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from microfin_gateway.api.v1.schemas import LedgerRequest, LedgerResponse, LedgerRowSchema
from microfin_gateway.api.dependencies import get_request_id, get_settings
from microfin_gateway.config import Settings
from microfin_gateway.domain.ledger import build_ledger
from microfin_gateway.domain.models import LedgerPosting
from microfin_gateway.domain.exceptions import InvalidArgumentError
from microfin_gateway.infrastructure.observability.metrics import invalid_argument_counter, record_report
from microfin_gateway.infrastructure.observability.logging import log_computation, log_rejection

router = APIRouter()


@router.post("/ledger", response_model=LedgerResponse)
def general_ledger(
    request_body: LedgerRequest,
    request: Request,
    app_settings: Settings = Depends(get_settings),
):
    """
    Build the general ledger for an account from its postings.

    Postings are ordered by date (ties keep request order); postings before
    start_date roll into the opening balance, postings after end_date are dropped.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    if len(request_body.postings) > app_settings.max_ledger_postings:
        raise HTTPException(
            status_code=413,
            detail=f"Too many postings (limit {app_settings.max_ledger_postings})",
        )

    postings = [
        LedgerPosting(
            date=p.entry_date,
            debit=p.debit,
            credit=p.credit,
            reference=p.reference,
            description=p.description,
        )
        for p in request_body.postings
    ]

    try:
        ledger = build_ledger(
            request_body.account_id,
            postings,
            opening_balance=request_body.opening_balance,
            normal_balance=request_body.normal_balance,
            start_date=request_body.start_date,
            end_date=request_body.end_date,
        )
    except InvalidArgumentError as e:
        invalid_argument_counter.labels(endpoint="ledger").inc()
        log_rejection(request_id, "ledger", e)
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report("ledger")
    log_computation(request_id, "ledger", "built", duration_ms, rows=len(ledger.rows))

    return LedgerResponse(
        account_id=request_body.account_id,
        opening_balance=ledger.opening_balance,
        rows=[
            LedgerRowSchema(
                entry_date=row.posting.date,
                debit=row.posting.debit,
                credit=row.posting.credit,
                reference=row.posting.reference,
                description=row.posting.description,
                running_balance=row.running_balance,
            )
            for row in ledger.rows
        ],
        closing_balance=ledger.closing_balance,
        total_debits=ledger.total_debits,
        total_credits=ledger.total_credits,
    )
