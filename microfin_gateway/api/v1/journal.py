"""POST /v1/journal-entries/check - Verify a journal entry balances before posting"""

import time
import logging
from fastapi import APIRouter, HTTPException, Request

from microfin_gateway.api.v1.schemas import JournalEntryCheckRequest, JournalEntryCheckResponse
from microfin_gateway.api.dependencies import get_request_id
from microfin_gateway.domain.ledger import check_journal_entry
from microfin_gateway.domain.models import LedgerPosting
from microfin_gateway.domain.exceptions import InvalidArgumentError
from microfin_gateway.infrastructure.observability.metrics import invalid_argument_counter, record_report
from microfin_gateway.infrastructure.observability.logging import log_computation, log_rejection

router = APIRouter()


@router.post("/journal-entries/check", response_model=JournalEntryCheckResponse)
def check_entry(request_body: JournalEntryCheckRequest, request: Request):
    """
    Check every line is one-sided and total debits equal total credits.

    An unbalanced entry is a 200 with is_balanced=false; a malformed line is a 422.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    lines = [
        LedgerPosting(
            date=request_body.entry_date,
            debit=line.debit,
            credit=line.credit,
            reference=line.account_id,
            description=line.line_description,
        )
        for line in request_body.lines
    ]

    try:
        result = check_journal_entry(lines)
    except InvalidArgumentError as e:
        invalid_argument_counter.labels(endpoint="journal-entries/check").inc()
        log_rejection(request_id, "journal-entries/check", e)
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report("journal_entry", result.is_balanced)
    log_computation(
        request_id,
        "journal_entry_check",
        "balanced" if result.is_balanced else "unbalanced",
        duration_ms,
        lines=len(result.lines),
    )

    return JournalEntryCheckResponse(
        total_debits=result.total_debits,
        total_credits=result.total_credits,
        difference=result.difference,
        is_balanced=result.is_balanced,
        message=result.message,
    )
