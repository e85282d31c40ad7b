"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient
from microfin_gateway.api.main import create_app
from microfin_gateway.domain.models import LedgerPosting, LoanTerms, TermUnit


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    app = create_app()
    return TestClient(app)


@pytest.fixture
def loan_terms() -> LoanTerms:
    """1000 at a flat 5% for 3 months starting mid-January"""
    return LoanTerms(
        principal=Decimal("1000"),
        rate_percent=Decimal("5"),
        term_length=3,
        term_unit=TermUnit.MONTH,
        start_date=date(2024, 1, 15),
    )


@pytest.fixture
def cash_postings() -> list[LedgerPosting]:
    """Out-of-order postings against a cash account"""
    return [
        LedgerPosting(date=date(2024, 1, 5), debit=Decimal("50"), credit=Decimal("0"), reference="JE-2"),
        LedgerPosting(date=date(2024, 1, 3), debit=Decimal("0"), credit=Decimal("30"), reference="JE-1"),
    ]
