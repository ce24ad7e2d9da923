"""Shared pytest fixtures for commtrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from commtrack.database.factories import create_sqlite_database
from commtrack.domain.edit_session import EditSession
from commtrack.domain.entities import Brokerage, ClientType, PropertyType, TransactionType
from commtrack.domain.summary import SummaryService
from commtrack.domain.transaction import TransactionService


class FakeSheetBackend:
    """In-memory spreadsheet backend."""

    def __init__(self, rows=None):
        self.rows = [list(row) for row in (rows or [])]
        self.writes = 0

    def read_rows(self):
        return [list(row) for row in self.rows]

    def write_rows(self, rows):
        self.rows = [list(row) for row in rows]
        self.writes += 1

    def append_row(self, row):
        self.rows.append(list(row))


class FakeVisionClient:
    """Vision client returning a canned reply."""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def read_document(self, system_prompt, instruction, image_url):
        self.calls.append((system_prompt, instruction, image_url))
        return self.reply


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def make_transaction(transaction_service):
    """Return a helper that saves a transaction built through an edit session."""

    def _make(brokerage=Brokerage.KELLER_WILLIAMS, **values):
        session = EditSession.new(brokerage)
        session.set_fields(values)
        transaction_id = transaction_service.save_session(session)
        return transaction_service.get_transaction(transaction_id)

    return _make


@pytest.fixture
def sample_transactions(make_transaction):
    """Three closed deals across two years, both brokerages and both sides."""
    return [
        make_transaction(
            address="12 Palm Way",
            client_type=ClientType.SELLER,
            property_type=PropertyType.RESIDENTIAL,
            list_date=date(2024, 1, 2),
            closing_date=date(2024, 2, 15),
            closed_price=Decimal("500000"),
            commission_pct=Decimal("3"),
        ),
        make_transaction(
            brokerage=Brokerage.BENNION_DEVILLE,
            address="8 Desert Rd",
            client_type=ClientType.BUYER,
            property_type=PropertyType.LAND,
            list_date=date(2024, 3, 1),
            closing_date=date(2024, 3, 31),
            closed_price=Decimal("200000"),
            commission_pct=Decimal("2.5"),
        ),
        make_transaction(
            transaction_type=TransactionType.REFERRAL_RECEIVED,
            address="40 Elm St",
            client_type=ClientType.BUYER,
            closing_date=date(2023, 11, 20),
            referral_fee_received=Decimal("2500"),
        ),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fake_backend():
    """Create an empty in-memory sheet backend."""
    return FakeSheetBackend()


@pytest.fixture
def make_backend():
    """Return a factory for in-memory sheet backends holding the given rows."""
    return FakeSheetBackend


@pytest.fixture
def make_vision_client():
    """Return a factory for vision clients answering with a canned reply."""
    return FakeVisionClient
