"""Tests for spreadsheet sync service."""

import pytest
from decimal import Decimal

from commtrack.domain.errors import NotFoundError, ValidationError
from commtrack.domain.sheet_row import SHEET_COLUMNS, transaction_to_row
from commtrack.domain.sheet_sync import SheetSyncService


def sheet_row(**cells):
    row = [""] * len(SHEET_COLUMNS)
    for column, value in cells.items():
        row[SHEET_COLUMNS.index(column)] = value
    return row


def test_push_writes_every_transaction(temp_db, fake_backend, sample_transactions):
    """Test push overwrites the sheet with all stored transactions."""
    fake_backend.rows = [["stale"]]
    service = SheetSyncService(temp_db, fake_backend)

    count = service.push()

    assert count == 3
    assert fake_backend.writes == 1
    assert len(fake_backend.rows) == 3
    assert {row[0] for row in fake_backend.rows} == {t.id for t in sample_transactions}
    assert all(len(row) == 26 for row in fake_backend.rows)


def test_pull_replaces_local_store(temp_db, make_backend, transaction_service, sample_transactions):
    """Test pull replaces every local transaction with the sheet rows."""
    backend = make_backend(
        [
            sheet_row(id="r1", address="1 Main St", gci="9000", nci="7000", brokerage="BDH"),
            sheet_row(address="2 Main St", nci="500"),
        ]
    )
    service = SheetSyncService(temp_db, backend)

    count = service.pull()

    stored = transaction_service.list_transactions()
    assert count == 2
    assert {t.address for t in stored} == {"1 Main St", "2 Main St"}
    first = transaction_service.get_transaction("r1")
    assert first.nci == Decimal("7000")
    assert first.gci == Decimal("9000")
    assert transaction_service.get_transaction("sheet-2").nci == Decimal("500")


def test_pull_skips_blank_rows(temp_db, make_backend, transaction_service):
    """Test blank rows are not imported."""
    backend = make_backend([sheet_row(id="r1"), ["", "  "], sheet_row(id="r2")])

    assert SheetSyncService(temp_db, backend).pull() == 2


def test_pull_renames_duplicate_ids(temp_db, make_backend, transaction_service):
    """Test repeated IDs get fresh ones."""
    backend = make_backend(
        [sheet_row(id="dup", address="First"), sheet_row(id="dup", address="Second")]
    )

    SheetSyncService(temp_db, backend).pull()

    stored = transaction_service.list_transactions()
    assert len(stored) == 2
    assert transaction_service.get_transaction("dup").address == "First"


def test_pull_invalid_row_keeps_local_store(temp_db, make_backend, transaction_service, sample_transactions):
    """Test a bad row aborts the pull before anything is replaced."""
    backend = make_backend([sheet_row(id="r1"), sheet_row(id="r2", brokerage="Compass")])

    with pytest.raises(ValidationError, match="Sheet row 3"):
        SheetSyncService(temp_db, backend).pull()

    assert len(transaction_service.list_transactions()) == 3


def test_push_then_pull_keeps_figures(temp_db, transaction_service, fake_backend, sample_transactions):
    """Test a push/pull cycle keeps the commission figures."""
    service = SheetSyncService(temp_db, fake_backend)
    service.push()
    service.pull()

    for original in sample_transactions:
        restored = transaction_service.get_transaction(original.id)
        assert restored.gci == original.gci
        assert restored.nci == original.nci
        assert restored.closing_date == original.closing_date


def test_append(temp_db, fake_backend, sample_transactions):
    """Test appending one transaction."""
    service = SheetSyncService(temp_db, fake_backend)

    service.append(sample_transactions[0].id)

    assert fake_backend.rows == [transaction_to_row(sample_transactions[0])]


def test_append_not_found(temp_db, fake_backend):
    """Test appending a missing transaction raises."""
    with pytest.raises(NotFoundError):
        SheetSyncService(temp_db, fake_backend).append("missing")
