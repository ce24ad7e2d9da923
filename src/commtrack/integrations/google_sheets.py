"""Google Sheets backend over the Sheets REST API v4."""

import logging
from typing import Any, Optional, Sequence
from urllib.parse import quote

import requests

from commtrack.domain.errors import SheetSyncError

logger = logging.getLogger(__name__)

API_ROOT = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 30


class GoogleSheetsBackend:
    """Spreadsheet backend for one range of one Google spreadsheet.

    The OAuth access token is obtained elsewhere and passed in as-is.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        access_token: str,
        sheet_range: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the backend.

        Args:
            spreadsheet_id: Spreadsheet ID from the sheet URL
            access_token: OAuth bearer token with the spreadsheets scope
            sheet_range: A1 range holding the data rows, e.g. "Transactions!A2:Z"
            session: Optional requests session to reuse
            timeout: Request timeout in seconds
        """
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})

    def _url(self, suffix: str = "") -> str:
        return f"{API_ROOT}/{self.spreadsheet_id}/values/{quote(self.sheet_range)}{suffix}"

    def _request(self, method: str, url: str, **kwargs) -> dict[str, Any]:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise SheetSyncError(f"Spreadsheet request failed: {e}") from e

        if not response.ok:
            message = response.text
            try:
                message = response.json()["error"]["message"]
            except (ValueError, KeyError, TypeError):
                pass
            raise SheetSyncError(
                f"Spreadsheet request failed ({response.status_code}): {message}"
            )
        if not response.content:
            return {}
        return response.json()

    def read_rows(self) -> list[list[str]]:
        """Return all data rows; trailing blank cells are omitted by the API."""
        data = self._request("GET", self._url())
        rows = data.get("values", [])
        logger.debug("Read %d rows from %s", len(rows), self.sheet_range)
        return rows

    def write_rows(self, rows: Sequence[Sequence[str]]) -> None:
        """Clear the range, then write all rows starting at its top-left cell."""
        self._request("POST", self._url(":clear"))
        self._request(
            "PUT",
            self._url(),
            params={"valueInputOption": "USER_ENTERED"},
            json={"range": self.sheet_range, "values": [list(row) for row in rows]},
        )
        logger.debug("Wrote %d rows to %s", len(rows), self.sheet_range)

    def append_row(self, row: Sequence[str]) -> None:
        """Insert one row after the last data row of the range."""
        self._request(
            "POST",
            self._url(":append"),
            params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
            json={"values": [list(row)]},
        )
