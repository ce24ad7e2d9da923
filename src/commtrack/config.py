"""Runtime settings for the spreadsheet and scan integrations."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from commtrack.domain.errors import ConfigurationError, missing_setting

DEFAULT_SHEET_RANGE = "Transactions!A2:Z"
DEFAULT_SCAN_MODEL = "gpt-4o"


@dataclass(frozen=True)
class Settings:
    """Integration settings.

    Every setting is optional until the integration that needs it is used.
    """

    db_path: Optional[str] = None
    spreadsheet_id: Optional[str] = None
    sheets_token: Optional[str] = None
    sheet_range: str = DEFAULT_SHEET_RANGE
    openai_api_key: Optional[str] = None
    scan_model: str = DEFAULT_SCAN_MODEL
    scan_base_url: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Settings instance; blank variables count as unset
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(name, "").strip()
            return value or None

        return cls(
            db_path=get("COMMTRACK_DB_PATH"),
            spreadsheet_id=get("COMMTRACK_SPREADSHEET_ID"),
            sheets_token=get("COMMTRACK_SHEETS_TOKEN"),
            sheet_range=get("COMMTRACK_SHEET_RANGE") or DEFAULT_SHEET_RANGE,
            openai_api_key=get("OPENAI_API_KEY"),
            scan_model=get("COMMTRACK_SCAN_MODEL") or DEFAULT_SCAN_MODEL,
            scan_base_url=get("COMMTRACK_SCAN_BASE_URL"),
        )

    def require_sheets(self) -> tuple[str, str]:
        """Return the spreadsheet ID and access token.

        Raises:
            ConfigurationError: If either is missing
        """
        if not self.spreadsheet_id:
            raise ConfigurationError(
                missing_setting("COMMTRACK_SPREADSHEET_ID", "sync with the spreadsheet")
            )
        if not self.sheets_token:
            raise ConfigurationError(
                missing_setting("COMMTRACK_SHEETS_TOKEN", "sync with the spreadsheet")
            )
        return self.spreadsheet_id, self.sheets_token

    def require_openai_key(self) -> str:
        """Return the OpenAI API key.

        Raises:
            ConfigurationError: If it is missing
        """
        if not self.openai_api_key:
            raise ConfigurationError(missing_setting("OPENAI_API_KEY", "scan commission sheets"))
        return self.openai_api_key
