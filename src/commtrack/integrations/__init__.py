"""Clients for the external spreadsheet and vision services."""

from commtrack.integrations.google_sheets import GoogleSheetsBackend
from commtrack.integrations.vision import OpenAIVisionClient

__all__ = ["GoogleSheetsBackend", "OpenAIVisionClient"]
