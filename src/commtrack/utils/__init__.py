"""Utility functions for commtrack."""

from commtrack.utils.date_parser import parse_date, parse_optional_date, format_date
from commtrack.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_optional_date", "format_date", "parse_amount"]
