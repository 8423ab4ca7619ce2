"""Shared utilities used across the repair shop scheduling code."""

import re
from datetime import date, datetime


def normalize_phone(value: str) -> str:
    """Strip the spaces and dashes customers type into phone numbers.

    Examples:
        >>> normalize_phone("138 0013 8000")
        '13800138000'
        >>> normalize_phone("138-0013-8000")
        '13800138000'
    """
    return re.sub(r"[\s-]", "", value.strip())


def format_date(value: date) -> str:
    """Format a date as ``YYYY-MM-DD``, the store's appointment_date format."""
    return value.strftime("%Y-%m-%d")


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string. Raises ValueError on anything else."""
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()
