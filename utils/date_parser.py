# utils/date_parser.py
from __future__ import annotations
from datetime import date, datetime
from typing import Optional
import re

import dateparser
from dateparser.search import search_dates

PREFERRED_LANGS = ["en"]
DATEPARSER_SETTINGS = {"PREFER_DATES_FROM": "future"}

ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def validate_date(value: str, today: Optional[date] = None) -> Optional[date]:
    """
    Strict check used before anything is sent to SerpApi.
    Only YYYY-MM-DD is accepted; impossible dates (2025-02-30) and dates
    before today are rejected rather than corrected.
    """
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value):
        return None

    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None

    if parsed < (today or date.today()):
        return None
    return parsed


def parse_date(value: str) -> Optional[date]:
    """
    Lenient parsing for what a language model or a user hands us:
    - YYYY-MM-DD, YYYY/MM/DD, DD.MM.YYYY, DD/MM/YYYY
    - natural language ("December 25", "next friday") via dateparser
    Returns None if nothing fits.
    """
    if not value:
        return None

    v = value.strip()
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%d.%m.%Y", "%d/%m/%Y"):
        try:
            return datetime.strptime(v, fmt).date()
        except ValueError:
            pass

    parsed = dateparser.parse(v, languages=PREFERRED_LANGS, settings=DATEPARSER_SETTINGS)
    return parsed.date() if parsed else None


def to_iso(value: str) -> Optional[str]:
    """Normalize a date-ish string to YYYY-MM-DD, keeping exact ISO input as is."""
    if isinstance(value, str) and ISO_DATE_PATTERN.fullmatch(value.strip()):
        return value.strip()
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def extract_first_date(text: str) -> Optional[date]:
    """Scan free-form text for the first date-like expression."""
    if not text:
        return None

    hits = search_dates(text, languages=PREFERRED_LANGS, settings=DATEPARSER_SETTINGS)
    if not hits:
        return None

    # search_dates returns [(matched_text, datetime), ...]
    for match_text, dt in hits:
        # skip stray short tokens ("on", "to") that dateparser sometimes picks up
        if any(char.isdigit() for char in match_text) or len(match_text.strip()) > 3:
            return dt.date()
    return None
