"""
Medication Activity Filter
Decides whether a medication is active on a calendar day
"""

import logging
from datetime import datetime, date
from typing import Any, Optional


logger = logging.getLogger(__name__)


def to_date_str(value: Any) -> Optional[str]:
    """
    Normalize a stored date value to "YYYY-MM-DD".

    Datetimes are truncated to their own date component, so the result does
    not depend on the timezone the value was built in. Strings are truncated
    to their first ten characters ("2024-03-01T00:00:00Z" -> "2024-03-01").
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value[:10]
    raise TypeError(f"Unsupported date value: {type(value).__name__}")


def is_active_on(medication: Any, date_str: str) -> bool:
    """
    True iff start_date <= date_str and (end_date is None or end_date >= date_str).

    Both bounds are inclusive and compared as YYYY-MM-DD strings. A medication
    whose stored bounds cannot be read is treated as inactive.
    """
    try:
        start = to_date_str(getattr(medication, "start_date", None))
        end = to_date_str(getattr(medication, "end_date", None))
    except TypeError as e:
        logger.warning(
            f"Medication {getattr(medication, 'id', '?')} has unreadable dates: {e}; skipping"
        )
        return False
    if start is None:
        return False
    return start <= date_str and (end is None or end >= date_str)
