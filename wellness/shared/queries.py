import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from wellness.shared.exceptions import BadRequestException


def text_search(term: str, fields: Iterable[str]) -> Dict[str, Any]:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    pattern = re.escape(term.strip())
    return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in fields]}


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise to naive UTC, the form MongoDB hands back."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def date_range(field: str, from_date: Optional[datetime], to_date: Optional[datetime]) -> Dict[str, Any]:
    """Inclusive range filter on ``field``; empty when neither bound is given."""
    from_date, to_date = to_utc(from_date), to_utc(to_date)
    if from_date and to_date and from_date > to_date:
        raise BadRequestException("from_date must not be after to_date")

    bounds: Dict[str, datetime] = {}
    if from_date:
        bounds["$gte"] = from_date
    if to_date:
        bounds["$lte"] = to_date
    return {field: bounds} if bounds else {}
