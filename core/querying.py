# vmatch-backend/core/querying.py
"""
Shared building blocks for the listing endpoints:

- query param parsing (comma lists, booleans, date bounds)
- single field ordering ("sort=field:desc" or "sort=-field")
- offset pagination with a total computed under the same filters
- field projection ("fields=a,b,c")

The per-resource filters live in projects/filters.py and applications/filters.py.
"""
import math
from typing import Iterable, Optional

from django.conf import settings
from rest_framework.exceptions import ValidationError

from .constants import SORT_ASC, SORT_DESC
from .datetime_utils import parse_iso

TRUE_VALUES = ("1", "true", "yes", "on")


def parse_csv(value) -> list:
    """'a, b,,c' -> ['a', 'b', 'c']. Lists (getlist) are flattened the same way."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return [item.strip() for item in str(value).split(",") if item.strip()]


def parse_bool(value) -> bool:
    return bool(value) and str(value).strip().lower() in TRUE_VALUES


def parse_int_param(params, name: str) -> Optional[int]:
    raw = params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: [f"'{raw}' is not a valid integer."]})


def parse_date_bound(params, name: str, end_of_day: bool = False):
    raw = params.get(name)
    if not raw:
        return None
    parsed = parse_iso(raw, end_of_day=end_of_day)
    if parsed is None:
        raise ValidationError({name: [f"'{raw}' is not a valid ISO 8601 date."]})
    return parsed


def apply_date_range(qs, field: str, params, start_param="start_date", end_param="end_date"):
    """Inclusive bounds on a date/datetime column."""
    start = parse_date_bound(params, start_param)
    end = parse_date_bound(params, end_param, end_of_day=True)
    if start:
        qs = qs.filter(**{f"{field}__gte": start})
    if end:
        qs = qs.filter(**{f"{field}__lte": end})
    return qs


def apply_ordering(qs, sort: Optional[str], allowed: Iterable[str], default: str):
    """
    Order by exactly one field.

    Accepts "field:asc", "field:desc", "field" (asc) and "-field" (desc).
    Unknown fields are rejected so typos do not silently fall back.
    """
    if not sort:
        return qs.order_by(default, "-id")

    sort = sort.strip()
    if ":" in sort:
        field, _, direction = sort.partition(":")
        direction = direction.strip().lower() or SORT_ASC
    elif sort.startswith("-"):
        field, direction = sort[1:], SORT_DESC
    else:
        field, direction = sort, SORT_ASC
    field = field.strip()

    if field not in allowed:
        raise ValidationError({"sort": [f"Cannot sort by '{field}'. Allowed: {', '.join(sorted(allowed))}."]})
    if direction not in (SORT_ASC, SORT_DESC):
        raise ValidationError({"sort": [f"Sort direction must be '{SORT_ASC}' or '{SORT_DESC}'."]})

    prefix = "-" if direction == SORT_DESC else ""
    return qs.order_by(f"{prefix}{field}", f"{prefix}id")


def paginate(qs, params):
    """
    Offset pagination driven by ?page= and ?limit=.

    Returns (page_queryset, meta). The total is counted on the filtered
    queryset before slicing, so it does not depend on the requested page.
    """
    page = parse_int_param(params, "page")
    limit = parse_int_param(params, "limit")

    default_limit = getattr(settings, "DEFAULT_PAGE_LIMIT", 10)
    max_limit = getattr(settings, "MAX_PAGE_LIMIT", 100)

    page = 1 if page is None else page
    limit = default_limit if limit is None else limit

    if page < 1:
        raise ValidationError({"page": ["Page must be 1 or greater."]})
    if limit < 1:
        raise ValidationError({"limit": ["Limit must be 1 or greater."]})
    limit = min(limit, max_limit)

    total = qs.count()
    offset = (page - 1) * limit

    meta = {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": math.ceil(total / limit) if total else 0,
    }
    return qs[offset:offset + limit], meta


def requested_fields(params) -> Optional[list]:
    fields = parse_csv(params.get("fields"))
    return fields or None
