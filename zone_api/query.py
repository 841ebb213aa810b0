"""
query.py
What this file does:
- Maps external (request) field names to document paths in Mongo.
- Builds the projection, sort and filter used by the zone list/get routes.
- Translates JSON range objects into Mongo range filters.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .errors import CastError

logger = logging.getLogger(__name__)

# external name -> document path, shared by fields= and sort=
FIELD_ALIASES: Dict[str, str] = {
    "nameEN": "name.en",
    "nameTH": "name.th",
    "shortNameEN": "shortName.en",
    "shortNameTH": "shortName.th",
    "descriptionEN": "description.en",
    "descriptionTH": "description.th",
    "welcomeMessageEN": "welcomeMessage.en",
    "welcomeMessageTH": "welcomeMessage.th",
    "locationLat": "location.latitude",
    "locationLong": "location.longitude",
}

# request body field -> document path, in the order they are applied
BODY_FIELDS: Dict[str, str] = {
    "nameEN": "name.en",
    "nameTH": "name.th",
    "places": "places",
    "thumbnail": "thumbnail",
    "banner": "banner",
    "welcomeMessageTH": "welcomeMessage.th",
    "welcomeMessageEN": "welcomeMessage.en",
    "shortNameTH": "shortName.th",
    "shortNameEN": "shortName.en",
    "descriptionTH": "description.th",
    "descriptionEN": "description.en",
    "website": "website",
    "type": "type",
    "locationLat": "location.latitude",
    "locationLong": "location.longitude",
}

RANGE_OPERATORS = ("gt", "gte", "lt", "lte", "eq", "ne")

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def resolve_field(name: str) -> str:
    return FIELD_ALIASES.get(name, name)


def _split(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def build_projection(fields: Optional[str]) -> Optional[Dict[str, int]]:
    """
    "nameEN,type" -> {"name.en": 1, "type": 1}; "-website" -> {"website": 0}.
    None means "return every field"; _id is included unless excluded.
    Mixing inclusions and exclusions is left for Mongo to reject.
    """
    projection: Dict[str, int] = {}
    for item in _split(fields):
        if item.startswith("-"):
            projection[resolve_field(item[1:])] = 0
        else:
            projection[resolve_field(item.lstrip("+"))] = 1
    return projection or None


def build_sort(sort: Optional[str]) -> List[Tuple[str, int]]:
    """
    "-nameEN,type" -> [("name.en", -1), ("type", 1)].
    Later duplicates override the direction but keep the first position.
    """
    order: Dict[str, int] = {}
    for item in _split(sort):
        if item.startswith("-"):
            order[resolve_field(item[1:])] = -1
        else:
            order[resolve_field(item.lstrip("+"))] = 1
    return list(order.items())


def parse_int(raw: Any) -> Optional[int]:
    # parseInt(raw, 10): leading digits win, garbage yields None
    if raw is None:
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    m = _INT_PREFIX.match(str(raw))
    if not m:
        return None
    return int(m.group(1))


def parse_limit(raw: Any) -> Optional[int]:
    # 0 and negatives mean "no limit"
    n = parse_int(raw)
    return n if n is not None and n > 0 else None


def parse_skip(raw: Any) -> Optional[int]:
    n = parse_int(raw)
    return n if n is not None and n >= 0 else None


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Converts a range bound to a naive UTC datetime (what pymongo hands back).
    Numbers are epoch milliseconds, strings are ISO-8601.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc).replace(tzinfo=None)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
        return dt
    return None


def range_query(value: Any, kind: str = "Date") -> Optional[Dict[str, Any]]:
    """
    {"gte": "2020-01-01", "lt": "2021-01-01"} -> {"$gte": datetime(...), "$lt": datetime(...)}

    Unknown keys are dropped. Returns None when nothing usable remains,
    so callers can skip the filter entirely.
    """
    if not isinstance(value, dict):
        return None
    out: Dict[str, Any] = {}
    for key, bound in value.items():
        op = str(key).lstrip("$")
        if op not in RANGE_OPERATORS:
            continue
        if kind == "Date":
            bound = to_datetime(bound)
            if bound is None:
                continue
        out[f"${op}"] = bound
    return out or None


def parse_range_param(raw: Optional[str], kind: str = "Date") -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        value: Any = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed range query %r", raw)
        value = raw
    return range_query(value, kind)


def build_filter(
    name_en: Optional[str] = None,
    type_: Optional[str] = None,
    update: Optional[str] = None,
) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    if name_en:
        q["name.en"] = {"$regex": name_en}
    if type_:
        q["type"] = type_
    if update:
        rng = parse_range_param(update)
        if rng is not None:
            q["updatedAt"] = rng
    return q


def set_path(doc: Dict[str, Any], path: str, value: Any) -> None:
    # "location.latitude" -> doc["location"]["latitude"], creating parents
    parts = path.split(".")
    node = doc
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value


NUMBER_FIELDS = ("locationLat", "locationLong")
LIST_FIELDS = ("places",)


def _cast_string(field: str, value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise CastError(field, value, "string")


def _cast_number(field: str, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value)
        except ValueError:
            raise CastError(field, value, "number") from None
    else:
        raise CastError(field, value, "number")
    if not math.isfinite(number):
        raise CastError(field, value, "number")
    return number


def cast_field(field: str, value: Any) -> Any:
    """
    Coerces a raw body value to the stored type of `field`:
    scalars become strings, numeric strings become floats, a single
    place becomes a one-item list. Raises CastError when that is impossible.
    """
    if field in NUMBER_FIELDS:
        return _cast_number(field, value)
    if field in LIST_FIELDS:
        if value is None:
            return None
        items = value if isinstance(value, list) else [value]
        return [_cast_string(field, item) for item in items]
    return _cast_string(field, value)
