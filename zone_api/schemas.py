# Response contracts for the zones resource.
# Request bodies stay raw dicts: query.BODY_FIELDS maps the flat external
# names (nameEN, locationLat, ...) onto the nested document and
# query.cast_field coerces each value to its stored type.

from pydantic import BaseModel
from typing import Dict, Any, List, Optional


class QueryInfo(BaseModel):
    total: int
    limit: Optional[int] = None
    skip: Optional[int] = None


class ZoneListOut(BaseModel):
    success: bool = True
    results: List[Dict[str, Any]]
    queryInfo: QueryInfo


class ZoneOut(BaseModel):
    success: bool = True
    results: Dict[str, Any]


class ZoneWriteOut(BaseModel):
    success: bool = True
    message: str
    results: Dict[str, Any]


class ZoneDeleteOut(BaseModel):
    success: bool = True
    message: str
