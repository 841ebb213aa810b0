"""
zones.py
CRUD for zones stored in MongoDB.
Query/body parameters are translated by query.py; store failures (and body
values that cannot be cast to their field type) become coded 500 envelopes,
missing zones coded 403 envelopes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ..deps import get_zones_col
from ..errors import ApiError, CastError, DATABASE_ERROR, ZONE_NOT_FOUND, ZONE_UPDATE_NOT_FOUND
from ..query import (
    BODY_FIELDS,
    build_filter,
    build_projection,
    build_sort,
    cast_field,
    parse_limit,
    parse_skip,
    set_path,
)
from ..repos import zones_repo
from ..schemas import QueryInfo, ZoneDeleteOut, ZoneListOut, ZoneOut, ZoneWriteOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/zones", tags=["zones"])


def utcnow() -> datetime:
    # naive UTC, matching what pymongo returns on read
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _store_error(exc: Exception, action: str) -> ApiError:
    logger.exception("Zone %s failed: %s", action, exc)
    return ApiError(500, DATABASE_ERROR, exc)


def _new_zone(body: Dict[str, Any]) -> Dict[str, Any]:
    v = {field: cast_field(field, body.get(field)) for field in BODY_FIELDS}
    now = utcnow()
    doc: Dict[str, Any] = {
        "name": {"en": v["nameEN"], "th": v["nameTH"]},
        "shortName": {"en": v["shortNameEN"], "th": v["shortNameTH"]},
        "description": {"en": v["descriptionEN"], "th": v["descriptionTH"]},
        "welcomeMessage": {"en": v["welcomeMessageEN"], "th": v["welcomeMessageTH"]},
        "places": v["places"] or [],
        "type": v["type"],
        "location": {"latitude": v["locationLat"], "longitude": v["locationLong"]},
        "createdAt": now,
        "updatedAt": now,
    }
    for field in ("thumbnail", "banner", "website"):
        if body.get(field):
            doc[field] = v[field]
    return doc


def _apply_changes(zone: Dict[str, Any], body: Dict[str, Any]) -> Dict[str, Any]:
    for field, path in BODY_FIELDS.items():
        # falsy ("" / 0 / [] / None) counts as absent
        if body.get(field):
            set_path(zone, path, cast_field(field, body[field]))
    zone["updatedAt"] = utcnow()
    return zone


@router.get("", response_model=ZoneListOut)
@router.get("/", response_model=ZoneListOut, include_in_schema=False)
async def list_zones(
    nameEN: Optional[str] = None,
    name: Optional[str] = None,
    type: Optional[str] = None,
    update: Optional[str] = None,
    fields: Optional[str] = None,
    sort: Optional[str] = None,
    limit: Optional[str] = None,
    skip: Optional[str] = None,
    col: AsyncIOMotorCollection = Depends(get_zones_col),
):
    q = build_filter(name_en=nameEN or name, type_=type, update=update)
    lim = parse_limit(limit)
    off = parse_skip(skip)
    try:
        total = await zones_repo.count_zones(col, q)
        zones = await zones_repo.find_zones(
            col,
            q,
            projection=build_projection(fields),
            sort=build_sort(sort),
            skip=off,
            limit=lim,
        )
    except PyMongoError as exc:
        raise _store_error(exc, "list") from exc
    return ZoneListOut(results=zones, queryInfo=QueryInfo(total=total, limit=lim, skip=off))


@router.get("/{zone_id}", response_model=ZoneOut)
async def get_zone(
    zone_id: str,
    fields: Optional[str] = None,
    col: AsyncIOMotorCollection = Depends(get_zones_col),
):
    try:
        zone = await zones_repo.get_zone(col, zone_id, build_projection(fields))
    except PyMongoError as exc:
        raise _store_error(exc, "lookup") from exc
    if zone is None:
        raise ApiError(403, ZONE_NOT_FOUND, key="results")
    return ZoneOut(results=zone)


@router.post("", status_code=201, response_model=ZoneWriteOut)
@router.post("/", status_code=201, response_model=ZoneWriteOut, include_in_schema=False)
async def create_zone(
    body: Optional[Dict[str, Any]] = Body(None),
    col: AsyncIOMotorCollection = Depends(get_zones_col),
):
    try:
        zone = await zones_repo.insert_zone(col, _new_zone(body or {}))
    except (PyMongoError, CastError) as exc:
        raise _store_error(exc, "create") from exc
    return ZoneWriteOut(message="Create Zone successful", results=zone)


@router.put("/{zone_id}", status_code=202, response_model=ZoneWriteOut)
async def update_zone(
    zone_id: str,
    body: Optional[Dict[str, Any]] = Body(None),
    col: AsyncIOMotorCollection = Depends(get_zones_col),
):
    try:
        zone = await zones_repo.get_zone(col, zone_id)
    except PyMongoError as exc:
        raise _store_error(exc, "lookup") from exc
    if zone is None:
        raise ApiError(403, ZONE_UPDATE_NOT_FOUND)
    try:
        zone = await zones_repo.replace_zone(col, _apply_changes(zone, body or {}))
    except (PyMongoError, CastError) as exc:
        raise _store_error(exc, "update") from exc
    return ZoneWriteOut(message="Update zone successful", results=zone)


@router.delete("/{zone_id}", status_code=202, response_model=ZoneDeleteOut)
async def delete_zone(zone_id: str, col: AsyncIOMotorCollection = Depends(get_zones_col)):
    try:
        await zones_repo.delete_zone(col, zone_id)
    except PyMongoError as exc:
        raise _store_error(exc, "delete") from exc
    return ZoneDeleteOut(message=f"An Zone with id {zone_id} was removed.")
