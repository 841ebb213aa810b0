"""
zones_repo.py
- Stores zones as documents in Mongo.
- Every function takes the collection explicitly so routes can inject it.
"""

from __future__ import annotations
from typing import List, Dict, Any, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection


def to_object_id(zone_id: str) -> Optional[ObjectId]:
    # malformed ids can never match a stored zone
    try:
        return ObjectId(zone_id)
    except (InvalidId, TypeError):
        return None


def serialize(d: Dict[str, Any]) -> Dict[str, Any]:
    d["_id"] = str(d["_id"])
    return d


async def count_zones(col: AsyncIOMotorCollection, q: Dict[str, Any]) -> int:
    return await col.count_documents(q)


async def find_zones(
    col: AsyncIOMotorCollection,
    q: Dict[str, Any],
    projection: Optional[Dict[str, int]] = None,
    sort: Optional[List[Tuple[str, int]]] = None,
    skip: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    cur = col.find(q, projection)
    if sort:
        cur = cur.sort(sort)
    if skip is not None and skip > 0:
        cur = cur.skip(skip)
    if limit is not None and limit > 0:
        cur = cur.limit(limit)
    out = []
    async for d in cur:
        out.append(serialize(d))
    return out


async def get_zone(
    col: AsyncIOMotorCollection,
    zone_id: str,
    projection: Optional[Dict[str, int]] = None,
) -> Optional[dict]:
    oid = to_object_id(zone_id)
    if oid is None:
        return None
    d = await col.find_one({"_id": oid}, projection)
    return serialize(d) if d else None


async def insert_zone(col: AsyncIOMotorCollection, doc: Dict[str, Any]) -> dict:
    r = await col.insert_one(doc)
    doc["_id"] = r.inserted_id
    return serialize(doc)


async def replace_zone(col: AsyncIOMotorCollection, doc: Dict[str, Any]) -> dict:
    oid = to_object_id(str(doc["_id"]))
    body = {k: v for k, v in doc.items() if k != "_id"}
    await col.replace_one({"_id": oid}, body)
    return serialize({"_id": oid, **body})


async def delete_zone(col: AsyncIOMotorCollection, zone_id: str) -> int:
    oid = to_object_id(zone_id)
    if oid is None:
        return 0
    r = await col.delete_one({"_id": oid})
    return r.deleted_count
