import asyncio
from datetime import datetime

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from zone_api.main import create_app


FULL_BODY = {
    "nameEN": "Faculty of Engineering",
    "nameTH": "คณะวิศวกรรมศาสตร์",
    "shortNameEN": "ENG",
    "shortNameTH": "วิศวะ",
    "descriptionEN": "Engineering buildings",
    "descriptionTH": "อาคารวิศวะ",
    "welcomeMessageEN": "Welcome!",
    "welcomeMessageTH": "ยินดีต้อนรับ",
    "places": ["5a1f3b2c9d8e7f6a5b4c3d2e"],
    "thumbnail": "https://example.com/thumb.png",
    "banner": "https://example.com/banner.png",
    "website": "https://eng.example.com",
    "type": "Faculty",
    "locationLat": 13.7384,
    "locationLong": 100.5322,
}


@pytest.fixture()
def db():
    return AsyncMongoMockClient()["zones_test"]


@pytest.fixture()
def app(db):
    return create_app(db=db)


@pytest.fixture()
def client(app):
    # not used as a context manager, so startup (Mongo ping) never runs
    return TestClient(app)


@pytest.fixture()
def seed(db):
    def _seed(*docs):
        ids = []
        for d in docs:
            doc = {
                "_id": ObjectId(),
                "places": [],
                "createdAt": datetime(2020, 1, 1),
                "updatedAt": datetime(2020, 1, 1),
                **d,
            }
            asyncio.run(db["zones"].insert_one(doc))
            ids.append(str(doc["_id"]))
        return ids

    return _seed


@pytest.fixture()
def full_body():
    return dict(FULL_BODY)


@pytest.fixture()
def make_zone():
    def _make(name_en, type_="Faculty", **extra):
        return {
            "name": {"en": name_en, "th": name_en + " TH"},
            "type": type_,
            "location": {"latitude": 13.0, "longitude": 100.0},
            **extra,
        }

    return _make
