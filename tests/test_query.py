from datetime import datetime

import pytest

from zone_api.errors import CastError
from zone_api.query import (
    cast_field,
    build_filter,
    build_projection,
    build_sort,
    parse_int,
    parse_limit,
    parse_range_param,
    parse_skip,
    range_query,
    resolve_field,
    set_path,
)


@pytest.mark.parametrize(
    "external,path",
    [
        ("nameEN", "name.en"),
        ("shortNameEN", "shortName.en"),
        ("descriptionEN", "description.en"),
        ("welcomeMessageEN", "welcomeMessage.en"),
        ("locationLat", "location.latitude"),
        ("locationLong", "location.longitude"),
        ("nameTH", "name.th"),
    ],
)
def test_resolve_field_aliases(external, path):
    assert resolve_field(external) == path


def test_unmapped_fields_pass_through():
    assert resolve_field("type") == "type"
    assert resolve_field("places") == "places"
    assert resolve_field("name.en") == "name.en"


def test_build_projection():
    assert build_projection("nameEN,type,locationLat") == {
        "name.en": 1,
        "type": 1,
        "location.latitude": 1,
    }
    assert build_projection(None) is None
    assert build_projection("") is None
    assert build_projection(" , ") is None


def test_build_sort_directions():
    assert build_sort("-nameEN") == [("name.en", -1)]
    assert build_sort("nameEN") == [("name.en", 1)]
    assert build_sort("type,-updatedAt") == [("type", 1), ("updatedAt", -1)]
    assert build_sort("+type") == [("type", 1)]
    assert build_sort(None) == []


def test_parse_int_behaves_like_parse_int():
    assert parse_int("10") == 10
    assert parse_int("10abc") == 10
    assert parse_int(" -3") == -3
    assert parse_int("abc") is None
    assert parse_int("") is None
    assert parse_int(None) is None
    assert parse_int(7) == 7


def test_range_query_dates():
    out = range_query({"gte": "2020-01-01", "lt": "2021-01-01T00:00:00Z", "foo": 1})
    assert out == {"$gte": datetime(2020, 1, 1), "$lt": datetime(2021, 1, 1)}


def test_range_query_epoch_ms_and_dollar_keys():
    out = range_query({"$lte": 0})
    assert out == {"$lte": datetime(1970, 1, 1)}


def test_range_query_rejects_non_objects():
    assert range_query("not json") is None
    assert range_query([1, 2]) is None
    assert range_query({"gte": "not a date"}) is None


def test_parse_range_param_swallows_bad_json():
    assert parse_range_param('{"gte": "2020-01-01"}') == {"$gte": datetime(2020, 1, 1)}
    assert parse_range_param("{gte: 2020") is None
    assert parse_range_param(None) is None


def test_build_filter():
    q = build_filter(name_en="Eng", type_="Faculty", update='{"gte": "2020-06-01"}')
    assert q == {
        "name.en": {"$regex": "Eng"},
        "type": "Faculty",
        "updatedAt": {"$gte": datetime(2020, 6, 1)},
    }
    assert build_filter() == {}
    assert build_filter(update="garbage") == {}


def test_set_path_creates_parents():
    doc = {"name": {"en": "a", "th": "b"}, "location": None}
    set_path(doc, "name.en", "x")
    set_path(doc, "location.latitude", 1.5)
    set_path(doc, "type", "Faculty")
    assert doc == {
        "name": {"en": "x", "th": "b"},
        "location": {"latitude": 1.5},
        "type": "Faculty",
    }


def test_build_projection_exclusions():
    assert build_projection("-website") == {"website": 0}
    assert build_projection("-nameEN,-locationLong") == {
        "name.en": 0,
        "location.longitude": 0,
    }
    assert build_projection("-_id,nameEN") == {"_id": 0, "name.en": 1}


def test_parse_limit_and_skip_drop_out_of_range_values():
    assert parse_limit("5") == 5
    assert parse_limit("0") is None
    assert parse_limit("-3") is None
    assert parse_limit("x") is None
    assert parse_skip("0") == 0
    assert parse_skip("4") == 4
    assert parse_skip("-3") is None


def test_cast_field_coerces_scalars():
    assert cast_field("nameEN", 123) == "123"
    assert cast_field("type", True) == "true"
    assert cast_field("locationLat", "13.75") == 13.75
    assert cast_field("locationLong", 100) == 100.0
    assert cast_field("locationLat", "") is None
    assert cast_field("places", "abc") == ["abc"]
    assert cast_field("places", ["a", 1]) == ["a", "1"]
    assert cast_field("website", None) is None


@pytest.mark.parametrize(
    "field,value",
    [
        ("locationLat", "abc"),
        ("locationLong", "nan"),
        ("locationLat", {"deg": 13}),
        ("nameEN", {"en": "x"}),
        ("descriptionTH", ["a"]),
        ("places", [{"id": 1}]),
    ],
)
def test_cast_field_rejects_uncastable_values(field, value):
    with pytest.raises(CastError) as exc_info:
        cast_field(field, value)
    assert field in str(exc_info.value)
