from datetime import timedelta

import pytest

from civic_pulse.models.issue import GeoPoint
from civic_pulse.services.spatial_duplicates import (
    FirestoreIssueStore,
    SimilarIssues,
    SpatialDuplicateFinder,
)
from civic_pulse.utils.geo import geojson_coordinates, haversine_distance

from fakes import FIXED_NOW, FakeIssueStore

ORIGIN = GeoPoint(longitude=73.8077, latitude=18.5074)


class FakeDoc:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeQuery:
    def __init__(self, docs, exc=None):
        self.docs = docs
        self.exc = exc
        self.filters = []
        self.stream_timeout = None

    def where(self, filter=None):
        self.filters.append((filter.field_path, filter.op_string, filter.value))
        return self

    def stream(self, timeout=None):
        self.stream_timeout = timeout
        if self.exc is not None:
            raise self.exc
        return iter(self.docs)


class FakeDB:
    def __init__(self, query):
        self.query = query
        self.collections = []

    def collection(self, name):
        self.collections.append(name)
        return self.query


def _point_doc(doc_id, longitude, latitude, **extra):
    return FakeDoc(doc_id, {"category": "Water Supply",
                            "location": {"type": "Point", "coordinates": [longitude, latitude]}, **extra})


# --- geo helpers ------------------------------------------------------------

def test_haversine_one_degree_latitude():
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111195, rel=1e-3)


def test_haversine_same_point_is_zero():
    assert haversine_distance(18.5, 73.8, 18.5, 73.8) == 0


def test_geojson_coordinates_reads_longitude_first():
    assert geojson_coordinates({"type": "Point", "coordinates": [73.8, 18.5]}) == (73.8, 18.5)


@pytest.mark.parametrize(
    "location",
    [None, {}, {"type": "Polygon", "coordinates": [1, 2]}, {"coordinates": [1]},
     {"coordinates": ["a", "b"]}, {"coordinates": [200, 10]}, "18.5,73.8"],
)
def test_geojson_coordinates_rejects_malformed(location):
    assert geojson_coordinates(location) is None


def test_geopoint_serializes_longitude_first():
    assert ORIGIN.to_geojson() == {"type": "Point", "coordinates": [73.8077, 18.5074]}


# --- finder -----------------------------------------------------------------

def test_finder_passes_defaults_to_store():
    store = FakeIssueStore(records=[{"id": "a"}, {"id": "b"}])
    finder = SpatialDuplicateFinder(store, clock=lambda: FIXED_NOW)

    result = finder.find_similar("Water Supply", ORIGIN)

    assert result == SimilarIssues(count=2, records=[{"id": "a"}, {"id": "b"}])
    assert store.calls == [{
        "category": "Water Supply",
        "point": ORIGIN,
        "max_distance_meters": 5000.0,
        "created_after": FIXED_NOW - timedelta(days=30),
        "limit": 10,
    }]


def test_finder_overrides_per_call():
    store = FakeIssueStore(records=[{"id": str(i)} for i in range(20)])
    finder = SpatialDuplicateFinder(store, clock=lambda: FIXED_NOW)

    result = finder.find_similar("Other", ORIGIN, max_distance_meters=250, since=timedelta(days=7), limit=3)

    assert result.count == 3
    assert store.calls[0]["max_distance_meters"] == 250
    assert store.calls[0]["created_after"] == FIXED_NOW - timedelta(days=7)


def test_finder_caps_records_at_limit_even_if_store_does_not():
    class GreedyStore(FakeIssueStore):
        def find_near(self, *args, **kwargs):
            return [{"id": str(i)} for i in range(25)]

    assert SpatialDuplicateFinder(GreedyStore(), limit=10).count_similar("Other", ORIGIN) == 10


def test_store_failure_counts_as_zero():
    store = FakeIssueStore(exc=TimeoutError("deadline exceeded"))
    result = SpatialDuplicateFinder(store).find_similar("Other", ORIGIN)

    assert result.count == 0
    assert result.available is False


# --- Firestore store ----------------------------------------------------------

def test_firestore_store_filters_by_category_and_recency():
    query = FakeQuery([])
    store = FirestoreIssueStore(db=FakeDB(query), collection="issues", timeout_seconds=2.5)
    cutoff = FIXED_NOW - timedelta(days=30)

    store.find_near("Water Supply", ORIGIN, 5000, cutoff, 10)

    assert query.filters == [("category", "==", "Water Supply"), ("created_at", ">=", cutoff)]
    assert query.stream_timeout == 2.5


def test_firestore_store_keeps_nearest_within_radius():
    docs = [
        _point_doc("far", 73.9500, 18.5074),        # ~15 km east
        _point_doc("near", 73.8080, 18.5080),       # ~70 m
        _point_doc("mid", 73.8077, 18.5300),        # ~2.5 km north
        _point_doc("swapped", 18.5074, 73.8077),    # lat/lon swapped: nowhere near
        FakeDoc("no-location", {"category": "Water Supply"}),
    ]
    store = FirestoreIssueStore(db=FakeDB(FakeQuery(docs)), collection="issues", timeout_seconds=1)

    records = store.find_near("Water Supply", ORIGIN, 5000, FIXED_NOW, 10)

    assert [r["id"] for r in records] == ["near", "mid"]
    assert records[0]["distance_meters"] < records[1]["distance_meters"] <= 5000


def test_firestore_store_respects_limit():
    docs = [_point_doc(f"i{n}", 73.8077 + n * 0.0001, 18.5074) for n in range(15)]
    store = FirestoreIssueStore(db=FakeDB(FakeQuery(docs)), collection="issues", timeout_seconds=1)

    records = store.find_near("Water Supply", ORIGIN, 5000, FIXED_NOW, 10)

    assert [r["id"] for r in records] == [f"i{n}" for n in range(10)]


def test_firestore_failure_is_absorbed_by_finder():
    store = FirestoreIssueStore(db=FakeDB(FakeQuery([], exc=RuntimeError("permission denied"))),
                                collection="issues", timeout_seconds=1)

    assert SpatialDuplicateFinder(store).count_similar("Water Supply", ORIGIN) == 0
