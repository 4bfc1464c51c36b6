"""
Spatial Duplicate Finder - counts recent same-category issues near a point.

DESIGN PRINCIPLES:
- The count feeds the cluster boost; it is best-effort
- A store failure means "count unknown" and is reported as 0, never raised
- Results are ordered nearest first and capped at the limit, like a 2dsphere $near query
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
import logging

from civic_pulse.core.settings import settings
from civic_pulse.models.issue import GeoPoint
from civic_pulse.utils.firestore_helpers import where_filter
from civic_pulse.utils.geo import geojson_coordinates, haversine_distance

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_METERS = 5000.0
DEFAULT_SINCE = timedelta(days=30)
DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class SimilarIssues:
    count: int
    records: List[Dict] = field(default_factory=list)
    available: bool = True

    @classmethod
    def unknown(cls) -> "SimilarIssues":
        return cls(count=0, records=[], available=False)


class SpatialIssueStore(ABC):
    """
    Read-only view of the issue store with a geospatial lookup.

    Contract:
    - Issues carry `category`, `created_at` and a GeoJSON `location` ([lon, lat])
    - Returns at most `limit` records, nearest first, each with `id` and `distance_meters`
    - MAY raise; the finder turns failures into an unknown count
    """

    @abstractmethod
    def find_near(
        self,
        category: str,
        point: GeoPoint,
        max_distance_meters: float,
        created_after: datetime,
        limit: int,
    ) -> List[Dict]:
        raise NotImplementedError


class FirestoreIssueStore(SpatialIssueStore):
    """
    Firestore-backed store.

    Firestore has no $near operator, so the query narrows by category and
    recency and the distance filter runs here.
    """

    def __init__(self, db=None, collection: Optional[str] = None, timeout_seconds: Optional[float] = None):
        self._db = db
        self.collection = collection or settings.ISSUES_COLLECTION
        self.timeout_seconds = timeout_seconds or settings.SPATIAL_QUERY_TIMEOUT_SECONDS

    @property
    def db(self):
        if self._db is None:
            from civic_pulse.config.firebase import get_db
            self._db = get_db()
        return self._db

    def find_near(
        self,
        category: str,
        point: GeoPoint,
        max_distance_meters: float,
        created_after: datetime,
        limit: int,
    ) -> List[Dict]:
        query = where_filter(self.db.collection(self.collection), "category", "==", category)
        query = where_filter(query, "created_at", ">=", created_after)

        nearby = []
        for doc in query.stream(timeout=self.timeout_seconds):
            data = doc.to_dict() or {}
            coordinates = geojson_coordinates(data.get("location"))
            if coordinates is None:
                continue

            longitude, latitude = coordinates
            distance = haversine_distance(point.latitude, point.longitude, latitude, longitude)
            if distance <= max_distance_meters:
                nearby.append({**data, "id": doc.id, "distance_meters": round(distance, 1)})

        nearby.sort(key=lambda record: record["distance_meters"])
        return nearby[:limit]


class SpatialDuplicateFinder:
    """
    Finds existing issues of the same category within a radius and time window.
    """

    def __init__(
        self,
        store: SpatialIssueStore,
        max_distance_meters: float = DEFAULT_MAX_DISTANCE_METERS,
        since: timedelta = DEFAULT_SINCE,
        limit: int = DEFAULT_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.max_distance_meters = max_distance_meters
        self.since = since
        self.limit = limit
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def find_similar(
        self,
        category: str,
        point: GeoPoint,
        max_distance_meters: Optional[float] = None,
        since: Optional[timedelta] = None,
        limit: Optional[int] = None,
    ) -> SimilarIssues:
        """
        Look up similar issues near a point.

        Returns SimilarIssues.unknown() (count 0) if the store fails.
        """
        max_distance_meters = self.max_distance_meters if max_distance_meters is None else max_distance_meters
        since = self.since if since is None else since
        limit = self.limit if limit is None else limit
        created_after = self.clock() - since

        try:
            records = self.store.find_near(
                category=category,
                point=point,
                max_distance_meters=max_distance_meters,
                created_after=created_after,
                limit=limit,
            )
        except Exception as e:
            logger.warning(f"⚠️ Similar issue lookup failed, treating count as 0: {e}")
            return SimilarIssues.unknown()

        records = list(records)[:limit]
        logger.info(
            f"Found {len(records)} similar '{category}' issue(s) within {max_distance_meters:.0f}m "
            f"of ({point.longitude}, {point.latitude})"
        )
        return SimilarIssues(count=len(records), records=records)

    def count_similar(self, category: str, point: GeoPoint) -> int:
        return self.find_similar(category, point).count


_finder: Optional[SpatialDuplicateFinder] = None


def get_spatial_duplicate_finder() -> SpatialDuplicateFinder:
    """
    Get or create the Firestore-backed finder configured from settings.
    """
    global _finder
    if _finder is None:
        _finder = SpatialDuplicateFinder(
            store=FirestoreIssueStore(),
            max_distance_meters=settings.SIMILAR_ISSUES_RADIUS_METERS,
            since=timedelta(days=settings.SIMILAR_ISSUES_WINDOW_DAYS),
            limit=settings.SIMILAR_ISSUES_LIMIT,
        )
    return _finder
