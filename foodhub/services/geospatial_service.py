"""
Merchant search around a customer's location
"""
import logging
from datetime import datetime
from numbers import Real
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session

from foodhub.config import settings
from foodhub.exceptions import ValidationError
from foodhub.models.merchant import Merchant
from foodhub.utils.geo import bounding_box, estimate_delivery_minutes, haversine_distance, validate_coordinates
from foodhub.utils.pagination import page_from_offset, paginate

logger = logging.getLogger(__name__)


class GeospatialService:
    """
    Distance filtering over merchants with known coordinates.

    Every merchant that can match is streamed from the database in batches of
    ``scan_batch_size`` (radius searches are first narrowed by a lat/lon
    bounding box), filtered and sorted in memory, then paginated. Pagination
    metadata therefore describes the filtered set, not the rows loaded.
    """

    def __init__(
        self,
        db: Session,
        earth_radius_meters: float = settings.EARTH_RADIUS_METERS,
        eta_base_minutes: float = settings.ETA_BASE_MINUTES,
        eta_minutes_per_km: float = settings.ETA_MINUTES_PER_KM,
        default_limit: int = settings.GEO_DEFAULT_LIMIT,
        max_limit: int = settings.GEO_MAX_LIMIT,
        scan_batch_size: int = settings.GEO_SCAN_BATCH_SIZE,
    ):
        self.db = db
        self.earth_radius_meters = earth_radius_meters
        self.eta_base_minutes = eta_base_minutes
        self.eta_minutes_per_km = eta_minutes_per_km
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.scan_batch_size = scan_batch_size

    def distance_between(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        return haversine_distance(lat1, lon1, lat2, lon2, earth_radius_meters=self.earth_radius_meters)

    def estimate_delivery_minutes(self, distance_meters: float) -> int:
        return estimate_delivery_minutes(
            distance_meters,
            base_minutes=self.eta_base_minutes,
            minutes_per_km=self.eta_minutes_per_km
        )

    def find_merchants_within_radius(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float,
        limit: Optional[int] = None,
        offset: int = 0,
        include_inactive: bool = False,
    ) -> Dict[str, Any]:
        """Merchants whose distance from the point is at most ``radius_meters``"""
        validate_coordinates(latitude, longitude)
        if isinstance(radius_meters, bool) or not isinstance(radius_meters, Real) or radius_meters < 0:
            raise ValidationError("Radius must be a non-negative number of meters", details={"radius_meters": radius_meters})

        return self._search(
            latitude,
            longitude,
            lambda merchant, distance: distance <= radius_meters,
            limit,
            offset,
            include_inactive,
            box=bounding_box(latitude, longitude, radius_meters, earth_radius_meters=self.earth_radius_meters),
        )

    def find_merchants_in_delivery_range(
        self,
        latitude: float,
        longitude: float,
        limit: Optional[int] = None,
        offset: int = 0,
        include_inactive: bool = False,
    ) -> Dict[str, Any]:
        """Merchants whose own delivery radius reaches the point"""
        validate_coordinates(latitude, longitude)

        return self._search(
            latitude,
            longitude,
            lambda merchant, distance: distance <= (merchant.delivery_radius_meters or 0),
            limit,
            offset,
            include_inactive,
            require_delivery_radius=True,
        )

    def get_performance_metrics(self) -> Dict[str, Any]:
        total_active = self.db.query(Merchant).filter(Merchant.is_active.is_(True)).count()
        located = self.db.query(Merchant).filter(
            Merchant.is_active.is_(True),
            Merchant.latitude.isnot(None),
            Merchant.longitude.isnot(None)
        ).count()
        return {
            "totalActiveMerchants": total_active,
            "locatedActiveMerchants": located,
            "timestamp": datetime.utcnow().isoformat()
        }

    def _search(
        self,
        latitude: float,
        longitude: float,
        keep: Callable[[Merchant, float], bool],
        limit: Optional[int],
        offset: int,
        include_inactive: bool,
        require_delivery_radius: bool = False,
        box: Optional[Tuple[float, float, Optional[float], Optional[float]]] = None,
    ) -> Dict[str, Any]:
        limit, offset = self._validate_window(limit, offset)

        scanned = 0
        matches: List[Tuple[float, Merchant]] = []
        for merchant in self._candidates(include_inactive, require_delivery_radius, box):
            scanned += 1
            distance = self.distance_between(latitude, longitude, merchant.latitude, merchant.longitude)
            if keep(merchant, distance):
                matches.append((distance, merchant))

        matches.sort(key=lambda match: match[0])
        page_items = [self._serialize(merchant, distance) for distance, merchant in matches[offset:offset + limit]]

        logger.debug(
            "Merchant search at (%s, %s): %s candidates, %s matches, returning %s",
            latitude, longitude, scanned, len(matches), len(page_items)
        )

        return {
            "merchants": page_items,
            "totalCount": len(matches),
            "pagination": paginate(page_items, page_from_offset(offset, limit), limit, total=len(matches))
        }

    def _validate_window(self, limit: Optional[int], offset: int) -> Tuple[int, int]:
        if limit is None:
            limit = self.default_limit
        if limit < 1 or limit > self.max_limit:
            raise ValidationError(f"Limit must be between 1 and {self.max_limit}", details={"limit": limit})
        if offset < 0:
            raise ValidationError("Offset cannot be negative", details={"offset": offset})
        return limit, offset

    def _candidates(
        self,
        include_inactive: bool,
        require_delivery_radius: bool,
        box: Optional[Tuple[float, float, Optional[float], Optional[float]]],
    ) -> Iterator[Merchant]:
        query = self.db.query(Merchant).filter(
            Merchant.latitude.isnot(None),
            Merchant.longitude.isnot(None)
        )
        if not include_inactive:
            query = query.filter(Merchant.is_active.is_(True))
        if require_delivery_radius:
            query = query.filter(Merchant.delivery_radius_meters > 0)
        if box is not None:
            min_lat, max_lat, min_lon, max_lon = box
            query = query.filter(Merchant.latitude.between(min_lat, max_lat))
            if min_lon is not None:
                query = query.filter(Merchant.longitude.between(min_lon, max_lon))
        return query.order_by(Merchant.id).yield_per(self.scan_batch_size)

    def _serialize(self, merchant: Merchant, distance: float) -> Dict[str, Any]:
        return {
            "id": merchant.id,
            "vendor_id": merchant.vendor_id,
            "outlet_name": merchant.outlet_name,
            "street_address": merchant.street_address,
            "city": merchant.city,
            "latitude": merchant.latitude,
            "longitude": merchant.longitude,
            "delivery_radius_meters": merchant.delivery_radius_meters,
            "is_active": merchant.is_active,
            "is_accepting_orders": merchant.is_accepting_orders,
            "operational_status": merchant.operational_status,
            "average_rating": float(merchant.average_rating) if merchant.average_rating is not None else None,
            "distance_meters": round(distance, 2),
            "distance_km": round(distance / 1000, 2),
            "estimated_delivery_minutes": self.estimate_delivery_minutes(distance)
        }
