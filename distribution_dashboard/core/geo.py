# distribution_dashboard/core/geo.py
import math
from typing import Dict, Optional

from distribution_dashboard.utils.math_utils import ceil_int

EARTH_RADIUS_KM = 6371.0
DEFAULT_SPEED_KMH = 30.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great-circle distance between two coordinates.

    Malformed coordinates (NaN) propagate as NaN; callers must guard.

    Args:
        lat1: Latitude of the first point in degrees
        lon1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lon2: Longitude of the second point in degrees

    Returns:
        Distance in kilometres
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2 +
        math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) *
        math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def estimate_eta_minutes(distance_km: float, speed_kmh: float = DEFAULT_SPEED_KMH) -> Optional[int]:
    """Estimate delivery time at a fixed average speed.

    This is a display approximation, not a routing computation.

    Args:
        distance_km: Distance in kilometres
        speed_kmh: Average speed in km/h

    Returns:
        Minutes, rounded up, or None when the distance is not finite
    """
    if speed_kmh <= 0:
        raise ValueError(f"Average speed must be positive, got {speed_kmh}")

    if not math.isfinite(distance_km):
        return None

    return ceil_int(distance_km / speed_kmh * 60)


def delivery_info(warehouse, retailer, speed_kmh: float = DEFAULT_SPEED_KMH) -> Optional[Dict]:
    """Distance and ETA from a warehouse to a retailer.

    Args:
        warehouse: Warehouse record
        retailer: Retailer record, or None if unknown

    Returns:
        Dictionary with distance and ETA, or None when the retailer is unknown
        or either side has no coordinates. Both values are None when a
        coordinate is not a finite number.
    """
    if retailer is None:
        return None

    coordinates = (warehouse.latitude, warehouse.longitude, retailer.latitude, retailer.longitude)
    if any(value is None for value in coordinates):
        return None

    distance = haversine_distance(*(float(value) for value in coordinates))

    return {
        'retailer_id': retailer.id,
        'shop_name': retailer.shop_name,
        'address': retailer.address,
        'distance_km': round(distance, 1) if math.isfinite(distance) else None,
        'estimated_minutes': estimate_eta_minutes(distance, speed_kmh)
    }


def within_coverage(warehouse, retailer) -> bool:
    """Check whether a retailer lies inside the warehouse coverage radius."""
    if warehouse.coverage_radius_km is None or retailer is None:
        return False

    coordinates = (warehouse.latitude, warehouse.longitude, retailer.latitude, retailer.longitude)
    if any(value is None for value in coordinates):
        return False

    distance = haversine_distance(*(float(value) for value in coordinates))
    return distance <= warehouse.coverage_radius_km
