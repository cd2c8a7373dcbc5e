# distribution_dashboard/core/charts.py
"""Chart geometry for the dashboard series.

Bar heights are percentages of the bar area, donut slices are SVG annulus
paths in a 200x200 canvas, line charts live in a 100x100 viewBox and map
markers are percentages of the map canvas.
"""
import math
from typing import Dict, List, Optional, Sequence

import numpy as np

DEFAULT_BAR_COLOR = '#3b82f6'
DEFAULT_CATEGORY_COLOR = '#6b7280'

CATEGORY_COLORS = {
    'LED Bulbs': '#3b82f6',
    'LED Tube Lights': '#10b981',
    'LED Panel Lights': '#f59e0b',
    'LED Street Lights': '#ef4444',
    'Decorative Lights': '#8b5cf6'
}

MARKER_COLORS = {
    'warehouse': '#3b82f6',
    'retailer': '#10b981',
    'delivery': '#f97316'
}
DEFAULT_MARKER_COLOR = '#6366f1'

# Donut canvas
DONUT_CENTER = (100.0, 100.0)
DONUT_OUTER_RADIUS = 80.0
DONUT_INNER_RADIUS = 50.0
DONUT_START_ANGLE = -90.0
FULL_CIRCLE_TOLERANCE = 1e-9

# Line chart vertical band: values occupy y in [20, 100]
LINE_BASELINE = 100.0
LINE_BAND = 80.0

# Map bounds tuned for Kerala
MAP_MIN_LNG = 75.0
MAP_LNG_SPAN = 2.0
MAP_MAX_LAT = 11.5
MAP_LAT_SPAN = 3.5


def _fmt(value: float) -> str:
    """Compact number for SVG path data."""
    return format(round(float(value), 3), 'g')


def _values(series: Sequence[Dict]) -> np.ndarray:
    return np.asarray([item['value'] or 0 for item in series], dtype=float)


def bar_chart(series: Sequence[Dict], default_color: str = DEFAULT_BAR_COLOR) -> List[Dict]:
    """Bar heights as a percentage of the largest value.

    When every value is zero all bars get height 0.

    Args:
        series: List of {'label', 'value', optional 'color'} dictionaries
        default_color: Colour for items without one

    Returns:
        List of {'label', 'value', 'height', 'color'} dictionaries
    """
    if not series:
        return []

    values = _values(series)
    peak = values.max()
    if peak > 0:
        heights = values / peak * 100.0
    else:
        heights = np.zeros_like(values)

    return [
        {
            'label': item['label'],
            'value': item['value'],
            'height': float(height),
            'color': item.get('color') or default_color
        }
        for item, height in zip(series, heights)
    ]


def _point(radius: float, angle: float) -> str:
    cx, cy = DONUT_CENTER
    rad = math.radians(angle)
    return f"{_fmt(cx + radius * math.cos(rad))} {_fmt(cy + radius * math.sin(rad))}"


def _ring_path(start_angle: float) -> str:
    """Full annulus as two half-arcs per ring; a single arc cannot close on itself."""
    mid_angle = start_angle + 180.0
    outer = _fmt(DONUT_OUTER_RADIUS)
    inner = _fmt(DONUT_INNER_RADIUS)

    return ' '.join([
        f"M {_point(DONUT_OUTER_RADIUS, start_angle)}",
        f"A {outer} {outer} 0 1 1 {_point(DONUT_OUTER_RADIUS, mid_angle)}",
        f"A {outer} {outer} 0 1 1 {_point(DONUT_OUTER_RADIUS, start_angle)}",
        f"L {_point(DONUT_INNER_RADIUS, start_angle)}",
        f"A {inner} {inner} 0 1 0 {_point(DONUT_INNER_RADIUS, mid_angle)}",
        f"A {inner} {inner} 0 1 0 {_point(DONUT_INNER_RADIUS, start_angle)}",
        'Z'
    ])


def _annulus_path(start_angle: float, end_angle: float) -> str:
    if end_angle - start_angle >= 360.0 - FULL_CIRCLE_TOLERANCE:
        return _ring_path(start_angle)

    large_arc = 1 if end_angle - start_angle > 180 else 0
    outer = _fmt(DONUT_OUTER_RADIUS)
    inner = _fmt(DONUT_INNER_RADIUS)

    return ' '.join([
        f"M {_point(DONUT_OUTER_RADIUS, start_angle)}",
        f"A {outer} {outer} 0 {large_arc} 1 {_point(DONUT_OUTER_RADIUS, end_angle)}",
        f"L {_point(DONUT_INNER_RADIUS, end_angle)}",
        f"A {inner} {inner} 0 {large_arc} 0 {_point(DONUT_INNER_RADIUS, start_angle)}",
        'Z'
    ])


def donut_chart(series: Sequence[Dict], colors: Optional[Dict[str, str]] = None) -> List[Dict]:
    """Donut slices laid out clockwise from the top (-90 degrees).

    A zero total produces no slices.

    Args:
        series: List of {'label', 'value', optional 'color'} dictionaries
        colors: Optional label to colour mapping used when an item has no colour

    Returns:
        List of {'label', 'value', 'color', 'start_angle', 'end_angle',
        'span', 'percentage', 'path'} dictionaries
    """
    if not series:
        return []

    values = _values(series)
    total = values.sum()
    if total <= 0:
        return []

    colors = colors or {}
    spans = values / total * 360.0
    starts = DONUT_START_ANGLE + np.concatenate(([0.0], np.cumsum(spans)[:-1]))

    slices = []
    for item, value, start, span in zip(series, values, starts, spans):
        start = float(start)
        end = start + float(span)
        slices.append({
            'label': item['label'],
            'value': item['value'],
            'color': item.get('color') or colors.get(item['label'], DEFAULT_CATEGORY_COLOR),
            'start_angle': start,
            'end_angle': end,
            'span': float(span),
            'percentage': f"{value / total * 100:.1f}",
            'path': _annulus_path(start, end)
        })

    return slices


def line_chart(series: Sequence[Dict]) -> Optional[Dict]:
    """Line chart points normalised into the 20-100 vertical band.

    The lowest value sits on the baseline (y = 100) and the highest at
    y = 20. A flat series is drawn across the middle of the band (y = 60)
    and a single point sits at x = 0.

    Args:
        series: List of {'label', 'value'} dictionaries

    Returns:
        Dictionary with points, line path and area path, or None for an
        empty series
    """
    if not series:
        return None

    values = _values(series)
    low = values.min()
    high = values.max()
    value_range = high - low

    if value_range > 0:
        normalized = (values - low) / value_range
    else:
        normalized = np.full_like(values, 0.5)

    count = len(values)
    if count > 1:
        xs = np.arange(count) / (count - 1) * 100.0
    else:
        xs = np.zeros(1)

    ys = LINE_BASELINE - normalized * LINE_BAND

    points = [
        {'label': item['label'], 'value': item['value'], 'x': float(x), 'y': float(y)}
        for item, x, y in zip(series, xs, ys)
    ]

    path = ' '.join(
        f"{'M' if index == 0 else 'L'} {_fmt(point['x'])} {_fmt(point['y'])}"
        for index, point in enumerate(points)
    )
    area = f"{path} L {_fmt(points[-1]['x'])} {_fmt(LINE_BASELINE)} L 0 {_fmt(LINE_BASELINE)} Z"

    return {
        'min': float(low),
        'max': float(high),
        'points': points,
        'path': path,
        'area_path': area
    }


def project_location(latitude: float, longitude: float) -> Dict[str, float]:
    """Place a coordinate on the map canvas.

    A fixed linear mapping for lng in [75, 77] and lat in [8, 11.5]; points
    outside the region fall outside 0-100.

    Returns:
        Dictionary with x and y as percentages of the canvas
    """
    return {
        'x': (longitude - MAP_MIN_LNG) / MAP_LNG_SPAN * 100.0,
        'y': (MAP_MAX_LAT - latitude) / MAP_LAT_SPAN * 100.0
    }


def map_marker(latitude: float, longitude: float, label: str, marker_type: Optional[str] = None) -> Dict:
    """Map marker with projected position and type colour."""
    marker = {
        'label': label,
        'type': marker_type,
        'lat': float(latitude),
        'lng': float(longitude),
        'color': MARKER_COLORS.get(marker_type, DEFAULT_MARKER_COLOR)
    }
    marker.update(project_location(float(latitude), float(longitude)))
    return marker


def warehouse_markers(warehouses: Sequence, label_attr: str = 'location') -> List[Dict]:
    """Markers for warehouses with coordinates."""
    return [
        map_marker(warehouse.latitude, warehouse.longitude, getattr(warehouse, label_attr), 'warehouse')
        for warehouse in warehouses
        if warehouse.latitude is not None and warehouse.longitude is not None
    ]


def retailer_markers(retailers: Sequence) -> List[Dict]:
    """Markers for retailers with coordinates."""
    return [
        map_marker(retailer.latitude, retailer.longitude, retailer.shop_name, 'retailer')
        for retailer in retailers
        if retailer.latitude is not None and retailer.longitude is not None
    ]


def with_category_colors(series: Sequence[Dict]) -> List[Dict]:
    """Attach category colours to a stock-by-category series."""
    return [
        dict(item, color=CATEGORY_COLORS.get(item['label'], DEFAULT_CATEGORY_COLOR))
        for item in series
    ]
