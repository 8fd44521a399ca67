"""Conversion of GPX documents into Paraver trace files (.prv, .pcf, .row)."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gpxparaver.gpx import GpxDocument

NUM_ELEVATION_STATES = 20
TOTAL_TIME_NS = 1_000_000
POINT_DURATION_NS = 100_000
GAP_DURATION_NS = 50_000
MAP_POINT_DURATION_NS = 1_000
NUM_LON_BUCKETS = 1000
MIN_LON_BUCKET_SIZE = 0.0001


@dataclass
class Options:
    """Settings that control how a GPX document becomes a trace."""

    num_lat_bands: int = 100
    show_elevation: bool = True
    connect_points: bool = True
    elevation_scale: float = 1.0
    map_mode: bool = False


@dataclass
class ElevationBands:
    """Elevation range split into a number of colour bands."""

    min_ele: float = 0.0
    max_ele: float = 1000.0
    num_bands: int = 20


@dataclass
class _TracePoint:
    thread: int
    timestamp: int
    latitude: float
    longitude: float
    elevation: float
    next_timestamp: int = 0


@dataclass(frozen=True)
class _Bounds:
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    ele_min: float
    ele_max: float


def _fraction(index: int, count: int) -> float:
    """Return ``index / (count - 1)`` with IEEE semantics for a zero divisor."""
    denominator = count - 1
    if denominator == 0:
        if index == 0:
            return math.nan
        return math.copysign(math.inf, index)
    return index / denominator


def _normalize(value: float, low: float, high: float) -> float:
    if high <= low:
        return 0.5
    return (value - low) / (high - low)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _clamp01(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _latitude_to_thread(lat: float, lat_min: float, lat_max: float, num_threads: int) -> int:
    t = _clamp01(_normalize(lat, lat_min, lat_max))
    return int(t * (num_threads - 1))


def _elevation_to_state(ele: float, ele_min: float, ele_max: float, num_states: int) -> int:
    t = _clamp01(_normalize(ele, ele_min, ele_max))
    return int(t * (num_states - 1)) + 1


def _compute_bounds(points: list[tuple[float, float, float]]) -> _Bounds:
    lat_min, lat_max = 90.0, -90.0
    lon_min, lon_max = 180.0, -180.0
    for lat, lon, _ in points:
        lat_min = min(lat_min, lat)
        lat_max = max(lat_max, lat)
        lon_min = min(lon_min, lon)
        lon_max = max(lon_max, lon)

    if lat_min == lat_max:
        lat_min -= 0.001
        lat_max += 0.001
    if lon_min == lon_max:
        lon_min -= 0.001
        lon_max += 0.001

    ele_min, ele_max = 0.0, 100.0
    if points:
        elevations = [ele for _, _, ele in points]
        ele_min, ele_max = min(elevations), max(elevations)
        if ele_min == ele_max:
            ele_min -= 10
            ele_max += 10

    return _Bounds(lat_min, lat_max, lon_min, lon_max, ele_min, ele_max)


def _render_pcf(bounds: _Bounds, num_threads: int, num_states: int) -> str:
    lines = [
        "DEFAULT_OPTIONS",
        "",
        "LEVEL               THREAD",
        "UNITS               NANOSEC",
        "LOOK_BACK           100",
        "SPEED               1",
        "FLAG_ICONS          ENABLED",
        f"NUM_OF_STATE_COLORS {num_states}",
        f"YMAX_SCALE          {num_threads}",
        "",
        "",
        "DEFAULT_SEMANTIC",
        "",
        "THREAD_FUNC          State As Is",
        "",
        "",
        "STATES",
    ]
    for i in range(num_states):
        value = _lerp(bounds.ele_min, bounds.ele_max, _fraction(i, num_states))
        lines.append(f"{i + 1}\tElevation: {value:.1f}m")
    lines += ["", "", "STATES_COLOR"]
    for i in range(num_states):
        t = _fraction(i, num_states)
        red = int(255 * t)
        green = int(255 * (1 - t))
        lines.append(f"{i + 1}\t{{{red},{green},128}}")
    lines.append("")
    return "\n".join(lines) + "\n"


def _render_row(bounds: _Bounds, num_threads: int, map_mode: bool) -> str:
    first, last = (
        (bounds.lat_max, bounds.lat_min) if map_mode else (bounds.lat_min, bounds.lat_max)
    )
    lines = [f"Thread: {num_threads}"]
    lines += [
        f"  Thread {i}: lat={_lerp(first, last, _fraction(i, num_threads)):.6f}"
        for i in range(num_threads)
    ]
    return "\n".join(lines) + "\n"


def _render_prv(
    points: list[_TracePoint],
    bounds: _Bounds,
    num_threads: int,
    num_states: int,
    final_time: int,
    show_elevation: bool,
    default_duration: int,
) -> str:
    stamp = time.strftime("%d/%m/%y at %H:%M:%S", time.localtime())
    lines = [f"#Paraver ({stamp}):{final_time}_ns:1({num_threads}):1:1({num_threads}:1)"]
    for pt in points:
        state = (
            _elevation_to_state(pt.elevation, bounds.ele_min, bounds.ele_max, num_states)
            if show_elevation
            else 1
        )
        end_time = (
            pt.next_timestamp
            if pt.next_timestamp > pt.timestamp
            else pt.timestamp + default_duration
        )
        lines.append(f"1:1:1:1:{pt.thread + 1}:{pt.timestamp}:{end_time}:{state}")
    return "\n".join(lines) + "\n"


def _write_trace_files(
    output_prefix: str,
    points: list[_TracePoint],
    bounds: _Bounds,
    num_threads: int,
    final_time: int,
    show_elevation: bool,
    map_mode: bool,
    default_duration: int,
) -> None:
    base = output_prefix + ("_map" if map_mode else "")
    Path(base + ".pcf").write_text(
        _render_pcf(bounds, num_threads, NUM_ELEVATION_STATES)
    )
    Path(base + ".row").write_text(_render_row(bounds, num_threads, map_mode))
    Path(base + ".prv").write_text(
        _render_prv(
            points,
            bounds,
            num_threads,
            NUM_ELEVATION_STATES,
            final_time,
            show_elevation,
            default_duration,
        )
    )


def _link_points(points: list[_TracePoint]) -> None:
    for current, following in zip(points, points[1:]):
        current.next_timestamp = following.timestamp


def _map_points(
    coords: list[tuple[float, float, float]], bounds: _Bounds, num_threads: int
) -> list[_TracePoint]:
    bucket_size = max(
        (bounds.lon_max - bounds.lon_min) / NUM_LON_BUCKETS, MIN_LON_BUCKET_SIZE
    )
    bucket_width = TOTAL_TIME_NS // NUM_LON_BUCKETS
    offsets: dict[int, int] = {}
    points = []
    for lat, lon, ele in coords:
        bucket = int((lon - bounds.lon_min) / bucket_size)
        bucket = max(0, min(NUM_LON_BUCKETS - 1, bucket))
        offset = offsets.get(bucket, 0)
        offsets[bucket] = offset + 1
        thread = num_threads - 1 - _latitude_to_thread(
            lat, bounds.lat_min, bounds.lat_max, num_threads
        )
        points.append(_TracePoint(thread, bucket * bucket_width + offset, lat, lon, ele))
    return points


def convert(
    document: GpxDocument, output_prefix: str, options: Optional[Options] = None
) -> None:
    """Write the Paraver trace files for ``document`` next to ``output_prefix``.

    The default view writes ``<prefix>.prv/.pcf/.row``; map mode writes
    ``<prefix>_map.prv/.pcf/.row``. Map mode needs at least one point.
    """
    options = options or Options()
    coords = [(p.latitude, p.longitude, p.elevation) for p in document.iter_points()]
    bounds = _compute_bounds(coords)
    num_threads = options.num_lat_bands

    if options.map_mode:
        if not coords:
            raise ValueError("map mode needs at least one point")
        points = _map_points(coords, bounds, num_threads)
        _link_points(points)
        points[-1].next_timestamp = points[-1].timestamp + 1000
        final_time = points[-1].next_timestamp + 1000
        _write_trace_files(
            output_prefix,
            points,
            bounds,
            num_threads,
            final_time,
            options.show_elevation,
            True,
            MAP_POINT_DURATION_NS,
        )
        return

    step = POINT_DURATION_NS + (GAP_DURATION_NS if options.connect_points else 0)
    points = [
        _TracePoint(
            _latitude_to_thread(lat, bounds.lat_min, bounds.lat_max, num_threads),
            index * step,
            lat,
            lon,
            ele,
        )
        for index, (lat, lon, ele) in enumerate(coords)
    ]
    _link_points(points)
    final_time = len(points) * step + POINT_DURATION_NS if points else TOTAL_TIME_NS
    _write_trace_files(
        output_prefix,
        points,
        bounds,
        num_threads,
        final_time,
        options.show_elevation,
        False,
        POINT_DURATION_NS,
    )