"""GPX document model and parser."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union

_ASCII_SPACE = " \t\n\r\v\f"
_LEADING_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class GpxParseError(ValueError):
    """Raised when a GPX document cannot be read or parsed."""


@dataclass
class TrackPoint:
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: float = 0.0
    timestamp: str = ""


@dataclass
class TrackSegment:
    points: list[TrackPoint] = field(default_factory=list)


@dataclass
class Track:
    name: str = ""
    segments: list[TrackSegment] = field(default_factory=list)


@dataclass
class RoutePoint:
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: float = 0.0


@dataclass
class Route:
    name: str = ""
    points: list[RoutePoint] = field(default_factory=list)


@dataclass
class Metadata:
    name: str = ""
    description: str = ""


@dataclass
class GpxDocument:
    version: str = ""
    creator: str = ""
    metadata: Metadata = field(default_factory=Metadata)
    tracks: list[Track] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)

    def iter_points(self) -> Iterator[Union[TrackPoint, RoutePoint]]:
        """Yield every track point, then every route point, in document order."""
        for track in self.tracks:
            for segment in track.segments:
                yield from segment.points
        for route in self.routes:
            yield from route.points


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1] if tag.startswith("{") else tag


def _children(node: ET.Element, name: str) -> Iterator[ET.Element]:
    return (child for child in node if _local_name(child.tag) == name)


def _child(node: ET.Element, name: str) -> Optional[ET.Element]:
    return next(_children(node, name), None)


def _child_text(node: ET.Element, name: str) -> str:
    child = _child(node, name)
    if child is None or child.text is None:
        return ""
    return child.text


def _to_float(text: str) -> float:
    """Parse the leading number of ``text``; 0.0 when there is none."""
    match = _LEADING_FLOAT.match(text.strip(_ASCII_SPACE))
    return float(match.group(0)) if match else 0.0


def _attribute(node: ET.Element, name: str) -> Optional[str]:
    for key, value in node.attrib.items():
        if _local_name(key) == name:
            return value
    return None


def _float_attribute(node: ET.Element, name: str) -> float:
    value = _attribute(node, name)
    return _to_float(value) if value is not None else 0.0


def _elevation(node: ET.Element) -> float:
    text = _child_text(node, "ele")
    return _to_float(text) if text else 0.0


def _trimmed(node: ET.Element, name: str) -> str:
    return _child_text(node, name).strip(_ASCII_SPACE)


def _parse_track(node: ET.Element) -> Track:
    segments = [
        TrackSegment(
            points=[
                TrackPoint(
                    latitude=_float_attribute(pt, "lat"),
                    longitude=_float_attribute(pt, "lon"),
                    elevation=_elevation(pt),
                    timestamp=_trimmed(pt, "time"),
                )
                for pt in _children(seg, "trkpt")
            ]
        )
        for seg in _children(node, "trkseg")
    ]
    return Track(name=_trimmed(node, "name"), segments=segments)


def _parse_route(node: ET.Element) -> Route:
    points = [
        RoutePoint(
            latitude=_float_attribute(pt, "lat"),
            longitude=_float_attribute(pt, "lon"),
            elevation=_elevation(pt),
        )
        for pt in _children(node, "rtept")
    ]
    return Route(name=_trimmed(node, "name"), points=points)


def parse_string(content: Union[str, bytes]) -> GpxDocument:
    """Parse GPX text into a :class:`GpxDocument`."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise GpxParseError(str(exc)) from exc

    if _local_name(root.tag) != "gpx":
        raise GpxParseError("Not a valid GPX file")

    document = GpxDocument(
        version=_attribute(root, "version") or "",
        creator=_attribute(root, "creator") or "",
    )

    metadata_node = _child(root, "metadata")
    if metadata_node is not None:
        document.metadata = Metadata(
            name=_trimmed(metadata_node, "name"),
            description=_trimmed(metadata_node, "desc"),
        )

    document.tracks = [_parse_track(node) for node in _children(root, "trk")]
    document.routes = [_parse_route(node) for node in _children(root, "rte")]
    return document


def parse_file(filepath: Union[str, Path]) -> GpxDocument:
    """Read and parse a GPX file."""
    try:
        content = Path(filepath).read_bytes()
    except OSError as exc:
        raise GpxParseError(f"Failed to open file: {filepath}") from exc
    return parse_string(content)