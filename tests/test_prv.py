from pathlib import Path

import pytest

from gpxparaver.gpx import GpxDocument, Track, TrackPoint, TrackSegment, parse_string
from gpxparaver.prv import ElevationBands, Options, convert

MINIMAL_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="gpx2prv_test" xmlns="http://www.topografix.com/GPX/1/1">
  <metadata>
    <name>Minimal Track</name>
    <desc>A simple track for testing</desc>
  </metadata>
  <trk>
    <name>Test Track</name>
    <trkseg>
      <trkpt lat="40.0" lon="-74.0"><ele>100.0</ele><time>2024-01-01T10:00:00Z</time></trkpt>
      <trkpt lat="40.001" lon="-74.001"><ele>150.0</ele><time>2024-01-01T10:01:00Z</time></trkpt>
      <trkpt lat="40.002" lon="-74.002"><ele>200.0</ele><time>2024-01-01T10:02:00Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

ELEVATION_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="gpx2prv_test">
  <trk>
    <name>Elevation Track</name>
    <trkseg>
      <trkpt lat="45.0" lon="7.0"><ele>0.0</ele></trkpt>
      <trkpt lat="45.1" lon="7.1"><ele>500.0</ele></trkpt>
      <trkpt lat="45.2" lon="7.2"><ele>1000.0</ele></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

MULTI_TRACK_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="gpx2prv_test">
  <trk><name>Track A</name><trkseg>
    <trkpt lat="10.0" lon="20.0"><ele>5.0</ele></trkpt>
    <trkpt lat="10.1" lon="20.1"><ele>6.0</ele></trkpt>
  </trkseg></trk>
  <trk><name>Track B</name><trkseg>
    <trkpt lat="11.0" lon="21.0"><ele>7.0</ele></trkpt>
    <trkpt lat="11.1" lon="21.1"><ele>8.0</ele></trkpt>
  </trkseg></trk>
</gpx>
"""

MULTI_SEGMENT_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="gpx2prv_test">
  <trk><name>Segmented</name>
    <trkseg>
      <trkpt lat="50.0" lon="8.0"><ele>10.0</ele></trkpt>
      <trkpt lat="50.1" lon="8.1"><ele>20.0</ele></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="50.2" lon="8.2"><ele>30.0</ele></trkpt>
      <trkpt lat="50.3" lon="8.3"><ele>40.0</ele></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

ROUTE_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="gpx2prv_test">
  <rte><name>Test Route</name>
    <rtept lat="35.0" lon="139.0"><ele>200.0</ele></rtept>
    <rtept lat="35.1" lon="139.1"><ele>250.0</ele></rtept>
  </rte>
</gpx>
"""

SINGLE_POINT_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="gpx2prv_test">
  <trk><name>Single</name><trkseg>
    <trkpt lat="30.0" lon="10.0"><ele>42.0</ele></trkpt>
  </trkseg></trk>
</gpx>
"""


@pytest.fixture
def prefix(tmp_path):
    return str(tmp_path / "test_output")


def _lines(path):
    return Path(path).read_text().splitlines()


def _state_records(path):
    return [line for line in _lines(path) if line.startswith("1") and ":" in line]


def _parsed_records(path):
    return [tuple(int(f) for f in line.split(":")) for line in _lines(path)[1:] if line]


def _doc(points):
    return GpxDocument(
        version="1.1",
        creator="test",
        tracks=[Track(segments=[TrackSegment(points=[TrackPoint(*p) for p in points])])],
    )


def test_convert_minimal_track(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options(num_lat_bands=100, show_elevation=True))
    header = _lines(prefix + ".prv")[0]
    assert "#Paraver" in header
    assert ":1(" in header


def test_convert_track_creates_row(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options(num_lat_bands=100))
    assert sum("Thread " in line for line in _lines(prefix + ".row")) == 100


def test_convert_creates_pcf(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options())
    assert "STATES" in _lines(prefix + ".pcf")


def test_convert_elevation_color_bands(prefix):
    convert(parse_string(ELEVATION_GPX), prefix, Options(show_elevation=True))
    content = Path(prefix + ".pcf").read_text()
    assert "Elevation: 0.0m" in content
    assert "Elevation: 1000.0m" in content


def test_convert_multiple_tracks(prefix):
    document = parse_string(MULTI_TRACK_GPX)
    assert len(document.tracks) == 2
    convert(document, prefix, Options())
    assert len(_state_records(prefix + ".prv")) == 4


def test_convert_empty_gpx(prefix):
    convert(GpxDocument(version="1.1", creator="test"), prefix, Options())
    lines = _lines(prefix + ".prv")
    assert "#Paraver" in lines[0]
    assert ":1000000_ns:" in lines[0]
    assert len(lines) == 1


def test_convert_single_point(prefix):
    convert(parse_string(SINGLE_POINT_GPX), prefix, Options())
    records = _state_records(prefix + ".prv")
    assert records == ["1:1:1:1:50:0:100000:10"]
    assert ":250000_ns:" in _lines(prefix + ".prv")[0]


def test_convert_multi_segment_track(prefix):
    convert(parse_string(MULTI_SEGMENT_GPX), prefix, Options())
    assert len(_state_records(prefix + ".prv")) == 4


def test_prv_header_format(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options(num_lat_bands=50))
    header = _lines(prefix + ".prv")[0]
    assert ":1(50):" in header
    assert header.endswith(":1(50):1:1(50:1)")


def test_row_contains_latitude_info(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options())
    assert "lat=" in Path(prefix + ".row").read_text()


def test_route_conversion(prefix):
    convert(parse_string(ROUTE_GPX), prefix, Options())
    assert len(_state_records(prefix + ".prv")) == 2


def test_pcf_elevation_values(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options(show_elevation=True))
    assert sum("Elevation:" in line for line in _lines(prefix + ".pcf")) == 20


def test_pcf_states_and_colors(prefix):
    convert(_doc([(40.0, 1.0, 100.0), (41.0, 2.0, 200.0)]), prefix, Options())
    lines = _lines(prefix + ".pcf")
    assert "1\tElevation: 100.0m" in lines
    assert "20\tElevation: 200.0m" in lines
    assert "1\t{0,255,128}" in lines
    assert "20\t{255,0,128}" in lines
    assert "NUM_OF_STATE_COLORS 20" in lines
    assert "YMAX_SCALE          100" in lines


def test_default_records_and_final_time(prefix):
    convert(_doc([(40.0, 1.0, 100.0), (41.0, 2.0, 200.0)]), prefix, Options())
    lines = _lines(prefix + ".prv")
    assert ":400000_ns:1(100):1:1(100:1)" in lines[0]
    assert lines[1:] == [
        "1:1:1:1:1:0:150000:1",
        "1:1:1:1:100:150000:250000:20",
    ]


def test_without_gap_between_points(prefix):
    options = Options(connect_points=False)
    convert(_doc([(40.0, 1.0, 100.0), (41.0, 2.0, 200.0)]), prefix, options)
    lines = _lines(prefix + ".prv")
    assert ":300000_ns:" in lines[0]
    assert lines[1:] == [
        "1:1:1:1:1:0:100000:1",
        "1:1:1:1:100:100000:200000:20",
    ]


def test_hide_elevation_uses_single_state(prefix):
    options = Options(show_elevation=False)
    convert(_doc([(40.0, 1.0, 100.0), (41.0, 2.0, 200.0)]), prefix, options)
    assert {record[-1] for record in _parsed_records(prefix + ".prv")} == {1}


def test_row_latitude_order(prefix):
    convert(_doc([(40.0, 1.0, 100.0), (41.0, 2.0, 200.0)]), prefix, Options())
    lines = _lines(prefix + ".row")
    assert lines[0] == "Thread: 100"
    assert lines[1] == "  Thread 0: lat=40.000000"
    assert lines[-1] == "  Thread 99: lat=41.000000"


def test_map_mode_creates_map_files(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options(map_mode=True))
    for ext in (".prv", ".pcf", ".row"):
        assert Path(prefix + "_map" + ext).is_file()


def test_map_mode_does_not_create_default_files(prefix):
    convert(parse_string(MINIMAL_GPX), prefix, Options(map_mode=True))
    for ext in (".prv", ".pcf", ".row"):
        assert not Path(prefix + ext).exists()


def test_map_mode_row_contains_latitude_info(prefix):
    convert(parse_string(ELEVATION_GPX), prefix, Options(map_mode=True))
    assert "lat=" in Path(prefix + "_map.row").read_text()


def test_map_mode_row_is_reversed(prefix):
    convert(_doc([(40.0, 1.0, 100.0), (41.0, 2.0, 200.0)]), prefix, Options(map_mode=True))
    lines = _lines(prefix + "_map.row")
    assert lines[1] == "  Thread 0: lat=41.000000"
    assert lines[-1] == "  Thread 99: lat=40.000000"


def test_map_mode_segments_visible(prefix):
    doc = _doc([(41.0, 0.9, 100.0), (41.1, 0.95, 200.0), (41.2, 1.0, 300.0)])
    convert(doc, prefix, Options(map_mode=True, num_lat_bands=10))
    records = _parsed_records(prefix + "_map.prv")
    assert len(records) == 3
    for record in records:
        assert record[5] < record[6]


def test_map_mode_no_backward_segments(prefix):
    doc = _doc([(41.0, 1.0, 100.0), (41.1, 0.5, 200.0), (41.2, 0.1, 300.0)])
    convert(doc, prefix, Options(map_mode=True, num_lat_bands=10))
    records = _parsed_records(prefix + "_map.prv")
    assert len(records) == 3
    for record in records:
        assert record[5] < record[6]


def test_map_mode_threads_put_north_on_top(prefix):
    doc = _doc([(41.0, 0.9, 100.0), (41.1, 0.95, 200.0), (41.2, 1.0, 300.0)])
    convert(doc, prefix, Options(map_mode=True, num_lat_bands=10))
    records = _parsed_records(prefix + "_map.prv")
    assert records[0][4] == 10
    assert records[-1][4] == 1
    assert [record[-1] for record in records] == [1, 10, 20]


def test_map_mode_requires_points(prefix):
    with pytest.raises(ValueError):
        convert(GpxDocument(), prefix, Options(map_mode=True))


def test_option_defaults():
    options = Options()
    bands = ElevationBands()
    assert (options.num_lat_bands, options.show_elevation, options.connect_points) == (
        100,
        True,
        True,
    )
    assert (options.elevation_scale, options.map_mode) == (1.0, False)
    assert (bands.min_ele, bands.max_ele, bands.num_bands) == (0.0, 1000.0, 20)