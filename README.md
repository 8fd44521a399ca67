# gpxparaver

Turn GPS tracks and routes stored as GPX into Paraver trace files, so a
journey can be browsed in a trace viewer. Each point becomes one state
record. Its latitude picks the row (thread) and its elevation picks the
colour.

## Installation

    pip install .

## Command line

    gpxparaver <gpx_file> [output_prefix] [--map]

- `output_prefix` defaults to `output`. Any other argument that starts with
  `--` is ignored.
- Without `--map`, the tool writes `<prefix>.prv`, `<prefix>.pcf`,
  `<prefix>.row` and `<prefix>.cfg`. Points follow one another in time at
  fixed steps, and the rows are 100 latitude bands, south at the top.
- With `--map`, it writes `<prefix>_map.prv`, `<prefix>_map.pcf`,
  `<prefix>_map.row` and `<prefix>_map.cfg`, and also `<prefix>.cfg`.
  Longitude runs along the time axis and latitude runs down the rows, north
  at the top, giving a rough map.

When it is done the command lists the files it wrote and prints the
`wxparaver` command line that opens them. It exits with status 1, and a
message on standard error, when no input file is given, when the GPX file
cannot be read or parsed, or when map mode is asked for a file with no
points.

## Library

```python
from gpxparaver.gpx import parse_file, GpxParseError
from gpxparaver.prv import Options, convert

try:
    document = parse_file("ride.gpx")
except GpxParseError as exc:
    print("cannot read GPX:", exc)
else:
    print(document.metadata.name, len(document.tracks), "tracks")
    for point in document.iter_points():
        print(point.latitude, point.longitude, point.elevation)

    convert(document, "ride", Options(num_lat_bands=100, map_mode=False))
```

`gpxparaver.gpx` holds the document model (`GpxDocument`, `Metadata`,
`Track`, `TrackSegment`, `TrackPoint`, `Route`, `RoutePoint`) and the
parsers `parse_file` and `parse_string`. `parse_string` takes GPX text or
bytes already in memory. Both raise `GpxParseError` (a `ValueError`) for a
file that cannot be opened, for malformed XML, and for a document whose root
element is not `gpx`. `GpxDocument.iter_points()` yields every track point,
then every route point.

`gpxparaver.prv.convert(document, output_prefix, options=None)` writes the
`.prv`, `.pcf` and `.row` files. `Options` has these fields:

- `num_lat_bands` (default 100): number of rows (threads).
- `show_elevation` (default `True`): colour records by elevation; when off,
  every record has state 1.
- `connect_points` (default `True`): leave a gap of 50 000 ns after each
  100 000 ns point in the default view.
- `map_mode` (default `False`): write the `_map` files instead.
- `elevation_scale` (default 1.0): accepted, but it does not change the
  output.

In map mode `convert` raises `ValueError` when the document has no points.
Elevations are shown in 20 colour bands that run from green at the lowest
point to red at the highest.

The viewer configuration files can be written on their own with
`gpxparaver.cli.write_cfg(prefix)` and `gpxparaver.cli.write_map_cfg(prefix)`;
each returns the path it wrote.

## What it does not do

- It reads only tracks, routes and the metadata name and description;
  waypoints and other GPX elements are ignored.
- Point times are read into `TrackPoint.timestamp` but not used: trace times
  come from the order of the points, not from when they were recorded.
- It does not display traces itself; a Paraver viewer is needed for that.

## Tests

    pip install .[test]
    pytest