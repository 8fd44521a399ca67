"""Command-line entry point: turn a GPX file into Paraver trace files."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Sequence

from gpxparaver.gpx import GpxParseError, parse_file
from gpxparaver.prv import Options, convert

_PROG = "gpxparaver"
_RULE = "#" * 80

_SELECTED_FUNCTIONS = (
    "window_selected_functions { 14, { {cpu, Active Thd}, {appl, Adding}, "
    "{task, Adding}, {thread, State As Is}, {node, Adding}, {system, "
    "Adding}, {workload, Adding}, {from_obj, All}, {to_obj, All}, "
    "{tag_msg, All}, {size_msg, All}, {bw_msg, All}, {evt_type, "
    "All}, {evt_value, All} } }"
)

_COMPOSE_FUNCTIONS = (
    "window_compose_functions { 9, { {compose_cpu, As Is}, "
    "{compose_appl, As Is}, {compose_task, As Is}, {compose_thread, As "
    "Is}, {compose_node, As Is}, {compose_system, As Is}, "
    "{compose_workload, As Is}, {topcompose1, As Is}, {topcompose2, As "
    "Is} } }"
)


def _render_cfg(description: str, window_name: str, color_mode: bool) -> str:
    lines = [
        "#ParaverCFG",
        "ConfigFile.Version: 3.4",
        "ConfigFile.NumWindows: 1",
        "ConfigFile.BeginDescription",
        description,
        "ConfigFile.EndDescription",
        "",
        _RULE,
        f"< NEW DISPLAYING WINDOW {window_name} >",
        _RULE,
        f"window_name {window_name}",
        "window_type single",
        "window_position_x 100",
        "window_position_y 100",
        "window_width 1200",
        "window_height 800",
        "window_comm_lines_enabled false",
        "window_flags_enabled false",
        "window_noncolor_mode false",
        "window_custom_color_enabled false",
        "window_semantic_scale_min_at_zero false",
        "window_logical_filtered true",
        "window_physical_filtered false",
        "window_intracomms_enabled true",
        "window_intercomms_enabled true",
        "window_comm_fromto true",
        "window_comm_tagsize true",
        "window_comm_typeval true",
        "window_maximum_y 0",
        "window_minimum_y 0",
        "window_compute_y_max true",
        "window_level thread",
        "window_scale_relative 1.000000000000",
        "window_end_time_relative 1.000000000000",
        "window_object appl { 1, { 1 } }",
        "window_begin_time_relative 0.000000000000",
        "window_open true",
        "window_drawmode draw_last",
        "window_drawmode_rows draw_last",
        "window_pixel_size 1",
        "window_labels_to_draw 1",
        "window_object_axis_position 0",
    ]
    if color_mode:
        lines.append("window_color_mode code")
    lines += [_SELECTED_FUNCTIONS, _COMPOSE_FUNCTIONS, "window_filter_module evt_type 0"]
    return "\n".join(lines) + "\n"


def write_cfg(output_prefix: str) -> Path:
    """Write ``<prefix>.cfg`` for the elevation-by-latitude view and return its path."""
    path = Path(output_prefix + ".cfg")
    path.write_text(
        _render_cfg(
            "GPX Route Visualization - Elevation by latitude band",
            "GPX Route Elevation",
            color_mode=False,
        ),
        encoding="utf-8",
    )
    return path


def write_map_cfg(output_prefix: str) -> Path:
    """Write ``<prefix>_map.cfg`` for the map view and return its path."""
    path = Path(output_prefix + "_map.cfg")
    path.write_text(
        _render_cfg(
            "GPX Route Visualization - Map View (lon\u2192X, lat\u2192Y)",
            "GPX Map View",
            color_mode=True,
        ),
        encoding="utf-8",
    )
    return path


def _usage_text() -> str:
    """Return the usage message shown when no input file is given."""
    return (
        f"Usage: {_PROG} <gpx_file> [output_prefix] [--map]\n"
        "Options:\n"
        "  --map  Generate map view (longitude\u2192X-axis, latitude\u2192Y-axis)\n"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the converter; return the process exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write(_usage_text())
        return 1

    input_file, *rest = args
    output_prefix = "output"
    map_mode = False
    for arg in rest:
        if arg == "--map":
            map_mode = True
        elif not arg.startswith("--"):
            output_prefix = arg

    try:
        document = parse_file(input_file)
    except GpxParseError as exc:
        print(f"Error parsing GPX: {exc}", file=sys.stderr)
        return 1

    options = Options(
        num_lat_bands=100,
        show_elevation=True,
        connect_points=True,
        map_mode=map_mode,
    )
    try:
        convert(document, output_prefix, options)
    except (ValueError, OSError) as exc:
        print(f"Error writing trace: {exc}", file=sys.stderr)
        return 1

    if map_mode:
        write_map_cfg(output_prefix)
    write_cfg(output_prefix)

    base = output_prefix + ("_map" if map_mode else "")
    print("Generated Paraver trace files:")
    for extension in (".prv", ".pcf", ".row", ".cfg"):
        print(f"  {base}{extension}")
    print()

    if map_mode:
        print(f"Map view: wxparaver {base}.prv {base}.cfg")
    else:
        print(f"Open with Paraver: wxparaver {base}.prv {base}.cfg")
    return 0


if __name__ == "__main__":
    sys.exit(main())