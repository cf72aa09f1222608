"""
PV single line diagram generator.

Reads a system description (inverters -> DC isolators -> PV strings) from JSON
or YAML, lays it out, routes the wiring and writes an SVG document, an HTML
page embedding the SVG, or an HTML page drawing the diagram on a <canvas>.

Usage:
    sld convert system.json diagram.html
    sld convert system.yaml diagram.svg --style grid --title "Site A"
    sld stats system.json
    sld check system.json --style grid
"""

# Standard library imports
import argparse
import json
import logging
import pathlib
import sys
from typing import Optional

# Third-party imports
import yaml

# Local application/library specific imports
from canvas_renderer import CanvasRenderer
from config import ConfigError, LayoutConfig, LayoutStyle, load_config
from layout import LayoutResult, compute_layout
from layout_checks import LayoutError, validate_layout
from pv_system import (
    SystemDescription,
    SystemShapeError,
    SystemStats,
    get_system_stats,
    load_system,
)
from renderer import DEFAULT_TITLE, Renderer
from svg_renderer import SvgRenderer

logger = logging.getLogger(__name__)

# --- Constants ---
OUTPUT_FORMATS = ("svg", "html", "canvas")
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


# --- Pipeline ---
def infer_format(output_path) -> str:
    """Output format implied by a file name: .svg gives svg, anything else html."""
    if pathlib.Path(output_path).suffix.lower() == ".svg":
        return "svg"
    return "html"


def make_renderer(output_format: str, config: LayoutConfig) -> Renderer:
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Unknown output format '{output_format}' "
            f"(expected one of: {', '.join(OUTPUT_FORMATS)})"
        )
    renderer_class = CanvasRenderer if output_format == "canvas" else SvgRenderer
    return renderer_class(font_size=config.font_size, line_thickness=config.line_thickness)


def build_diagram(
    system: SystemDescription, config: Optional[LayoutConfig] = None
) -> LayoutResult:
    """Lay out a system and check the result against the diagram invariants."""
    if config is None:
        config = LayoutConfig()
    result = compute_layout(system, config)
    validate_layout(result, config.margin)
    logger.info(
        "Laid out %d components and %d connections on a %gx%g canvas",
        len(result.components),
        len(result.connections),
        result.width,
        result.height,
    )
    return result


def render_document(
    result: LayoutResult,
    output_format: str = "html",
    config: Optional[LayoutConfig] = None,
    title: str = DEFAULT_TITLE,
) -> str:
    """Render a layout as an SVG document or as an HTML page (svg or canvas)."""
    if config is None:
        config = LayoutConfig()
    renderer = make_renderer(output_format, config)
    if output_format == "svg":
        return renderer.render(result, title)
    return renderer.render_html(result, title)


def convert_file(
    input_path,
    output_path,
    output_format: Optional[str] = None,
    config: Optional[LayoutConfig] = None,
    title: str = DEFAULT_TITLE,
) -> SystemStats:
    """Read a system file, draw its diagram to output_path and return its statistics."""
    if output_format is None:
        output_format = infer_format(output_path)
    system = load_system(input_path)
    result = build_diagram(system, config)
    document = render_document(result, output_format, config, title)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(document)
    logger.info("Wrote %s diagram to %s", output_format, output_path)
    return get_system_stats(system)


# --- Command line ---
def build_config(args: argparse.Namespace) -> LayoutConfig:
    """Drawing parameters from an optional YAML file plus command line overrides."""
    config = load_config(args.config) if args.config else LayoutConfig()
    return config.with_overrides(
        layout_style=args.style,
        canvas_min_width=getattr(args, "width", None),
        canvas_min_height=getattr(args, "height", None),
        margin=getattr(args, "margin", None),
        font_size=getattr(args, "font_size", None),
    )


def print_stats(stats: SystemStats, indent: str = "   ") -> None:
    print(f"{indent}Inverters: {stats.inverters}")
    print(f"{indent}Isolators: {stats.isolators}")
    print(f"{indent}PV Strings: {stats.pv_strings}")
    print(f"{indent}Total Panels: {stats.total_panels}")


def cmd_convert(args: argparse.Namespace) -> int:
    config = build_config(args)
    print(f"Converting: {args.input} -> {args.output}")
    stats = convert_file(args.input, args.output, args.format, config, args.title)
    print(f"Single line diagram generated: {args.output}")
    print("\nSystem Statistics:")
    print_stats(stats)
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    stats = get_system_stats(load_system(args.input))
    print(f"System Statistics for: {args.input}")
    print_stats(stats)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    config = build_config(args)
    result = build_diagram(load_system(args.input), config)
    print(
        f"Layout OK: {len(result.components)} components, "
        f"{len(result.connections)} connections, "
        f"canvas {result.width:g}x{result.height:g}"
    )
    return 0


def _add_layout_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--style",
        choices=[style.value for style in LayoutStyle],
        help="Placement style (default: daisy, or the style in --config)",
    )
    parser.add_argument(
        "--config", "-c", type=pathlib.Path, help="YAML file of drawing parameters"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sld",
        description="Convert PV system descriptions to single line diagrams",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log layout decisions"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser(
        "convert", help="Draw the diagram of a system file"
    )
    convert.add_argument("input", type=pathlib.Path, help="System file (.json, .yaml)")
    convert.add_argument("output", type=pathlib.Path, help="Output file (.svg, .html)")
    convert.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        help="Output format (default: from the output file suffix)",
    )
    convert.add_argument("--title", "-t", default=DEFAULT_TITLE, help="Diagram title")
    convert.add_argument("--width", "-w", type=int, help="Minimum canvas width")
    convert.add_argument("--height", type=int, help="Minimum canvas height")
    convert.add_argument("--margin", "-m", type=int, help="Diagram margin")
    convert.add_argument("--font-size", "-f", type=int, help="Label font size")
    _add_layout_options(convert)
    convert.set_defaults(func=cmd_convert)

    stats = subparsers.add_parser("stats", help="Count the parts of a system file")
    stats.add_argument("input", type=pathlib.Path)
    stats.set_defaults(func=cmd_stats)

    check = subparsers.add_parser(
        "check", help="Lay out a system file and check the diagram invariants"
    )
    check.add_argument("input", type=pathlib.Path)
    _add_layout_options(check)
    check.set_defaults(func=cmd_check)
    return parser


# --- Main Execution ---
def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )
    try:
        return args.func(args)
    except LayoutError as e:
        print(f"Error: {'; '.join(e.problems)}", file=sys.stderr)
    except (SystemShapeError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        print(f"Error: could not parse input: {' '.join(str(e).split())}", file=sys.stderr)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
