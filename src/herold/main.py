"""
Command line entry point.

1) Load a project snapshot from JSON.
2) Validate it and report every structural error at once.
3) Render it to SVG (full tree, thumbnail or focus view), optionally also
   writing the layout as a Graphviz DOT file.
4) Or print layout statistics.
"""

import argparse
import json
import sys
from pathlib import Path

from herold.config import THUMBNAIL_OVERRIDES, ConfigurationError, resolve_layout_config
from herold.logging import get_logger, setup_logging
from herold.parsing import load_snapshot
from herold.plotting import build_dot_graph
from herold.rendering import (
    RenderError,
    SnapshotValidationError,
    focus_snapshot,
    generate_layout,
    get_layout_stats,
    render_family_tree,
)
from herold.validation import check_lineage, validate_snapshot

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="herold", description="Draw family trees as SVG.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a project snapshot to SVG.")
    render.add_argument("snapshot", type=Path, help="Path to the project JSON file.")
    render.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Path to output SVG file (default: <project id>.svg).",
    )
    render.add_argument("--spacing", choices=["tight", "comfortable", "spacious"])
    render.add_argument("--orientation", choices=["portrait", "landscape"])
    render.add_argument("--font-size", type=float, help="Font size for names.")
    render.add_argument("--thumbnail", action="store_true", help="Render the small listing version.")
    render.add_argument(
        "--focus",
        type=int,
        metavar="RADIUS",
        help="Only draw people within RADIUS relationships of the main person.",
    )
    render.add_argument("--dot", type=Path, help="Also write the layout as Graphviz DOT.")

    validate = sub.add_parser("validate", help="Check a project snapshot for errors.")
    validate.add_argument("snapshot", type=Path)

    stats = sub.add_parser("stats", help="Print layout statistics as JSON.")
    stats.add_argument("snapshot", type=Path)

    return parser


def _print_errors(errors: list[str]) -> None:
    print(f"Found {len(errors)} validation errors:", file=sys.stderr)
    for error in errors:
        print(f"  - {error}", file=sys.stderr)


def cmd_render(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)

    # Orientation and spacing presets belong to the project settings layer
    if args.spacing or args.orientation:
        settings = snapshot.settings
        if args.spacing:
            settings.layout.spacing = args.spacing
        if args.orientation:
            settings.orientation = args.orientation

    overrides = dict(THUMBNAIL_OVERRIDES) if args.thumbnail else {}
    if args.font_size is not None:
        overrides["font_size"] = args.font_size

    if args.focus is not None:
        errors = validate_snapshot(snapshot)
        if errors:
            _print_errors(errors)
            return 1
        snapshot = focus_snapshot(snapshot, radius=args.focus)

    try:
        result = render_family_tree(snapshot, overrides or None)
    except SnapshotValidationError as exc:
        _print_errors(exc.errors)
        return 1
    except ConfigurationError as exc:
        print(f"Invalid layout configuration: {exc}", file=sys.stderr)
        return 1
    except RenderError as exc:
        logger.error("render_failed", stage=exc.stage, project_id=exc.project_id, error=str(exc))
        return 2

    output = args.output or Path(f"{snapshot.id}.svg")
    output.write_text(result.svg, encoding="utf-8")
    meta = result.metadata
    print(
        f"SVG saved to {output} ({meta.width:g}x{meta.height:g}, {meta.person_count} people, "
        f"{meta.generation_count} generations, {meta.render_time_ms:.1f} ms)"
    )

    if args.dot:
        config = resolve_layout_config(snapshot.settings, overrides or None)
        layout = generate_layout(snapshot, config)
        args.dot.write_text(build_dot_graph(layout, snapshot.name).to_string(), encoding="utf-8")
        print(f"DOT saved to {args.dot}")

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)
    errors = validate_snapshot(snapshot)
    warnings = check_lineage(snapshot)

    if warnings:
        print(f"Found {len(warnings)} lineage warnings:")
        for w in warnings[:10]:
            print(f"  - {w}")
        if len(warnings) > 10:
            print(f"  ... and {len(warnings) - 10} more")

    if errors:
        _print_errors(errors)
        return 1

    print(f"{snapshot.id}: {len(snapshot.members)} members, no validation errors")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    snapshot = load_snapshot(args.snapshot)
    stats = get_layout_stats(snapshot)
    print(json.dumps(stats, indent=2, ensure_ascii=False))
    return 1 if stats["validation_errors"] else 0


COMMANDS = {
    "render": cmd_render,
    "validate": cmd_validate,
    "stats": cmd_stats,
}


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
