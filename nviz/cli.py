"""Command-line interface for nviz."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, List, Optional, Tuple

from nviz.logging import get_logger, set_global_log_level
from nviz.model.hierarchy import Node
from nviz.model.layers import LAYERS
from nviz.session import Session

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 8,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width
        max_col_width: Cells longer than this are clipped with "..."

    Returns:
        Formatted table string, empty when there are no rows
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = []
    for col_idx in range(len(clipped_headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in clipped_rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    if seconds < 1.0:
        return f"{seconds * 1000:.1f} ms"
    return f"{seconds:.2f} s"


def _parse_filter_arg(value: str) -> Tuple[str, str]:
    """Split ``LABEL=INPUT`` on the first '='."""
    label, sep, text = value.partition("=")
    if not sep or not label:
        raise argparse.ArgumentTypeError(
            f"Filter must be given as LABEL=INPUT, got '{value}'"
        )
    return label, text


def _tree_lines(node: Node, depth: int = 0) -> List[str]:
    lines = []
    for child in node.children.values():
        flag = " [filtered]" if child.filtered else ""
        lines.append(f"{'  ' * depth}- {child.segment} ({child.record.layer}){flag}")
        lines.extend(_tree_lines(child, depth + 1))
    return lines


def _print_inspection(session: Session, detail: bool) -> None:
    store = session.store
    print("\n" + "=" * 60)
    print("NVIZ TOPOLOGY INSPECTION")
    print("=" * 60)

    rows = []
    for layer in LAYERS:
        nodes = [n for n in store.nodes if n.layer == layer]
        links = [lk for lk in store.links if lk.type == layer]
        rows.append([layer, str(len(nodes)), str(len(links))])
    print("\nLayers:")
    print(_format_table(["Layer", "Nodes", "Links"], rows))

    print("\nFilters:")
    filter_rows = [
        [flt.label, element.name.lower(), flt.kind.name.lower(), flt.current_input()]
        for element, flt in session.registry.filters()
    ]
    print(_format_table(["Label", "Element", "Kind", "Input"], filter_rows))

    print("\nHierarchy:")
    lines = _tree_lines(session.hierarchy.root)
    if not detail:
        lines = [line for line in lines if not line.startswith("    ")]
    print("\n".join(lines) if lines else "   (empty)")


def _view_payload(session: Session) -> Dict[str, Any]:
    nodes = session.store.nodes
    return {
        "current_layer": session.current_layer,
        "state": session.save_state(),
        "nodes": [
            {"index": n.index, "name": n.name, "layer": n.layer, "exploded": n.exploded}
            for n in session.visible_nodes()
        ],
        "links": [
            {
                "index": lk.index,
                "source": nodes[lk.source].name,
                "target": nodes[lk.target].name,
                "type": lk.type,
                "crosslink": lk.crosslink,
            }
            for lk in session.visible_links()
        ],
    }


def _print_view(session: Session) -> None:
    payload = _view_payload(session)
    print(f"\nCurrent layer: {payload['current_layer']}")

    print(f"\nVisible nodes ({len(payload['nodes'])}):")
    print(
        _format_table(
            ["Index", "Name", "Layer", "Exploded"],
            [
                [str(n["index"]), n["name"], n["layer"], "yes" if n["exploded"] else ""]
                for n in payload["nodes"]
            ],
        )
    )

    print(f"\nVisible links ({len(payload['links'])}):")
    print(
        _format_table(
            ["Index", "Source", "Target", "Type"],
            [
                [str(lk["index"]), lk["source"], lk["target"], lk["type"]]
                for lk in payload["links"]
            ],
            max_col_width=40,
        )
    )


def _inspect_topology(path: Path, detail: bool = False) -> None:
    """Load a topology and print layer counts, filters and the hierarchy."""
    logger.info(f"Inspecting topology from: {path}")
    try:
        session = Session.from_file(path)
    except FileNotFoundError:
        logger.error(f"Topology file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to load topology: {type(e).__name__}: {e}")
        sys.exit(1)
    _print_inspection(session, detail)


def _view_topology(
    path: Path,
    layer: Optional[str],
    filters: List[Tuple[str, str]],
    include_neighbors: List[str],
    explode: List[str],
    state: Optional[str],
    as_json: bool,
) -> None:
    """Apply a state, filters and explosions, then print what is visible."""
    _start_time = perf_counter()
    try:
        session = Session.from_file(path)
        if state:
            session.load_state(state)
        if layer:
            session.set_current_layer(layer)
        for label in include_neighbors:
            session.toggle_include_neighbors(label, True)
        for label, text in filters:
            result = session.apply_filter(label, text)
            logger.info(
                "Filter %s: %d filtered out, %d filtered in",
                label,
                result.filtered_out,
                result.filtered_in,
            )
        for name in explode:
            created = session.explode(name)
            logger.info("Exploded %s: %d new crosslinks", name, len(created))
    except FileNotFoundError:
        logger.error(f"Topology file not found: {path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to build view: {type(e).__name__}: {e}")
        sys.exit(1)

    if as_json:
        print(json.dumps(_view_payload(session), indent=2))
    else:
        _print_view(session)
        print(f"\nState: {session.save_state()}")
    logger.info(f"View built in {_format_duration(perf_counter() - _start_time)}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``nviz`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="nviz",
        description="Filter and explode multi-layer network topologies.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{inspect,view}",
        help="Available commands",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate a topology and show its structure"
    )
    inspect_parser.add_argument("topology", type=Path, help="Path to topology YAML/JSON")
    inspect_parser.add_argument(
        "--detail",
        "-d",
        action="store_true",
        help="Show the full hierarchy down to routers",
    )

    view_parser = subparsers.add_parser(
        "view", help="Apply filters and explosions and list visible elements"
    )
    view_parser.add_argument("topology", type=Path, help="Path to topology YAML/JSON")
    view_parser.add_argument(
        "--layer", "-l", choices=LAYERS, default=None, help="Layer to display"
    )
    view_parser.add_argument(
        "--filter",
        "-f",
        dest="filters",
        action="append",
        type=_parse_filter_arg,
        default=[],
        metavar="LABEL=INPUT",
        help="Apply a filter, e.g. router_utilization='0;5' or router_name=br1",
    )
    view_parser.add_argument(
        "--include-neighbors",
        action="append",
        default=[],
        metavar="LABEL",
        help="Let a pattern filter also match on neighbor values",
    )
    view_parser.add_argument(
        "--explode",
        "-e",
        action="append",
        default=[],
        metavar="NAME",
        help="Explode a node by full name (repeatable, applied in order)",
    )
    view_parser.add_argument(
        "--state", default=None, help="Session state string to restore first"
    )
    view_parser.add_argument(
        "--json", action="store_true", help="Print the view as JSON"
    )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "inspect":
        _inspect_topology(args.topology, args.detail)
    elif args.command == "view":
        _view_topology(
            args.topology,
            layer=args.layer,
            filters=args.filters,
            include_neighbors=args.include_neighbors,
            explode=args.explode,
            state=args.state,
            as_json=args.json,
        )


if __name__ == "__main__":
    main()
