"""casegraph CLI: query the merged case graph from the command line.

Usage:
    casegraph summary --case case-harbor
    casegraph path amara-vos registry
    casegraph centrality --top 5
    casegraph communities --start 2017-01-01 --end 2017-12-31
    casegraph export --format cytoscape --extraction run-42.json

``--extraction`` points at a JSON file with optional ``entities``,
``relationships`` and ``events`` lists as produced by the extraction
pipeline. All output is JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from casegraph.config.settings import settings
from casegraph.graph.centrality import compute_centrality, rank_centrality
from casegraph.graph.communities import detect_communities
from casegraph.graph.engine import GraphEngine, GraphResult
from casegraph.graph.exporters import GraphExporter
from casegraph.graph.pathfinder import InvalidPathQuery, PathNotFound, shortest_path
from casegraph.graph.store import GraphStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="casegraph",
        description="casegraph: case entity graph analysis",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--case", default=None, help="Active case id (default: all cases)")
    parser.add_argument("--extraction", help="JSON file with extraction output")
    parser.add_argument("--start", help="Window start date (YYYY-MM-DD)")
    parser.add_argument("--end", help="Window end date (YYYY-MM-DD)")

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("summary", help="Graph statistics and merge diagnostics")

    path = subparsers.add_parser("path", help="Shortest connection between two entities")
    path.add_argument("source", help="Source entity id")
    path.add_argument("target", help="Target entity id")

    cent = subparsers.add_parser("centrality", help="Rank entities by centrality")
    cent.add_argument("--top", type=int, default=10)

    subparsers.add_parser("communities", help="Detect communities")

    exp = subparsers.add_parser("export", help="Export graph for rendering")
    exp.add_argument("--format", choices=["d3", "cytoscape"], default="d3")

    return parser


def _load_extraction(path: str | None) -> dict[str, list[dict[str, Any]]]:
    if not path:
        return {}
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


def _build(args: argparse.Namespace) -> tuple[GraphResult, GraphStore]:
    extraction = _load_extraction(args.extraction)
    engine = GraphEngine(case_id=args.case)
    result = engine.build(
        extraction.get("entities", []),
        extraction.get("relationships", []),
        extraction.get("events", []),
    )
    return result, result.filtered(args.start, args.end)


def _centrality(store: GraphStore):
    return compute_centrality(
        store,
        degree_weight=settings.CENTRALITY_DEGREE_WEIGHT,
        betweenness_weight=settings.CENTRALITY_BETWEENNESS_WEIGHT,
    )


def _communities(store: GraphStore):
    return detect_communities(
        store,
        min_size=settings.COMMUNITY_MIN_SIZE,
        modularity_threshold=settings.COMMUNITY_MODULARITY_THRESHOLD,
    )


def run(args: argparse.Namespace) -> dict[str, Any]:
    """Execute a parsed command and return its JSON-serialisable output."""
    result, store = _build(args)

    if args.command == "summary":
        return result.summary(args.start, args.end)

    if args.command == "path":
        try:
            outcome = shortest_path(store, args.source, args.target)
        except InvalidPathQuery as exc:
            return {"error": str(exc)}
        if isinstance(outcome, PathNotFound):
            return {"found": False, "reason": outcome.reason}
        return {
            "found": True,
            "path": outcome.path,
            "length": outcome.length,
            "relationships": [c.relationship for c in outcome.connections],
        }

    if args.command == "centrality":
        ranked = rank_centrality(_centrality(store))
        return {"ranking": [asdict(r) for r in ranked[:args.top]]}

    if args.command == "communities":
        communities = _communities(store)
        return {"communities": [asdict(c) for c in communities]}

    if args.command == "export":
        exporter = GraphExporter(
            store,
            centrality=_centrality(store),
            communities=_communities(store),
        )
        if args.format == "cytoscape":
            return exporter.to_cytoscape_json()
        return exporter.to_d3_json()

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        output = run(args)
    except Exception as exc:
        logger.error("Error: %s", exc)
        if args.verbose:
            raise
        sys.exit(1)

    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()
