"""Command line interface for polinet."""

from __future__ import annotations

import argparse
import json
import os
from typing import Dict, List, Sequence

from .analysis import compare_to_random
from .api import run_pipeline
from .batching import MAX_BATCH_SIZE
from .config import CANDIDATE_PRESETS, LINK_METHODS, PipelineConfig, parse_source
from .errors import ConfigError
from .export import EDGES_CSV, POLITICIANS_CSV, export_graph, read_edges, read_politicians
from .graph import build_graph, resize_nodes
from .schemas import Party
from .utils import console, set_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="polinet", description="Wikidata/Wikipedia politician link graph harvester")
    parser.add_argument(
        "--log-level",
        default=os.getenv("POLINET_LOG_LEVEL", "INFO"),
        help="Python logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    harvest = sub.add_parser("harvest", help="Harvest politicians and the links between their articles")
    harvest.add_argument("--out", required=True, help="Output directory")
    harvest.add_argument("--preset", choices=sorted(CANDIDATE_PRESETS), help="Named set of candidate entities")
    harvest.add_argument("--qid", action="append", help="Wikidata item whose backlinks are candidates")
    harvest.add_argument("--name", help="Checkpoint name prefix (default: preset name or 'custom')")
    harvest.add_argument(
        "--source",
        action="append",
        dest="sources",
        metavar="NAME:PARTY",
        help="Only follow links from this politician (repeatable)",
    )
    harvest.add_argument("--sample", type=int, help="Only follow links from N random politicians")
    harvest.add_argument("--seed", type=int, help="Random seed for --sample")
    harvest.add_argument("--links", choices=LINK_METHODS, default="api", help="How to discover page links")
    harvest.add_argument(
        "--batch-size",
        type=int,
        help=f"Titles/ids per request (at most {MAX_BATCH_SIZE}, default: $POLINET_BATCH_SIZE or {MAX_BATCH_SIZE})",
    )
    harvest.add_argument("--rate", type=float, default=5.0, help="Max requests per second")
    harvest.add_argument("--cache-dir", help="Checkpoint directory (default: <out>/checkpoints)")
    harvest.add_argument("--min-size", type=float, default=2.0)
    harvest.add_argument("--max-size", type=float, default=15.0)
    harvest.add_argument("--report-path", help="Optional JSON file to store run statistics")

    graph = sub.add_parser("graph", help="Rebuild the graph from exported CSV files")
    graph.add_argument("path", help=f"Directory containing {POLITICIANS_CSV} and {EDGES_CSV}")
    graph.add_argument("--source", action="append", dest="sources", help="Restrict to these sources and their links")
    graph.add_argument("--min-size", type=float, default=2.0)
    graph.add_argument("--max-size", type=float, default=15.0)

    validate = sub.add_parser("validate", help="Validate exported graph")
    validate.add_argument("path", help="Output directory to validate")

    analyze = sub.add_parser("analyze", help="Compare an exported graph with a random baseline")
    analyze.add_argument("path", help=f"Directory containing {POLITICIANS_CSV} and {EDGES_CSV}")
    analyze.add_argument("--seed", type=int)

    return parser


def _parse_sources(values: Sequence[str] | None) -> Dict[str, Party]:
    sources: Dict[str, Party] = {}
    for value in values or []:
        name, party = parse_source(value)
        sources[name] = party
    return sources


def build_config(args: argparse.Namespace) -> PipelineConfig:
    candidate_ids: List[str] = []
    if args.preset:
        candidate_ids.extend(CANDIDATE_PRESETS[args.preset])
    if args.qid:
        candidate_ids.extend(args.qid)
    if not candidate_ids:
        raise SystemExit("Provide --preset or --qid")
    name = args.name or args.preset or "custom"
    overrides = {}
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    return PipelineConfig(
        out_dir=args.out,
        name=name,
        candidate_ids=candidate_ids,
        checkpoint_dir=args.cache_dir,
        rate=args.rate,
        sources=_parse_sources(args.sources),
        sample_size=args.sample,
        seed=args.seed,
        link_method=args.links,
        min_size=args.min_size,
        max_size=args.max_size,
        **overrides,
    )


def run_harvest(args: argparse.Namespace) -> None:
    try:
        config = build_config(args).validate()
    except ConfigError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    result = run_pipeline(config)
    console.log(f"Export completed with {result.stats.nodes} nodes and {result.stats.edges} edges")
    console.log(result.paths)
    if args.report_path:
        with open(args.report_path, "w", encoding="utf-8") as fh:
            json.dump(result.stats.to_dict(), fh, indent=2)
        console.log(f"Statistics saved to {args.report_path}")


def _load_csv_graph(path: str, sources: Sequence[str] | None = None):
    politicians_path = os.path.join(path, POLITICIANS_CSV)
    edges_path = os.path.join(path, EDGES_CSV)
    if not os.path.exists(politicians_path) or not os.path.exists(edges_path):
        raise SystemExit(f"Missing {POLITICIANS_CSV} or {EDGES_CSV}")
    politicians = read_politicians(politicians_path)
    edges = read_edges(edges_path)
    return build_graph(politicians, edges, set(sources) if sources else None)


def run_graph(args: argparse.Namespace) -> None:
    graph = _load_csv_graph(args.path, args.sources)
    resize_nodes(graph, args.min_size, args.max_size)
    paths = export_graph(graph, args.path)
    console.log(f"Graph has {graph.number_of_nodes()} nodes and {graph.number_of_edges()} edges")
    console.log(paths)


def run_validate(path: str) -> None:
    nodes_path = os.path.join(path, "nodes.json")
    edges_path = os.path.join(path, "edges.json")
    if not os.path.exists(nodes_path) or not os.path.exists(edges_path):
        raise SystemExit("Missing nodes.json or edges.json")
    with open(nodes_path, "r", encoding="utf-8") as fh:
        nodes = json.load(fh)
    with open(edges_path, "r", encoding="utf-8") as fh:
        edges = json.load(fh)
    node_ids = {node["id"] for node in nodes}
    missing = [edge for edge in edges if edge["from"] not in node_ids or edge["to"] not in node_ids]
    pairs = [(edge["from"], edge["to"]) for edge in edges]
    console.log(f"Nodes: {len(nodes)} Edges: {len(edges)}")
    if missing:
        raise SystemExit(f"Edges reference missing nodes: {missing[:3]}")
    if len(set(pairs)) != len(pairs):
        raise SystemExit("Duplicate directed edges found")
    console.log("Validation OK")


def run_analyze(args: argparse.Namespace) -> None:
    graph = _load_csv_graph(args.path)
    comparison = compare_to_random(graph, seed=args.seed)
    console.log("Observed", comparison["observed"])
    console.log("Random baseline", comparison["random"])


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_log_level(args.log_level)
    if args.command == "harvest":
        run_harvest(args)
    elif args.command == "graph":
        run_graph(args)
    elif args.command == "validate":
        run_validate(args.path)
    elif args.command == "analyze":
        run_analyze(args)
    else:  # pragma: no cover - defensive
        parser.print_help()


if __name__ == "__main__":  # pragma: no cover
    main()
