"""Node/edge list and graph export utilities."""

from __future__ import annotations

import csv
import json
import os
from typing import Any, Dict, List, Mapping, Sequence

import networkx as nx

from .graph import PARTY_COLORS, graph_to_records
from .schemas import Edge, Politician
from .utils import console, logger

POLITICIANS_CSV = "politicians.csv"
EDGES_CSV = "edges.csv"

LEGEND = {"parties": {party.value: color for party, color in PARTY_COLORS.items()}}


def write_csv(path: str, rows: Sequence[Mapping[str, Any]], fieldnames: Sequence[str] | None = None) -> str | None:
    """Write ``rows`` with a header row; nothing is written for an empty list
    unless ``fieldnames`` is given."""
    if not rows and not fieldnames:
        logger.info("Data empty, not writing to %s", path)
        return None
    header = list(fieldnames or rows[0].keys())
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=header)
        writer.writeheader()
        writer.writerows(rows)
    return path


def read_csv(path: str) -> List[Dict[str, str]]:
    with open(path, "r", encoding="utf-8", newline="") as fh:
        return list(csv.DictReader(fh))


def write_politicians(out_dir: str, politicians: Sequence[Politician], filename: str = POLITICIANS_CSV) -> str | None:
    return write_csv(os.path.join(out_dir, filename), [p.dict() for p in politicians], ["name", "party"])


def write_edges(out_dir: str, edges: Sequence[Edge], filename: str = EDGES_CSV) -> str | None:
    return write_csv(os.path.join(out_dir, filename), [e.dict() for e in edges], ["from", "to"])


def read_politicians(path: str) -> List[Politician]:
    return [Politician.from_dict(row) for row in read_csv(path)]


def read_edges(path: str) -> List[Edge]:
    return [Edge.from_dict(row) for row in read_csv(path)]


def export_graph(graph: nx.DiGraph, out_dir: str) -> Dict[str, str]:
    os.makedirs(out_dir, exist_ok=True)
    nodes_path = os.path.join(out_dir, "nodes.json")
    edges_path = os.path.join(out_dir, "edges.json")
    graphml_path = os.path.join(out_dir, "graph.graphml")
    legend_path = os.path.join(out_dir, "legend.json")

    nodes = []
    for node_id, data in graph.nodes(data=True):
        record = {"id": node_id}
        record.update(data)
        nodes.append(record)
    _, edges = graph_to_records(graph)

    with open(nodes_path, "w", encoding="utf-8") as fh:
        json.dump(nodes, fh, indent=2)
    with open(edges_path, "w", encoding="utf-8") as fh:
        json.dump(edges, fh, indent=2)
    nx.write_graphml(graph, graphml_path)
    with open(legend_path, "w", encoding="utf-8") as fh:
        json.dump(LEGEND, fh, indent=2)
    console.log("Graph export ready", out_dir)

    return {
        "nodes": nodes_path,
        "edges": edges_path,
        "graphml": graphml_path,
        "legend": legend_path,
    }


__all__ = [
    "EDGES_CSV",
    "LEGEND",
    "POLITICIANS_CSV",
    "export_graph",
    "read_csv",
    "read_edges",
    "read_politicians",
    "write_csv",
    "write_edges",
    "write_politicians",
]
