"""Graph construction utilities."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

import networkx as nx

from .schemas import Edge, Party, Politician

PARTY_COLORS: Dict[Party, str] = {
    Party.DEMOCRATIC: "#5A75DB",
    Party.REPUBLICAN: "#FA5A3D",
}


def reachable_from_sources(edges: Iterable[Edge], sources: Set[str]) -> Set[str]:
    """Sources plus every direct ``to`` of an edge leaving a source (one hop)."""
    reachable = set(sources)
    for edge in edges:
        if edge.from_ in sources:
            reachable.add(edge.to)
    return reachable


def build_graph(
    politicians: Iterable[Politician],
    edges: Iterable[Edge],
    source_filter: Optional[Set[str]] = None,
) -> nx.DiGraph:
    """Build a directed politician graph without duplicate nodes or parallel edges.

    The first politician with a given name wins. With ``source_filter`` only
    the sources and the pages they link to directly are kept as nodes. An
    edge is kept when both ends are nodes; ``A -> B`` and ``B -> A`` are
    distinct edges.
    """
    edges = list(edges)
    allowed = reachable_from_sources(edges, source_filter) if source_filter is not None else None

    graph = nx.DiGraph()
    for politician in politicians:
        if graph.has_node(politician.name):
            continue
        if allowed is not None and politician.name not in allowed:
            continue
        graph.add_node(
            politician.name,
            label=politician.name,
            party=politician.party.value,
            color=PARTY_COLORS[politician.party],
        )

    for edge in edges:
        if graph.has_node(edge.from_) and graph.has_node(edge.to) and not graph.has_edge(edge.from_, edge.to):
            graph.add_edge(edge.from_, edge.to, weight=1)
    return graph


def resize_nodes(graph: nx.DiGraph, min_size: float, max_size: float) -> None:
    """Set each node's ``size`` attribute by linear interpolation of its degree."""
    if graph.number_of_nodes() == 0:
        return
    degrees = dict(graph.degree())
    min_degree = min(degrees.values())
    max_degree = max(degrees.values())
    if min_degree == max_degree:
        for node in graph.nodes:
            graph.nodes[node]["size"] = min_size
        return
    degree_distance = max_degree - min_degree
    size_distance = max_size - min_size
    for node, degree in degrees.items():
        graph.nodes[node]["size"] = min_size + ((degree - min_degree + 1) / (degree_distance + 1)) * size_distance


def graph_to_records(graph: nx.DiGraph) -> Tuple[List[Dict[str, str]], List[Dict[str, str]]]:
    nodes = [{"name": node, "party": data.get("party", "")} for node, data in graph.nodes(data=True)]
    edges = [Edge(from_=u, to=v).dict() for u, v in graph.edges()]
    return nodes, edges


__all__ = ["PARTY_COLORS", "build_graph", "graph_to_records", "reachable_from_sources", "resize_nodes"]
