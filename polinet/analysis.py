"""Compare a harvested graph against a random baseline."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, TypeVar

import networkx as nx

from .schemas import Party

T = TypeVar("T")

PARTIES_ORDERED = (Party.REPUBLICAN, Party.DEMOCRATIC)


def sample(items: Sequence[T], size: int, rng: Optional[random.Random] = None) -> List[T]:
    """Up to ``size`` distinct items picked without replacement."""
    rng = rng or random.Random()
    return rng.sample(list(items), min(size, len(items)))


def edge_probability(node_count: int, edge_count: int) -> float:
    """E / (V * (V - 1)), the share of possible directed edges present."""
    if node_count < 2:
        return 0.0
    return edge_count / (node_count * (node_count - 1))


def party_share(graph: nx.DiGraph, party: Party = PARTIES_ORDERED[0]) -> float:
    if graph.number_of_nodes() == 0:
        return 0.0
    members = sum(1 for _, data in graph.nodes(data=True) if data.get("party") == party.value)
    return members / graph.number_of_nodes()


def create_random_graph(
    node_count: int,
    probability: float,
    party_probability: float,
    seed: Optional[int] = None,
) -> nx.DiGraph:
    """Directed G(n, p) graph whose nodes get a party with the given odds."""
    rng = random.Random(seed)
    graph = nx.gnp_random_graph(node_count, probability, seed=rng, directed=True)
    for node in graph.nodes:
        party = PARTIES_ORDERED[0] if rng.random() < party_probability else PARTIES_ORDERED[1]
        graph.nodes[node]["label"] = str(node)
        graph.nodes[node]["party"] = party.value
    return graph


def same_party_edge_share(graph: nx.DiGraph) -> float:
    if graph.number_of_edges() == 0:
        return 0.0
    parties = nx.get_node_attributes(graph, "party")
    same = sum(1 for u, v in graph.edges() if parties.get(u) == parties.get(v))
    return same / graph.number_of_edges()


def summarize(graph: nx.DiGraph) -> Dict[str, float]:
    return {
        "nodes": graph.number_of_nodes(),
        "edges": graph.number_of_edges(),
        "density": edge_probability(graph.number_of_nodes(), graph.number_of_edges()),
        "reciprocity": nx.reciprocity(graph) if graph.number_of_edges() else 0.0,
        "same_party_edges": same_party_edge_share(graph),
        "party_share": party_share(graph),
    }


def compare_to_random(graph: nx.DiGraph, seed: Optional[int] = None) -> Dict[str, Dict[str, float]]:
    """Summaries of ``graph`` and of a random graph with the same size, density and party mix."""
    baseline = create_random_graph(
        graph.number_of_nodes(),
        edge_probability(graph.number_of_nodes(), graph.number_of_edges()),
        party_share(graph),
        seed=seed,
    )
    return {"observed": summarize(graph), "random": summarize(baseline)}


__all__ = [
    "compare_to_random",
    "create_random_graph",
    "edge_probability",
    "party_share",
    "same_party_edge_share",
    "sample",
    "summarize",
]
