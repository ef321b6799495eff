"""High-level API helpers for polinet."""

from __future__ import annotations

import hashlib
import os
import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import networkx as nx

from .analysis import sample
from .batching import MAX_BATCH_SIZE, run_batched
from .cache import DatasetStore, JSONFileStore, load_or_compute
from .config import PipelineConfig
from .export import export_graph, write_csv, write_edges, write_politicians
from .graph import build_graph, resize_nodes
from .http import HTTPClient
from .resolver import EntityResolver
from .schemas import Edge, Politician
from .utils import RateLimiter, console
from .wikidata import WikidataClient
from .wikipedia import WikipediaClient


@dataclass
class PipelineStats:
    """Counts collected during a pipeline run."""

    candidates: int = 0
    politicians: int = 0
    sources: int = 0
    raw_edges: int = 0
    nodes: int = 0
    edges: int = 0
    checkpoints: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "candidates": self.candidates,
            "politicians": self.politicians,
            "sources": self.sources,
            "raw_edges": self.raw_edges,
            "nodes": self.nodes,
            "edges": self.edges,
            "checkpoints": dict(self.checkpoints),
        }

    def log(self) -> None:
        console.log("Run summary", self.to_dict())


@dataclass
class PipelineResult:
    graph: nx.DiGraph
    politicians: List[Politician]
    edges: List[Edge]
    stats: PipelineStats
    paths: Dict[str, str] = field(default_factory=dict)


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def get_candidate_ids(wikidata: WikidataClient, entity_ids: Sequence[str]) -> List[str]:
    """Items linking to any of ``entity_ids``, in query order, without repeats."""
    candidates: List[str] = []
    for entity_id in entity_ids:
        console.log(f"Getting backlinks of {entity_id}")
        candidates.extend(wikidata.get_backlinks(entity_id))
    return _unique(candidates)


def get_politicians(
    wikidata: WikidataClient,
    resolver: EntityResolver,
    candidate_ids: Sequence[str],
    batch_size: int,
) -> List[Politician]:
    entities = run_batched(candidate_ids, batch_size, wikidata.get_entities)
    return resolver.resolve_politicians(entities)


def discover_edges(
    wikipedia: WikipediaClient,
    sources: Sequence[str],
    all_nodes: Iterable[str],
    batch_size: int,
    method: str = "api",
) -> List[Edge]:
    """Links from ``sources`` pages to pages in ``all_nodes``, one edge per link found.

    ``method="api"`` asks ``prop=links`` for whole batches of sources;
    ``method="wikitext"`` parses each source's wikitext one page at a time and
    ignores links from the "External links" section onward.
    """
    node_set = set(all_nodes)
    sources = _unique(sources)

    if method == "wikitext":
        edges: List[Edge] = []
        for source in sources:
            edges.extend(
                Edge(from_=source, to=link)
                for link in wikipedia.get_links_without_footer(source)
                if link in node_set
            )
        return edges

    # pltitles takes the same number of titles as the titles parameter
    valid_links = sorted(node_set) if len(node_set) <= MAX_BATCH_SIZE else None

    def handle(batch: Sequence[str]) -> List[Edge]:
        return [
            Edge(from_=result.title, to=link)
            for result in wikipedia.get_links(batch, valid_links)
            for link in result.links
            if link in node_set
        ]

    return run_batched(sources, batch_size, handle)


def _checkpoint_suffix(source_names: Sequence[str]) -> str:
    digest = hashlib.sha1("|".join(sorted(source_names)).encode("utf-8")).hexdigest()
    return digest[:10]


def run_pipeline(
    config: PipelineConfig,
    *,
    store: DatasetStore | None = None,
    http: HTTPClient | None = None,
) -> PipelineResult:
    """Harvest politicians and links, then build and export the graph."""

    config.validate()
    http = http or HTTPClient(
        rate_limiter=RateLimiter(rate=config.rate),
        max_retries=config.max_retries,
        timeout=config.timeout,
    )
    store = store or JSONFileStore(config.checkpoint_dir)
    wikidata = WikidataClient(http, config.wikidata_url, language=config.vocabulary.language)
    wikipedia = WikipediaClient(http, config.wikipedia_url)
    resolver = EntityResolver(config.vocabulary)
    stats = PipelineStats()

    candidates_key = f"{config.name}-candidates"
    candidate_ids = load_or_compute(
        store,
        candidates_key,
        lambda: get_candidate_ids(wikidata, config.candidate_ids),
    )
    politicians_key = f"{config.name}-politicians"
    politicians = load_or_compute(
        store,
        politicians_key,
        lambda: get_politicians(wikidata, resolver, candidate_ids, config.batch_size),
        serialize=Politician.dict,
        deserialize=Politician.from_dict,
    )
    stats.candidates = len(candidate_ids)
    stats.politicians = len(politicians)

    all_politicians = list(politicians)
    source_filter: Optional[set] = None
    if config.sources:
        # explicit sources may have been dropped by the resolver, add them back
        all_politicians.extend(Politician(name=name, party=party) for name, party in config.sources.items())
        source_names = list(config.sources)
    elif config.sample_size:
        picked = sample(politicians, config.sample_size, random.Random(config.seed))
        source_names = [p.name for p in picked]
    else:
        source_names = [p.name for p in politicians]

    edges_key = f"{config.name}-{config.link_method}-edges"
    if config.sources or config.sample_size:
        source_filter = set(source_names)
        edges_key = f"{config.name}-{config.link_method}-{_checkpoint_suffix(source_names)}-edges"
        write_csv(os.path.join(config.out_dir, "sources.csv"), [{"name": name} for name in source_names], ["name"])

    all_names = [p.name for p in all_politicians]
    edges = load_or_compute(
        store,
        edges_key,
        lambda: discover_edges(wikipedia, source_names, all_names, config.batch_size, config.link_method),
        serialize=Edge.dict,
        deserialize=Edge.from_dict,
    )
    stats.sources = len(source_names)
    stats.raw_edges = len(edges)
    stats.checkpoints = {"candidates": candidates_key, "politicians": politicians_key, "edges": edges_key}

    graph = build_graph(all_politicians, edges, source_filter)
    resize_nodes(graph, config.min_size, config.max_size)
    stats.nodes = graph.number_of_nodes()
    stats.edges = graph.number_of_edges()

    paths: Dict[str, str] = {}
    for key, path in (
        ("politicians", write_politicians(config.out_dir, all_politicians)),
        ("edge_list", write_edges(config.out_dir, edges)),
    ):
        if path:
            paths[key] = path
    paths.update(export_graph(graph, config.out_dir))
    stats.log()
    return PipelineResult(graph=graph, politicians=all_politicians, edges=edges, stats=stats, paths=paths)


__all__ = [
    "PipelineResult",
    "PipelineStats",
    "discover_edges",
    "get_candidate_ids",
    "get_politicians",
    "run_pipeline",
]
