"""Deployment vocabulary and pipeline settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .batching import MAX_BATCH_SIZE, validate_batch_size
from .cache import CHECKPOINT_KEY_PATTERN
from .errors import ConfigError
from .schemas import Party

WIKIDATA_API_URL = "https://www.wikidata.org/w/api.php"
WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"

def batch_size_from_env(default: int = MAX_BATCH_SIZE) -> int:
    """Batch size from ``POLINET_BATCH_SIZE``, or ``default`` when unset."""
    raw = os.getenv("POLINET_BATCH_SIZE")
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"POLINET_BATCH_SIZE must be an integer, got {raw!r}") from exc

# Wikidata property ids
POSITION_HELD = "P39"
OCCUPATION = "P106"
PARLIAMENTARY_GROUP = "P4100"
START_TIME = "P580"
POINT_IN_TIME = "P585"

# Wikidata item ids
POLITICIAN = "Q82955"
US_SENATOR = "Q4416090"
US_REPRESENTATIVE = "Q13218630"
US_PRESIDENT = "Q11696"
US_VICE_PRESIDENT = "Q11699"
US_CONGRESS_117 = "Q65089999"
US_CONGRESS_118 = "Q104842452"
REPUBLICAN_PARTY = "Q29468"
DEMOCRATIC_PARTY = "Q29552"

LINK_METHODS = ("api", "wikitext")

CANDIDATE_PRESETS: Dict[str, List[str]] = {
    "congress-117": [US_CONGRESS_117],
    "congress-118": [US_CONGRESS_118],
    "us-offices": [US_SENATOR, US_REPRESENTATIVE, US_PRESIDENT, US_VICE_PRESIDENT],
}


@dataclass(frozen=True)
class AttributePredicate:
    """``property_id`` must have at least one claim valued ``value_id``."""

    property_id: str
    value_id: str


@dataclass(frozen=True)
class Vocabulary:
    """Wikidata ids the resolver works with for one deployment."""

    predicates: Tuple[AttributePredicate, ...] = (AttributePredicate(OCCUPATION, POLITICIAN),)
    position_property_id: str = POSITION_HELD
    party_qualifier_id: str = PARLIAMENTARY_GROUP
    time_property_ids: Tuple[str, ...] = (START_TIME, POINT_IN_TIME)
    parties: Dict[str, Party] = field(
        default_factory=lambda: {
            REPUBLICAN_PARTY: Party.REPUBLICAN,
            DEMOCRATIC_PARTY: Party.DEMOCRATIC,
        }
    )
    language: str = "en"


DEFAULT_VOCABULARY = Vocabulary()


@dataclass
class PipelineConfig:
    out_dir: str
    name: str = "congress-117"
    candidate_ids: List[str] = field(default_factory=lambda: list(CANDIDATE_PRESETS["congress-117"]))
    checkpoint_dir: Optional[str] = None
    batch_size: int = field(default_factory=batch_size_from_env)
    max_batch_size: int = MAX_BATCH_SIZE
    rate: float = 5.0
    max_retries: int = 3
    timeout: int = 30
    # explicit source politicians, name -> party; they join the node list
    sources: Dict[str, Party] = field(default_factory=dict)
    sample_size: Optional[int] = None
    link_method: str = "api"
    seed: Optional[int] = None
    min_size: float = 2.0
    max_size: float = 15.0
    vocabulary: Vocabulary = DEFAULT_VOCABULARY
    wikidata_url: str = WIKIDATA_API_URL
    wikipedia_url: str = WIKIPEDIA_API_URL

    def __post_init__(self) -> None:
        if self.checkpoint_dir is None:
            self.checkpoint_dir = os.getenv("POLINET_CACHE_DIR") or os.path.join(self.out_dir, "checkpoints")

    def validate(self) -> "PipelineConfig":
        validate_batch_size(self.batch_size, self.max_batch_size)
        if not CHECKPOINT_KEY_PATTERN.match(self.name):
            raise ConfigError(f"checkpoint name {self.name!r} may only contain letters, digits, '.', '_' and '-'")
        if not self.candidate_ids:
            raise ConfigError("at least one candidate entity id is required")
        if self.rate <= 0:
            raise ConfigError(f"rate must be positive, got {self.rate}")
        if self.sources and self.sample_size:
            raise ConfigError("explicit sources and a random sample are mutually exclusive")
        if self.sample_size is not None and self.sample_size < 1:
            raise ConfigError(f"sample size must be at least 1, got {self.sample_size}")
        if self.link_method not in LINK_METHODS:
            raise ConfigError(f"unknown link method {self.link_method!r} (choose from {', '.join(LINK_METHODS)})")
        if self.min_size > self.max_size:
            raise ConfigError(f"min size ({self.min_size}) exceeds max size ({self.max_size})")
        return self


def parse_source(value: str) -> Tuple[str, Party]:
    """Parse ``"Name:party"`` as used on the command line."""
    name, sep, party = value.rpartition(":")
    if not sep or not name.strip():
        raise ConfigError(f"expected NAME:PARTY, got {value!r}")
    try:
        return name.strip(), Party(party.strip().lower())
    except ValueError as exc:
        choices = ", ".join(p.value for p in Party)
        raise ConfigError(f"unknown party {party!r} (choose from {choices})") from exc


__all__ = [
    "AttributePredicate",
    "CANDIDATE_PRESETS",
    "DEFAULT_VOCABULARY",
    "LINK_METHODS",
    "MAX_BATCH_SIZE",
    "PipelineConfig",
    "Vocabulary",
    "WIKIDATA_API_URL",
    "WIKIPEDIA_API_URL",
    "batch_size_from_env",
    "parse_source",
]
