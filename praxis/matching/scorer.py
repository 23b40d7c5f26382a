"""
Compatibility scoring between two users' goal forests.

The score blends two components with explicit weights:

* domain overlap: Jaccard index of the sets of life domains the two users
  have goals in;
* name similarity: every goal is paired with the most similar goal of the
  other user in the same domain, and the best-pair similarities are averaged
  over all goals of both users.

``score = (wd * domain_overlap + wn * name_similarity) / (wd + wn)``

Both components are symmetric and lie in [0, 1], identical non-empty forests
score exactly 1, and an empty forest on either side scores 0. Adding the same
goal (same domain and name) to both forests never lowers the score.
"""
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from praxis.goals.models import Domain
from praxis.matching.similarity import NameSimilarity, normalize_name, token_jaccard


@dataclass(frozen=True)
class ScoringWeights:
    domain_overlap: float = 0.7
    name_similarity: float = 0.3

    def __post_init__(self):
        if self.domain_overlap < 0 or self.name_similarity < 0:
            raise ValueError("Scoring weights must be non-negative")
        if self.total <= 0:
            raise ValueError("At least one scoring weight must be positive")

    @property
    def total(self) -> float:
        return self.domain_overlap + self.name_similarity


@dataclass(frozen=True)
class CompatibilityResult:
    score: float
    domain_overlap: float
    name_similarity: float
    shared_domains: Tuple[Domain, ...] = field(default_factory=tuple)
    shared_goal_names: Tuple[str, ...] = field(default_factory=tuple)


EMPTY_RESULT = CompatibilityResult(score=0.0, domain_overlap=0.0, name_similarity=0.0)


def _names_by_domain(nodes: Iterable) -> Dict[Domain, List[str]]:
    grouped = defaultdict(list)
    for node in nodes:
        grouped[Domain(node.domain)].append(node.name)
    return grouped


class CompatibilityScorer:
    def __init__(self, weights: Optional[ScoringWeights] = None, name_similarity: NameSimilarity = token_jaccard):
        self.weights = weights or ScoringWeights()
        self.name_similarity = name_similarity

    def score(self, tree_a, tree_b) -> CompatibilityResult:
        """
        Scores two goal trees.

        Args:
            tree_a: Anything with a ``nodes`` sequence of goals exposing
                ``name`` and ``domain``.
            tree_b: Same, for the other user.

        Returns:
            CompatibilityResult: The blended score with both components and
            the shared domains and goal names as evidence.
        """
        names_a = _names_by_domain(tree_a.nodes)
        names_b = _names_by_domain(tree_b.nodes)
        if not names_a or not names_b:
            return EMPTY_RESULT

        domains_a, domains_b = set(names_a), set(names_b)
        shared = domains_a & domains_b
        domain_overlap = len(shared) / len(domains_a | domains_b)
        name_similarity = self._name_overlap(names_a, names_b)

        w = self.weights
        score = (w.domain_overlap * domain_overlap + w.name_similarity * name_similarity) / w.total
        return CompatibilityResult(
            score=score,
            domain_overlap=domain_overlap,
            name_similarity=name_similarity,
            shared_domains=tuple(d for d in Domain if d in shared),
            shared_goal_names=self._shared_names(names_a, names_b, shared),
        )

    def _best_match(self, name: str, candidates: List[str]) -> float:
        return max((self.name_similarity(name, other) for other in candidates), default=0.0)

    def _name_overlap(self, names_a: Dict[Domain, List[str]], names_b: Dict[Domain, List[str]]) -> float:
        best = []
        for domain, names in names_a.items():
            best.extend(self._best_match(n, names_b.get(domain, [])) for n in names)
        for domain, names in names_b.items():
            best.extend(self._best_match(n, names_a.get(domain, [])) for n in names)
        # fsum is exactly rounded, so the result does not depend on which side came first
        return math.fsum(best) / len(best)

    @staticmethod
    def _shared_names(names_a, names_b, shared) -> Tuple[str, ...]:
        display: Dict[str, str] = {}
        for domain in shared:
            keys_b = {normalize_name(n) for n in names_b[domain]}
            for name in names_a[domain]:
                key = normalize_name(name)
                if key in keys_b:
                    variants = [n for n in names_a[domain] + names_b[domain] if normalize_name(n) == key]
                    if key in display:
                        variants.append(display[key])
                    display[key] = min(variants)
        return tuple(display[k] for k in sorted(display))
