# praxis/core/dependency.py
import logging
from functools import lru_cache

from praxis.core.config import MATCH_DOMAIN_WEIGHT, MATCH_NAME_SIMILARITY, MATCH_NAME_WEIGHT
from praxis.matching.scorer import CompatibilityScorer, ScoringWeights
from praxis.matching.similarity import token_jaccard

logger = logging.getLogger(__name__)


def _weights() -> ScoringWeights:
    return ScoringWeights(domain_overlap=MATCH_DOMAIN_WEIGHT, name_similarity=MATCH_NAME_WEIGHT)


@lru_cache(maxsize=None)
def _lexical() -> CompatibilityScorer:
    return CompatibilityScorer(_weights(), token_jaccard)


@lru_cache(maxsize=None)
def _embedding() -> CompatibilityScorer:
    from praxis.matching.embeddings import EmbeddingNameSimilarity

    return CompatibilityScorer(_weights(), EmbeddingNameSimilarity())


def get_compatibility_scorer() -> CompatibilityScorer:
    if MATCH_NAME_SIMILARITY == "embedding":
        return _embedding()
    if MATCH_NAME_SIMILARITY != "lexical":
        logger.warning("Unknown MATCH_NAME_SIMILARITY %r, using lexical", MATCH_NAME_SIMILARITY)
    return _lexical()
