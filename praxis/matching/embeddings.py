import logging
from functools import lru_cache

from sentence_transformers import SentenceTransformer, util

from praxis.core.config import EMBED_CACHE_SIZE, EMBED_MODEL
from praxis.matching.similarity import normalize_name

logger = logging.getLogger(__name__)


class EmbeddingNameSimilarity:
    """
    Cosine similarity of sentence embeddings, clipped to [0, 1].

    Names that normalize to the same text score exactly 1.0 without touching
    the model, so identical trees still score 1. Embeddings of the most
    recently scored names are kept in a bounded LRU cache.
    """

    def __init__(self, model_name: str = EMBED_MODEL, cache_size: int = EMBED_CACHE_SIZE):
        logger.info("Loading embedding model %s for goal-name similarity", model_name)
        self.embedding_model = SentenceTransformer(model_name)
        self._encode = lru_cache(maxsize=cache_size)(self._encode_uncached)

    def _encode_uncached(self, text: str):
        return self.embedding_model.encode(text, convert_to_tensor=True)

    def __call__(self, a: str, b: str) -> float:
        na, nb = normalize_name(a), normalize_name(b)
        if na == nb:
            return 1.0
        # Order the pair so the float result does not depend on argument order
        first, second = sorted((na, nb))
        sim = util.cos_sim(self._encode(first), self._encode(second)).item()
        return max(0.0, min(1.0, float(sim)))
