"""
Goal-name similarity measures used by the compatibility scorer.

A measure is any callable ``(a, b) -> float`` that is symmetric, returns a
value in [0, 1], and returns 1.0 for names that normalize to the same text.
"""
import re
from typing import Callable, FrozenSet

NameSimilarity = Callable[[str, str], float]

_TOKEN_RE = re.compile(r"[a-z0-9]+")


def normalize_name(name: str) -> str:
    return " ".join(_TOKEN_RE.findall(name.lower()))


def tokens(name: str) -> FrozenSet[str]:
    return frozenset(_TOKEN_RE.findall(name.lower()))


def token_jaccard(a: str, b: str) -> float:
    """Jaccard index of the word sets of two names."""
    if normalize_name(a) == normalize_name(b):
        return 1.0
    ta, tb = tokens(a), tokens(b)
    union = ta | tb
    if not union:
        return 0.0
    return len(ta & tb) / len(union)


def exact_match(a: str, b: str) -> float:
    """1.0 when the normalized names are equal, else 0.0."""
    return 1.0 if normalize_name(a) == normalize_name(b) else 0.0
