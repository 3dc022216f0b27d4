"""Vector similarity helpers for memory retrieval."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity between two embedding vectors.

    Returns 0.0 when either vector has zero magnitude or the dimensions
    differ, so retrieval degrades to "no match" instead of raising.
    """
    if len(a) != len(b) or len(a) == 0:
        return 0.0

    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(va, vb) / (norm_a * norm_b))


def rank_by_similarity(
    query: Sequence[float],
    candidates: Sequence[tuple[str, Sequence[float]]],
    threshold: float,
    top_k: int,
) -> list[tuple[str, float]]:
    """
    Score (key, vector) candidates against a query vector.

    Args:
        query: Query embedding
        candidates: (key, embedding) pairs
        threshold: Minimum similarity to keep
        top_k: Max results

    Returns:
        (key, score) pairs, most similar first
    """
    if top_k <= 0:
        return []

    scored = [(key, cosine_similarity(query, vector)) for key, vector in candidates]
    kept = [(key, score) for key, score in scored if score >= threshold]
    kept.sort(key=lambda pair: pair[1], reverse=True)
    return kept[:top_k]
