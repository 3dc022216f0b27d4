"""Tests for cosine similarity and ranking."""

import pytest

from docmind.core.similarity import cosine_similarity, rank_by_similarity


def test_identical_vectors_score_one():
    v = [0.3, -1.2, 4.0, 0.0, 2.5]
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_zero_vector_scores_zero():
    assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0


def test_dimension_mismatch_scores_zero():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0


def test_orthogonal_and_opposite_vectors():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)


def test_rank_filters_threshold_and_caps_top_k():
    query = [1.0, 0.0]
    candidates = [
        ("exact", [1.0, 0.0]),
        ("close", [0.9, 0.1]),
        ("closer", [0.95, 0.05]),
        ("far", [0.0, 1.0]),
    ]

    ranked = rank_by_similarity(query, candidates, threshold=0.7, top_k=2)

    assert [key for key, _ in ranked] == ["exact", "closer"]
    assert all(score >= 0.7 for _, score in ranked)


def test_rank_with_non_positive_top_k():
    assert rank_by_similarity([1.0], [("a", [1.0])], threshold=0.0, top_k=0) == []
