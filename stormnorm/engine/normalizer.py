"""Fuzzy event-type normalizer.

Maps each distinct raw label onto a closed taxonomy by string similarity:

  1. score every (label, taxonomy entry) pair into a dense matrix
  2. collapse each row to its best entry (ties go to the earliest entry)
  3. accept the entry if its score clears min_similarity, else fall back

Pure functions. No I/O. Cost is O(distinct labels x taxonomy size) no matter
how many records share each label.
"""

import logging
from collections.abc import Callable, Iterable, Sequence

import numpy as np
from rapidfuzz.distance import OSA

from stormnorm.engine.errors import (
    InvalidLabelSet,
    InvalidSimilarityScore,
    InvalidTaxonomy,
    InvalidThreshold,
)
from stormnorm.models.normalization import LabelAssignment, SimilarityMatrix

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Other"

SimilarityMetric = Callable[[str, str], float]


def osa_similarity(a: str, b: str) -> float:
    """Optimal string alignment similarity, normalized by the longer length.

    Edits are substitution, insertion, deletion and adjacent transposition.
    Two empty strings score 1.0; empty vs non-empty scores 0.0.
    """
    return OSA.normalized_similarity(a, b)


def validate_taxonomy(taxonomy: Sequence[str]) -> tuple[str, ...]:
    """Reject empty taxonomies, non-strings and (case-insensitive) duplicates."""
    if taxonomy is None or isinstance(taxonomy, str):
        raise InvalidTaxonomy("Taxonomy must be a sequence of category names")
    entries = tuple(taxonomy)
    if not entries:
        raise InvalidTaxonomy("Taxonomy is empty: best match is undefined")

    seen: dict[str, str] = {}
    for i, entry in enumerate(entries):
        if not isinstance(entry, str):
            raise InvalidTaxonomy(f"Taxonomy entry {i} is not a string: {entry!r}")
        key = entry.upper()
        if key in seen:
            raise InvalidTaxonomy(f"Duplicate taxonomy entry {entry!r} (already listed as {seen[key]!r})")
        seen[key] = entry
    return entries


def distinct_labels(labels: Iterable[str]) -> list[str]:
    """Distinct labels in first-seen order. Non-strings are rejected."""
    if labels is None:
        raise InvalidLabelSet("Label collection is missing")
    if isinstance(labels, str):
        raise InvalidLabelSet(f"Expected a collection of labels, got a single string: {labels!r}")

    distinct: dict[str, None] = {}
    for i, label in enumerate(labels):
        if not isinstance(label, str):
            raise InvalidLabelSet(f"Label {i} is not a string: {label!r}")
        distinct[label] = None
    return list(distinct)


def validate_threshold(min_similarity: float) -> None:
    # bool is an int subclass; True/False are never meant as thresholds
    if isinstance(min_similarity, bool) or not isinstance(min_similarity, (int, float)):
        raise InvalidThreshold(f"min_similarity must be a number, got {min_similarity!r}")
    if not 0.0 <= min_similarity <= 1.0:
        raise InvalidThreshold(f"min_similarity must be in [0, 1], got {min_similarity!r}")


def compute_similarity_matrix(
    labels: Sequence[str],
    taxonomy: Sequence[str],
    metric: SimilarityMetric = osa_similarity,
) -> SimilarityMatrix:
    """Score every distinct label against every taxonomy entry.

    Both sides are upper-cased before scoring. Rows follow the first-seen order
    of `labels`, columns follow taxonomy order.
    """
    entries = validate_taxonomy(taxonomy)
    keys = tuple(distinct_labels(labels))

    upper_entries = [e.upper() for e in entries]
    scores = np.fromiter(
        (metric(label.upper(), entry) for label in keys for entry in upper_entries),
        dtype=np.float64,
        count=len(keys) * len(entries),
    ).reshape(len(keys), len(entries))

    bad = ~((scores >= 0.0) & (scores <= 1.0))  # NaN fails both comparisons
    if bad.any():
        i, j = np.argwhere(bad)[0]
        raise InvalidSimilarityScore(keys[i], entries[j], float(scores[i, j]))

    logger.debug("Scored %d labels against %d taxonomy entries", len(keys), len(entries))
    return SimilarityMatrix(labels=keys, taxonomy=entries, scores=scores)


def best_match(row: np.ndarray, taxonomy: Sequence[str]) -> tuple[str, float]:
    """Highest-scoring entry for one matrix row.

    Ties resolve to the earliest entry in taxonomy order (np.argmax returns the
    first maximal index).
    """
    if len(row) != len(taxonomy) or len(row) == 0:
        raise InvalidTaxonomy(f"Row has {len(row)} scores for {len(taxonomy)} taxonomy entries")
    idx = int(np.argmax(row))
    return taxonomy[idx], float(row[idx])


def classify(
    label: str,
    best_entry: str,
    best_score: float,
    min_similarity: float,
    fallback: str = FALLBACK_CATEGORY,
) -> LabelAssignment:
    """Accept the best entry if best_score >= min_similarity, else fall back.

    The fallback assignment keeps best_score as its confidence so callers can
    see how close the label came.
    """
    validate_threshold(min_similarity)
    if best_score >= min_similarity:
        return LabelAssignment(label, best_entry, best_score, best_entry)
    return LabelAssignment(label, fallback, best_score, best_entry, is_fallback=True)


def classify_matrix(
    matrix: SimilarityMatrix,
    min_similarity: float,
    fallback: str = FALLBACK_CATEGORY,
) -> dict[str, LabelAssignment]:
    """Classify every row of a precomputed matrix."""
    validate_threshold(min_similarity)
    result: dict[str, LabelAssignment] = {}
    for label, row in zip(matrix.labels, matrix.scores):
        entry, score = best_match(row, matrix.taxonomy)
        result[label] = classify(label, entry, score, min_similarity, fallback)
    return result


def classify_all(
    labels: Iterable[str],
    taxonomy: Sequence[str],
    min_similarity: float,
    metric: SimilarityMetric = osa_similarity,
    fallback: str = FALLBACK_CATEGORY,
) -> dict[str, LabelAssignment]:
    """Assign every distinct label a taxonomy entry or the fallback category.

    Each distinct label is scored and classified exactly once; the result has
    exactly one key per distinct input label.
    """
    validate_threshold(min_similarity)
    matrix = compute_similarity_matrix(distinct_labels(labels), taxonomy, metric)
    result = classify_matrix(matrix, min_similarity, fallback)

    n_fallback = sum(1 for a in result.values() if a.is_fallback)
    logger.debug(
        "Classified %d distinct labels at min_similarity=%.2f (%d fell back to %r)",
        len(result), min_similarity, n_fallback, fallback,
    )
    return result
