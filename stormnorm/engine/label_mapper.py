"""Raw label -> category mapping for a full record set.

Glues preprocessing and the normalizer together, joins the result back onto
the records and reports how much of the data fell back to the catch-all
category.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import replace

from stormnorm.engine.errors import InvalidLabelSet
from stormnorm.engine.normalizer import (
    FALLBACK_CATEGORY,
    SimilarityMetric,
    best_match,
    classify_all,
    compute_similarity_matrix,
    distinct_labels,
    osa_similarity,
    validate_threshold,
)
from stormnorm.engine.preprocess import preprocess_labels
from stormnorm.models.normalization import LabelAssignment, NormalizationReport, RewriteRule

logger = logging.getLogger(__name__)

# Above this share of records in the fallback bucket the mapping needs attention
FALLBACK_WARN_PCT = 0.25


def _records(raw_labels: Iterable[str]) -> list[str]:
    """Materialize the record labels once so one-pass iterables can be reused."""
    if raw_labels is None:
        raise InvalidLabelSet("Label collection is missing")
    records = raw_labels if isinstance(raw_labels, str) else list(raw_labels)
    distinct_labels(records)
    return records


def build_label_mapping(
    raw_labels: Iterable[str],
    taxonomy: Sequence[str],
    min_similarity: float,
    rules: Sequence[RewriteRule] = (),
    metric: SimilarityMetric = osa_similarity,
    fallback: str = FALLBACK_CATEGORY,
) -> dict[str, LabelAssignment]:
    """Map every distinct raw label to an assignment.

    Labels are rewritten first; raw labels that rewrite to the same text share
    a single classification. The returned assignments carry the raw label.
    """
    rewritten = preprocess_labels(distinct_labels(raw_labels), rules)
    by_rewritten = classify_all(rewritten.values(), taxonomy, min_similarity, metric, fallback)

    mapping = {}
    for raw, text in rewritten.items():
        mapping[raw] = replace(by_rewritten[text], label=raw)

    logger.debug(
        "%d distinct raw labels collapsed to %d after rewriting",
        len(rewritten), len(by_rewritten),
    )
    return mapping


def retag(raw_labels: Iterable[str], mapping: dict[str, LabelAssignment]) -> list[str]:
    """Category for each record, in record order."""
    return [mapping[label].category for label in raw_labels]


def summarize(
    raw_labels: Iterable[str],
    mapping: dict[str, LabelAssignment],
    top_n: int = 10,
) -> NormalizationReport:
    """Count records per category and measure the fallback share."""
    raw_labels = _records(raw_labels)
    label_counts = Counter(raw_labels)
    category_counts: Counter[str] = Counter()
    fallback_counts: Counter[str] = Counter()
    for label, n in label_counts.items():
        a = mapping[label]
        category_counts[a.category] += n
        if a.is_fallback:
            fallback_counts[label] += n

    report = NormalizationReport(
        total_records=len(raw_labels),
        distinct_labels=len(label_counts),
        fallback_labels=len(fallback_counts),
        fallback_records=sum(fallback_counts.values()),
        category_counts=dict(category_counts.most_common()),
        top_fallback=fallback_counts.most_common(top_n),
    )

    logger.info(
        "Unclassified: %d of %d distinct labels (%.1f%%), %d of %d records (%.1f%%)",
        report.fallback_labels, report.distinct_labels, report.fallback_label_pct * 100,
        report.fallback_records, report.total_records, report.fallback_record_pct * 100,
    )
    if report.fallback_record_pct > FALLBACK_WARN_PCT:
        logger.warning(
            "%.1f%% of records fell back; consider lowering min_similarity or adding rewrite rules",
            report.fallback_record_pct * 100,
        )
    return report


def fallback_curve(
    raw_labels: Iterable[str],
    taxonomy: Sequence[str],
    thresholds: Iterable[float],
    rules: Sequence[RewriteRule] = (),
    metric: SimilarityMetric = osa_similarity,
) -> list[tuple[float, float, float]]:
    """(threshold, fallback share of distinct labels, fallback share of records).

    The similarity matrix is computed once and reused for every threshold.
    Both shares are non-decreasing in the threshold.
    """
    label_counts = Counter(_records(raw_labels))
    rewritten = preprocess_labels(label_counts, rules)
    matrix = compute_similarity_matrix(list(rewritten.values()), taxonomy, metric)
    best = {
        label: best_match(row, matrix.taxonomy)[1]
        for label, row in zip(matrix.labels, matrix.scores)
    }

    total = sum(label_counts.values())
    curve = []
    for t in sorted(thresholds):
        validate_threshold(t)
        below = [raw for raw, text in rewritten.items() if best[text] < t]
        label_share = len(below) / len(rewritten) if rewritten else 0.0
        record_share = sum(label_counts[raw] for raw in below) / total if total else 0.0
        curve.append((t, label_share, record_share))
    return curve
