"""Label normalization data types."""

import re
from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class RewriteRule:
    """Case-insensitive regex rewrite applied to a raw label before scoring.

    `pattern` may be a simple alternation ("FLDG|FLD"); the first alternative
    that matches wins. `replacement` is literal text (no backreferences).
    """
    pattern: str
    replacement: str
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", re.compile(self.pattern, re.IGNORECASE))

    def apply(self, text: str) -> str:
        return self.compiled.sub(lambda _m: self.replacement, text)


@dataclass(frozen=True)
class SimilarityMatrix:
    labels: tuple[str, ...]
    taxonomy: tuple[str, ...]
    scores: np.ndarray  # shape (len(labels), len(taxonomy)), float64

    def row(self, label: str) -> np.ndarray:
        return self.scores[self.labels.index(label)]

    def score(self, label: str, entry: str) -> float:
        return float(self.scores[self.labels.index(label), self.taxonomy.index(entry)])


@dataclass(frozen=True)
class LabelAssignment:
    label: str
    category: str  # taxonomy entry or fallback category
    confidence: float  # best score, kept even when the fallback is chosen
    best_entry: str  # nearest taxonomy entry regardless of threshold
    is_fallback: bool = False


@dataclass(frozen=True)
class NormalizationReport:
    total_records: int
    distinct_labels: int
    fallback_labels: int
    fallback_records: int
    category_counts: dict[str, int] = field(default_factory=dict)
    top_fallback: list[tuple[str, int]] = field(default_factory=list)

    @property
    def fallback_label_pct(self) -> float:
        if self.distinct_labels == 0:
            return 0.0
        return self.fallback_labels / self.distinct_labels

    @property
    def fallback_record_pct(self) -> float:
        if self.total_records == 0:
            return 0.0
        return self.fallback_records / self.total_records
