"""Precondition violations raised by the normalization engine.

All subclass ValueError: they signal caller bugs, never low-similarity labels
(those become fallback assignments).
"""


class NormalizationError(ValueError):
    pass


class InvalidTaxonomy(NormalizationError):
    """Taxonomy is empty, holds a non-string, or repeats an entry."""


class InvalidLabelSet(NormalizationError):
    """Label collection is missing or holds a non-string."""


class InvalidThreshold(NormalizationError):
    """min_similarity outside [0, 1]."""


class InvalidSimilarityScore(NormalizationError):
    """Metric returned a score outside [0, 1] for some pair."""

    def __init__(self, label: str, entry: str, score: float):
        self.label = label
        self.entry = entry
        self.score = score
        super().__init__(
            f"Similarity metric returned {score!r} for ({label!r}, {entry!r}); expected a value in [0, 1]"
        )


class InvalidRewriteRule(NormalizationError):
    """Rewrite rule pattern does not compile."""
