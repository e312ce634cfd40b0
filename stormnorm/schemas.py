"""Pydantic schemas for the JSON report."""

from pydantic import BaseModel, Field

from stormnorm.models.normalization import LabelAssignment, NormalizationReport


class AssignmentOut(BaseModel):
    label: str
    category: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    best_entry: str
    is_fallback: bool


class ThresholdPoint(BaseModel):
    min_similarity: float
    fallback_label_pct: float
    fallback_record_pct: float


class FallbackLabel(BaseModel):
    label: str
    records: int


class ReportOut(BaseModel):
    min_similarity: float
    fallback_category: str
    total_records: int
    distinct_labels: int
    fallback_labels: int
    fallback_records: int
    fallback_label_pct: float
    fallback_record_pct: float
    category_counts: dict[str, int]
    top_fallback: list[FallbackLabel] = []
    assignments: list[AssignmentOut] = []
    sweep: list[ThresholdPoint] = []


def build_report_out(
    report: NormalizationReport,
    mapping: dict[str, LabelAssignment],
    min_similarity: float,
    fallback_category: str,
    sweep: list[tuple[float, float, float]] | None = None,
) -> ReportOut:
    """Convert engine results to the JSON response model."""
    return ReportOut(
        min_similarity=min_similarity,
        fallback_category=fallback_category,
        total_records=report.total_records,
        distinct_labels=report.distinct_labels,
        fallback_labels=report.fallback_labels,
        fallback_records=report.fallback_records,
        fallback_label_pct=report.fallback_label_pct,
        fallback_record_pct=report.fallback_record_pct,
        category_counts=report.category_counts,
        top_fallback=[FallbackLabel(label=label, records=n) for label, n in report.top_fallback],
        assignments=[
            AssignmentOut(
                label=a.label,
                category=a.category,
                confidence=a.confidence,
                best_entry=a.best_entry,
                is_fallback=a.is_fallback,
            )
            for a in mapping.values()
        ],
        sweep=[
            ThresholdPoint(min_similarity=t, fallback_label_pct=lp, fallback_record_pct=rp)
            for t, lp, rp in (sweep or [])
        ],
    )
