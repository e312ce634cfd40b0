"""CLI for normalizing the event-type column of a Storm Events CSV.

Usage:
    python -m stormnorm.cli data/StormData.csv.bz2
    python -m stormnorm.cli events.csv --min-similarity 0.5 --top 20
    python -m stormnorm.cli events.csv --sweep 0.2,0.3,0.4,0.5,0.6
    python -m stormnorm.cli events.csv --taxonomy taxonomy.txt --json > report.json
"""

import argparse
import logging
import sys

from stormnorm.config import settings
from stormnorm.data.storm_events import MissingColumn, read_event_labels
from stormnorm.data.taxonomy import NWS_EVENT_TYPES, load_taxonomy
from stormnorm.engine.errors import NormalizationError
from stormnorm.engine.label_mapper import build_label_mapping, fallback_curve, summarize
from stormnorm.engine.preprocess import to_rules
from stormnorm.schemas import build_report_out

logger = logging.getLogger(__name__)


def _pct(v: float) -> str:
    return f"{v * 100:.1f}%"


def _header(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def print_summary(report, min_similarity: float, fallback: str) -> None:
    _header("Event Type Normalization")
    print(f"  Records:              {report.total_records:,}")
    print(f"  Distinct labels:      {report.distinct_labels:,}")
    print(f"  Min similarity:       {min_similarity:.2f}")
    print(f"  Unclassified labels:  {report.fallback_labels:,} ({_pct(report.fallback_label_pct)})")
    print(f"  Unclassified records: {report.fallback_records:,} ({_pct(report.fallback_record_pct)})")
    print(f"  Fallback category:    {fallback}")


def print_categories(report) -> None:
    _header("Records by Category")
    for category, n in report.category_counts.items():
        share = n / report.total_records if report.total_records else 0.0
        print(f"  {category:<28} {n:>10,}  {_pct(share):>6}")


def print_fallback(report, mapping) -> None:
    if not report.top_fallback:
        return
    _header("Most Frequent Unclassified Labels")
    for label, n in report.top_fallback:
        a = mapping[label]
        print(f"  {label[:30]:<30} {n:>8,}  nearest: {a.best_entry} ({a.confidence:.2f})")


def print_sweep(curve) -> None:
    _header("Fallback Rate by Threshold")
    print(f"  {'Threshold':>9}  {'Labels':>8}  {'Records':>8}")
    for t, label_pct, record_pct in curve:
        print(f"  {t:>9.2f}  {_pct(label_pct):>8}  {_pct(record_pct):>8}")


def _parse_thresholds(raw: str) -> list[float]:
    try:
        return [float(x) for x in raw.split(",") if x.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected comma-separated numbers, got {raw!r}") from None


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fuzzy-normalize storm event-type labels")
    parser.add_argument("path", help="Storm Events CSV (.csv or .csv.bz2)")
    parser.add_argument("--column", default=settings.label_column, help=f"Label column (default: {settings.label_column})")
    parser.add_argument("--taxonomy", help="File with one category per line (default: NWS event types)")
    parser.add_argument(
        "--min-similarity", type=float, default=settings.min_similarity,
        help=f"Acceptance threshold in [0, 1] (default: {settings.min_similarity})",
    )
    parser.add_argument("--top", type=int, default=15, help="Unclassified labels to list (default: 15)")
    parser.add_argument("--sweep", type=_parse_thresholds, help="Comma-separated thresholds to compare")
    parser.add_argument("--json", action="store_true", help="Print a JSON report instead of tables")

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    fallback = settings.fallback_category

    try:
        rules = to_rules(settings.rewrite_rules)
        taxonomy = load_taxonomy(args.taxonomy) if args.taxonomy else NWS_EVENT_TYPES
        labels = read_event_labels(args.path, args.column)
        mapping = build_label_mapping(labels, taxonomy, args.min_similarity, rules, fallback=fallback)
        report = summarize(labels, mapping, top_n=args.top)
        curve = fallback_curve(labels, taxonomy, args.sweep, rules) if args.sweep else None
    except (OSError, MissingColumn, NormalizationError) as e:
        logger.error("Normalization failed: %s", e)
        return 1

    if args.json:
        out = build_report_out(report, mapping, args.min_similarity, fallback, curve)
        print(out.model_dump_json(indent=2))
        return 0

    print_summary(report, args.min_similarity, fallback)
    print_categories(report)
    print_fallback(report, mapping)
    if curve:
        print_sweep(curve)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
