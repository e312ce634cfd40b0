"""Reader for the event-type column of a NOAA Storm Events CSV.

Accepts plain CSV or the bz2-compressed StormData.csv.bz2 as distributed.
Download and caching happen elsewhere.
"""

import bz2
import csv
import logging
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


class MissingColumn(KeyError):
    """The requested label column is not in the CSV header."""


def _open_text(path: Path):
    if path.suffix == ".bz2":
        return bz2.open(path, "rt", encoding="utf-8", errors="replace", newline="")
    return open(path, encoding="utf-8", errors="replace", newline="")


def iter_event_labels(path: str | Path, column: str = "EVTYPE") -> Iterator[str]:
    """Yield the stripped label of every record. Missing cells yield ''."""
    path = Path(path)
    with _open_text(path) as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or column not in reader.fieldnames:
            raise MissingColumn(f"Column {column!r} not found in {path}")
        for row in reader:
            yield (row.get(column) or "").strip()


def read_event_labels(path: str | Path, column: str = "EVTYPE") -> list[str]:
    labels = list(iter_event_labels(path, column))
    logger.info("Read %d records from %s", len(labels), path)
    return labels
