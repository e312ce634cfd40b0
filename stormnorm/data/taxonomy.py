"""NWS storm event taxonomy and default abbreviation rules.

The 48 permitted event types come from NWS Directive 10-1605 (Storm Data
Preparation), section 2.1.1, listed in directive order.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

NWS_EVENT_TYPES: tuple[str, ...] = (
    "Astronomical Low Tide",
    "Avalanche",
    "Blizzard",
    "Coastal Flood",
    "Cold/Wind Chill",
    "Debris Flow",
    "Dense Fog",
    "Dense Smoke",
    "Drought",
    "Dust Devil",
    "Dust Storm",
    "Excessive Heat",
    "Extreme Cold/Wind Chill",
    "Flash Flood",
    "Flood",
    "Frost/Freeze",
    "Funnel Cloud",
    "Freezing Fog",
    "Hail",
    "Heat",
    "Heavy Rain",
    "Heavy Snow",
    "High Surf",
    "High Wind",
    "Hurricane (Typhoon)",
    "Ice Storm",
    "Lake-Effect Snow",
    "Lakeshore Flood",
    "Lightning",
    "Marine Hail",
    "Marine High Wind",
    "Marine Strong Wind",
    "Marine Thunderstorm Wind",
    "Rip Current",
    "Seiche",
    "Sleet",
    "Storm Surge/Tide",
    "Strong Wind",
    "Thunderstorm Wind",
    "Tornado",
    "Tropical Depression",
    "Tropical Storm",
    "Tsunami",
    "Volcanic Ash",
    "Waterspout",
    "Wildfire",
    "Winter Storm",
    "Winter Weather",
)

# (pattern, replacement), matched case-insensitively, applied in order.
# FLDG must precede FLD or "FLDG" would become "FloodG".
DEFAULT_REWRITE_RULES: list[tuple[str, str]] = [
    ("TSTM", "Thunderstorm"),
    ("FLDG|FLD", "Flood"),
]


def load_taxonomy(path: str | Path) -> tuple[str, ...]:
    """Read one category per line. Blank lines and '#' comments are skipped."""
    entries = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            entry = line.split("#", 1)[0].strip()
            if entry:
                entries.append(entry)
    logger.debug("Loaded %d taxonomy entries from %s", len(entries), path)
    return tuple(entries)
