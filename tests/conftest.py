"""Shared fixtures for normalization tests.

Small taxonomy: Tornado / Flood / Thunderstorm Wind, plus the full NWS list.
Rules: the default TSTM and FLD/FLDG expansions.
"""

import pytest

from stormnorm.data.taxonomy import DEFAULT_REWRITE_RULES, NWS_EVENT_TYPES
from stormnorm.engine.preprocess import to_rules
from stormnorm.models.normalization import RewriteRule


@pytest.fixture
def small_taxonomy() -> list[str]:
    return ["Tornado", "Flood", "Thunderstorm Wind"]


@pytest.fixture
def nws_taxonomy() -> tuple[str, ...]:
    return NWS_EVENT_TYPES


@pytest.fixture
def default_rules() -> list[RewriteRule]:
    return to_rules(DEFAULT_REWRITE_RULES)


@pytest.fixture
def raw_records() -> list[str]:
    """Six records, four distinct raw labels, one of them unclassifiable."""
    return [
        "TORNADO",
        "TSTM WIND",
        "TORNADO",
        "THUNDERSTORM WIND",
        "XYZZY UNKNOWN EVENT",
        "TSTM WIND",
    ]
