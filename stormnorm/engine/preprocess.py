"""Abbreviation expansion for raw event-type labels.

Pure functions. Rules run in listed order, each one seeing the text as
rewritten by the rules before it.
"""

import re
from collections.abc import Iterable, Sequence

from stormnorm.engine.errors import InvalidRewriteRule
from stormnorm.models.normalization import RewriteRule


def to_rules(pairs: Iterable[tuple[str, str]]) -> list[RewriteRule]:
    """Build rules from (pattern, replacement) pairs, e.g. loaded from settings."""
    rules = []
    for pattern, replacement in pairs:
        try:
            rules.append(RewriteRule(pattern, replacement))
        except re.error as e:
            raise InvalidRewriteRule(f"Bad rewrite pattern {pattern!r}: {e}") from e
    return rules


def apply_rewrite_rules(label: str, rules: Sequence[RewriteRule]) -> str:
    """Rewrite one label. Text no rule matches passes through unchanged."""
    text = label
    for rule in rules:
        text = rule.apply(text)
    return text


def preprocess_labels(labels: Iterable[str], rules: Sequence[RewriteRule]) -> dict[str, str]:
    """Map each distinct raw label to its rewritten form, in first-seen order."""
    return {label: apply_rewrite_rules(label, rules) for label in dict.fromkeys(labels)}
