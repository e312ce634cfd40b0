"""Tests for the fuzzy event-type normalizer."""

import math

import numpy as np
import pytest

from stormnorm.engine.errors import (
    InvalidLabelSet,
    InvalidSimilarityScore,
    InvalidTaxonomy,
    InvalidThreshold,
)
from stormnorm.engine.normalizer import (
    FALLBACK_CATEGORY,
    best_match,
    classify,
    classify_all,
    compute_similarity_matrix,
    osa_similarity,
)


def exact_metric(a: str, b: str) -> float:
    return 1.0 if a == b else 0.0


class TestOSASimilarity:
    def test_identical_strings_score_one(self):
        assert osa_similarity("TORNADO", "TORNADO") == 1.0

    def test_both_empty_score_one(self):
        assert osa_similarity("", "") == 1.0

    def test_empty_vs_nonempty_scores_zero(self):
        assert osa_similarity("", "HAIL") == 0.0

    def test_adjacent_transposition_is_one_edit(self):
        """TORANDO -> TORNADO is a single transposition over 7 chars."""
        assert osa_similarity("TORANDO", "TORNADO") == pytest.approx(6 / 7)

    def test_normalized_by_longer_string(self):
        # HAIL -> HAIL STORM: 6 insertions over 10 chars
        assert osa_similarity("HAIL", "HAIL STORM") == pytest.approx(0.4)


class TestSimilarityMatrix:
    def test_dense_shape(self, small_taxonomy):
        m = compute_similarity_matrix(["TORNADO", "FLOOD"], small_taxonomy)
        assert m.scores.shape == (2, 3)
        assert m.scores.dtype == np.float64
        assert not np.isnan(m.scores).any()

    def test_case_insensitive(self, small_taxonomy):
        m = compute_similarity_matrix(["tornado", "TORNADO", "ToRnAdO"], small_taxonomy)
        for label in m.labels:
            assert m.score(label, "Tornado") == 1.0

    def test_case_normalization_applies_to_taxonomy_side(self):
        m = compute_similarity_matrix(["HAIL"], ["hail"], metric=exact_metric)
        assert m.score("HAIL", "hail") == 1.0

    def test_duplicate_labels_collapse_to_one_row(self, small_taxonomy):
        m = compute_similarity_matrix(["FLOOD", "TORNADO", "FLOOD"], small_taxonomy)
        assert m.labels == ("FLOOD", "TORNADO")

    def test_keyed_by_pair_not_position(self, small_taxonomy):
        a = compute_similarity_matrix(["FLOOD", "HAIL"], small_taxonomy)
        b = compute_similarity_matrix(["HAIL", "FLOOD"], list(reversed(small_taxonomy)))
        for label in ["FLOOD", "HAIL"]:
            for entry in small_taxonomy:
                assert a.score(label, entry) == b.score(label, entry)

    def test_row_lookup(self, small_taxonomy):
        m = compute_similarity_matrix(["FLOOD"], small_taxonomy)
        assert list(m.row("FLOOD")) == [m.score("FLOOD", e) for e in small_taxonomy]

    def test_empty_label_set(self, small_taxonomy):
        m = compute_similarity_matrix([], small_taxonomy)
        assert m.scores.shape == (0, 3)

    def test_custom_metric_out_of_range_fails_fast(self, small_taxonomy):
        with pytest.raises(InvalidSimilarityScore) as exc:
            compute_similarity_matrix(["HAIL"], small_taxonomy, metric=lambda a, b: 2.0)
        assert exc.value.label == "HAIL"
        assert exc.value.entry == "Tornado"

    def test_custom_metric_nan_fails_fast(self, small_taxonomy):
        with pytest.raises(InvalidSimilarityScore):
            compute_similarity_matrix(["HAIL"], small_taxonomy, metric=lambda a, b: math.nan)


class TestBestMatch:
    def test_picks_maximum(self):
        entry, score = best_match(np.array([0.2, 0.9, 0.5]), ["A", "B", "C"])
        assert entry == "B"
        assert score == 0.9

    def test_tie_goes_to_earliest_entry(self):
        entry, _ = best_match(np.array([0.3, 0.7, 0.7, 0.7]), ["A", "B", "C", "D"])
        assert entry == "B"

    def test_synthetic_tie_through_metric(self):
        """AB is one substitution from both AC and AD: the earlier entry wins."""
        assert classify_all(["AB"], ["AC", "AD"], 0.0)["AB"].category == "AC"
        assert classify_all(["AB"], ["AD", "AC"], 0.0)["AB"].category == "AD"

    def test_row_length_mismatch(self):
        with pytest.raises(InvalidTaxonomy):
            best_match(np.array([0.1, 0.2]), ["A"])


class TestClassify:
    def test_accepts_at_threshold(self):
        a = classify("TORNDO", "Tornado", 0.4, 0.4)
        assert a.category == "Tornado"
        assert not a.is_fallback

    def test_falls_back_below_threshold(self):
        a = classify("XYZ", "Tornado", 0.39, 0.4)
        assert a.category == FALLBACK_CATEGORY
        assert a.is_fallback
        assert a.confidence == 0.39
        assert a.best_entry == "Tornado"

    def test_custom_fallback_name(self):
        a = classify("XYZ", "Tornado", 0.1, 0.4, fallback="Unclassified")
        assert a.category == "Unclassified"

    @pytest.mark.parametrize("threshold", [-0.1, 1.01, float("nan"), "0.4", None, True, False])
    def test_rejects_invalid_threshold(self, threshold):
        with pytest.raises(InvalidThreshold):
            classify("X", "Tornado", 0.5, threshold)


class TestClassifyAll:
    def test_key_set_equals_distinct_labels(self, small_taxonomy):
        labels = ["TORNADO", "FLOOD", "TORNADO", "HAIL", "", "FLOOD"]
        result = classify_all(labels, small_taxonomy, 0.4)
        assert list(result) == ["TORNADO", "FLOOD", "HAIL", ""]

    def test_exact_match_scores_one(self, small_taxonomy):
        a = classify_all(["TORNADO"], small_taxonomy, 1.0)["TORNADO"]
        assert a.category == "Tornado"
        assert a.confidence == 1.0

    def test_misspelling_matches(self, nws_taxonomy):
        result = classify_all(["TORNDAO", "HEAVY SNOWW", "HAIL 1.75"], nws_taxonomy, 0.4)
        assert result["TORNDAO"].category == "Tornado"
        assert result["HEAVY SNOWW"].category == "Heavy Snow"
        assert result["HAIL 1.75"].category == "Hail"

    def test_unrelated_label_falls_back(self):
        a = classify_all(["XYZZY UNKNOWN EVENT"], ["Tornado", "Flood"], 0.4)["XYZZY UNKNOWN EVENT"]
        assert a.category == "Other"
        assert a.is_fallback
        assert a.confidence < 0.4

    def test_empty_label_against_zero_threshold(self, small_taxonomy):
        """Empty vs non-empty scores 0.0, which still clears a 0.0 threshold."""
        a = classify_all([""], small_taxonomy, 0.0)[""]
        assert a.category == "Tornado"
        assert a.confidence == 0.0

    def test_fallback_is_monotonic_in_threshold(self, nws_taxonomy):
        labels = ["TORNADO", "TORNDAO", "HVY SNOW", "WIND DAMAGE", "URBAN/SML STREAM FLD", "SUMMARY OF MAY 3", "RECORD WARMTH"]
        previous: set[str] = set()
        for threshold in [0.0, 0.2, 0.3, 0.4, 0.5, 0.6, 0.8, 1.0]:
            result = classify_all(labels, nws_taxonomy, threshold)
            fallback = {label for label, a in result.items() if a.is_fallback}
            assert previous <= fallback
            previous = fallback

    def test_deterministic(self, nws_taxonomy):
        labels = ["TSTM WIND", "AB", "FLASH FLOODING", "COLD", "SNOW"]
        first = classify_all(labels, nws_taxonomy, 0.4)
        second = classify_all(labels, nws_taxonomy, 0.4)
        assert first == second
        assert list(first) == list(second)

    def test_accepts_generator(self, small_taxonomy):
        result = classify_all((s for s in ["FLOOD", "FLOOD"]), small_taxonomy, 0.4)
        assert list(result) == ["FLOOD"]

    def test_custom_metric(self, small_taxonomy):
        result = classify_all(["flood", "FLOODS"], small_taxonomy, 0.5, metric=exact_metric)
        assert result["flood"].category == "Flood"
        assert result["FLOODS"].is_fallback


class TestPreconditions:
    def test_empty_taxonomy(self):
        with pytest.raises(InvalidTaxonomy):
            classify_all(["TORNADO"], [], 0.4)

    def test_duplicate_taxonomy_entry(self):
        with pytest.raises(InvalidTaxonomy, match="Flood"):
            classify_all(["TORNADO"], ["Flood", "Tornado", "Flood"], 0.4)

    def test_case_insensitive_duplicate_taxonomy_entry(self):
        with pytest.raises(InvalidTaxonomy):
            classify_all(["TORNADO"], ["Flood", "FLOOD"], 0.4)

    def test_non_string_taxonomy_entry(self):
        with pytest.raises(InvalidTaxonomy):
            classify_all(["TORNADO"], ["Flood", 3], 0.4)

    def test_taxonomy_given_as_string(self):
        with pytest.raises(InvalidTaxonomy):
            classify_all(["TORNADO"], "Tornado", 0.4)

    def test_missing_labels(self, small_taxonomy):
        with pytest.raises(InvalidLabelSet):
            classify_all(None, small_taxonomy, 0.4)

    def test_labels_given_as_string(self, small_taxonomy):
        with pytest.raises(InvalidLabelSet):
            classify_all("TORNADO", small_taxonomy, 0.4)

    def test_non_string_label_names_index(self, small_taxonomy):
        with pytest.raises(InvalidLabelSet, match="Label 1"):
            classify_all(["TORNADO", None], small_taxonomy, 0.4)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            classify_all(["TORNADO"], [], 0.4)

    def test_missing_threshold_is_a_type_error(self, small_taxonomy):
        with pytest.raises(TypeError):
            classify_all(["TORNADO"], small_taxonomy)
