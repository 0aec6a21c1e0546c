"""Tests for score combination and safety selection."""

import pytest

from cyselect.mapper.models import SAFETY_THRESHOLDS, HeuristicScores, TestMapping
from cyselect.mapper.safety import filter_by_safety, get_threshold, is_selected
from cyselect.mapper.scoring import combine_scores, normalize_score


def mapping(path: str, score: float) -> TestMapping:
    return TestMapping(test_path=path, score=score, heuristics=HeuristicScores())


class TestCombineScores:
    def test_noisy_or(self):
        assert combine_scores([0.5, 0.5, 0.5]) == pytest.approx(0.875)

    @pytest.mark.parametrize("score", [-0.5, 0.0, 0.3, 1.0, 1.7])
    def test_single_score_is_clamped(self, score):
        assert combine_scores([score]) == pytest.approx(normalize_score(score))

    def test_empty(self):
        assert combine_scores([]) == 0.0

    def test_weights_apply(self):
        assert combine_scores([1.0, 1.0], [0.5, 0.5]) == pytest.approx(0.75)

    def test_zero_weight_silences_heuristic(self):
        assert combine_scores([1.0, 0.0], [0.0, 1.0]) == 0.0

    def test_none_weight_is_neutral(self):
        assert combine_scores([0.5], [None]) == pytest.approx(0.5)

    def test_mismatched_weights_ignored(self):
        assert combine_scores([0.5, 0.5], [0.1]) == pytest.approx(0.75)

    def test_weighted_score_clamped_before_product(self):
        assert combine_scores([0.8], [2.0]) == 1.0

    @pytest.mark.parametrize(
        "scores",
        [[0.1, 0.2, 0.3], [0.9, 0.0, 0.0, 0.0], [0.4, 0.4], [1.0, 0.5]],
    )
    def test_never_below_strongest_signal(self, scores):
        assert combine_scores(scores) >= max(scores) - 1e-12


class TestThresholds:
    @pytest.mark.parametrize("level,expected", list(SAFETY_THRESHOLDS.items()))
    def test_levels(self, level, expected):
        assert get_threshold(level) == expected

    def test_custom_threshold_wins(self):
        assert get_threshold("low", 0.25) == 0.25

    def test_custom_threshold_clamped(self):
        assert get_threshold("medium", 1.5) == 1.0
        assert get_threshold("medium", -0.2) == 0.0

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown safety level"):
            get_threshold("paranoid")


class TestSelection:
    def test_zero_threshold_is_strict(self):
        assert not is_selected(0.0, 0.0)
        assert is_selected(0.0001, 0.0)

    def test_positive_threshold_is_inclusive(self):
        assert is_selected(0.4, 0.4)
        assert not is_selected(0.3999, 0.4)

    def test_filter_keeps_order(self):
        mappings = [mapping("a", 0.9), mapping("b", 0.0), mapping("c", 0.4), mapping("d", 0.2)]
        assert filter_by_safety(mappings, 0.0) == ["a", "c", "d"]
        assert filter_by_safety(mappings, 0.4) == ["a", "c"]
        assert filter_by_safety(mappings, 0.7) == ["a"]
