"""Tests for statistics helpers."""

import pytest

from .lib import calculate_effect_size, interpret_effect_size, mean, std_dev


class TestDescriptive:
    """Tests for mean and std_dev."""

    @pytest.mark.unit
    def test_mean(self):
        assert mean([70, 80, 90]) == 80
        assert mean([]) == 0

    @pytest.mark.unit
    def test_population_std_dev(self):
        assert std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
        assert std_dev([5]) == 0
        assert std_dev([]) == 0


class TestEffectSize:
    """Tests for Cohen's d."""

    @pytest.mark.unit
    def test_large_positive(self):
        effect = calculate_effect_size([70, 72, 68], [40, 42, 38])
        # pooled sd is 2, mean difference 30
        assert effect.cohens_d == 15.0
        assert effect.interpretation == "large"

    @pytest.mark.unit
    def test_single_values(self):
        effect = calculate_effect_size([50], [50])
        assert effect.cohens_d == 0
        assert effect.interpretation == "negligible"

    @pytest.mark.unit
    def test_zero_variance(self):
        effect = calculate_effect_size([60, 60], [40, 40])
        assert effect.cohens_d == 0

    @pytest.mark.unit
    def test_negative_direction(self):
        effect = calculate_effect_size([40, 42, 38], [70, 72, 68])
        assert effect.cohens_d == -15.0
        assert effect.interpretation == "large"

    @pytest.mark.unit
    def test_rounded(self):
        effect = calculate_effect_size([1, 2, 3], [1, 2, 4])
        assert effect.cohens_d == round(effect.cohens_d, 2)

    @pytest.mark.unit
    def test_to_dict(self):
        assert calculate_effect_size([50], [50]).to_dict() == {
            "cohensD": 0.0,
            "interpretation": "negligible",
        }

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "d, label",
        [(0.0, "negligible"), (0.19, "negligible"), (0.2, "small"), (-0.49, "small"),
         (0.5, "medium"), (0.79, "medium"), (0.8, "large"), (-3.0, "large")],
    )
    def test_interpretation(self, d, label):
        assert interpret_effect_size(d) == label
