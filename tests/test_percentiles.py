"""
Tests for the percentile calculator.
"""

import pytest

from pipelines.benchmark.percentiles import calculate_percentile, calculate_percentiles


class TestCalculatePercentile:
    """Linear interpolation between closest ranks."""

    def test_five_salaries(self):
        """Documented example: quartiles land exactly on elements."""
        result = calculate_percentiles([30000, 40000, 50000, 60000, 70000])

        assert result.lower == 40000
        assert result.median == 50000
        assert result.upper == 60000

    def test_single_element(self):
        """Every percentile of one value is that value."""
        result = calculate_percentiles([42000])

        assert (result.lower, result.median, result.upper) == (42000, 42000, 42000)

    def test_two_elements_interpolate(self):
        """Two values are interpolated by the fractional index."""
        result = calculate_percentiles([100, 200])

        assert result.lower == 125
        assert result.median == 150
        assert result.upper == 175

    def test_rounds_half_up(self):
        """Fractional results round to the nearest whole unit, halves up."""
        assert calculate_percentile([10, 20, 30, 40], 0.25) == 18  # 17.5
        assert calculate_percentile([10, 20, 30, 40], 0.50) == 25
        assert calculate_percentile([10, 20, 30, 40], 0.75) == 33  # 32.5

    def test_odd_length_median_is_middle_element(self):
        values = [31000, 33000, 38000, 41000, 45000, 52000, 60000]
        assert calculate_percentile(values, 0.5) == 41000

    def test_ties(self):
        """Repeated values give repeated percentiles."""
        result = calculate_percentiles([45000, 45000, 45000, 45000])

        assert result.lower == result.median == result.upper == 45000

    def test_large_input(self):
        values = list(range(1000, 101000, 1000))  # 100 values
        result = calculate_percentiles(values)

        # index 24.75 -> 25000 + 0.75 * 1000
        assert result.lower == 25750
        assert result.median == 50500
        assert result.upper == 75250

    def test_decimal_salaries(self):
        """Non-integer salaries are rounded in the result."""
        assert calculate_percentile([40000.4, 40000.4], 0.5) == 40000

    def test_empty_sequence_raises(self):
        with pytest.raises(ValueError):
            calculate_percentile([], 0.5)

    def test_percentile_out_of_range_raises(self):
        with pytest.raises(ValueError):
            calculate_percentile([1, 2, 3], 1.5)


class TestPercentileOrdering:
    """lower <= median <= upper for any ascending input."""

    @pytest.mark.parametrize(
        "values",
        [
            [1],
            [1, 1000000],
            [5, 5, 6],
            [28000, 29500, 29500, 31000, 47000, 90000],
            [33000, 34000, 35000, 36000, 37000, 38000, 39000, 40000, 41000],
        ],
    )
    def test_ordering(self, values):
        result = calculate_percentiles(values)
        assert result.lower <= result.median <= result.upper
        assert values[0] <= result.lower
        assert result.upper <= values[-1]
