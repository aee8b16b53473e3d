import numpy as np
import pytest

import config
from core import ScalarField, build_histogram, field_to_volume_image


def _field(values, dims):
    return ScalarField(dimensions=dims, values=np.asarray(values, dtype=np.float64))


def test_populations_sum_to_sample_count():
    rng = np.random.default_rng(3)
    field = _field(rng.normal(size=4 * 5 * 6), (4, 5, 6))
    hist = build_histogram(field, bins=32)

    assert len(hist) == 32
    assert hist.total == field.size
    assert hist.excluded == 0


def test_bin_centers_strictly_ascending():
    field = _field(np.linspace(-3.0, 7.0, 27), (3, 3, 3))
    hist = build_histogram(field, bins=10)
    assert np.all(np.diff(hist.values) > 0)
    assert len(hist.edges) == len(hist.values) + 1
    assert hist.value_range == (-3.0, 7.0)


def test_default_bin_count_comes_from_config():
    field = _field(np.arange(8), (2, 2, 2))
    assert len(build_histogram(field)) == config.HISTOGRAM_BINS


def test_same_histogram_for_either_layout():
    rng = np.random.default_rng(11)
    field = _field(rng.uniform(size=3 * 4 * 2), (3, 4, 2))
    native = build_histogram(field, bins=8)
    converted = build_histogram(field_to_volume_image(field), bins=8)
    np.testing.assert_array_equal(native.populations, converted.populations)
    np.testing.assert_allclose(native.values, converted.values)


def test_empty_field_gives_empty_histogram():
    hist = build_histogram(ScalarField(dimensions=(0, 4, 4)))
    assert hist.is_empty
    assert hist.total == 0


def test_non_finite_samples_are_excluded():
    field = _field([1.0, 2.0, np.nan, 3.0, np.inf, 4.0, -np.inf, 5.0], (2, 2, 2))
    hist = build_histogram(field, bins=4)
    assert hist.total == 5
    assert hist.excluded == 3


def test_all_nan_field():
    hist = build_histogram(_field([np.nan] * 8, (2, 2, 2)))
    assert hist.is_empty
    assert hist.excluded == 8


def test_constant_field_lands_in_one_bin():
    hist = build_histogram(_field(np.full(27, 2.5), (3, 3, 3)), bins=5)
    assert hist.total == 27
    assert hist.peak == 27
    assert np.count_nonzero(hist.populations) == 1


def test_explicit_range_counts_outliers_as_excluded():
    hist = build_histogram(np.array([0.0, 0.5, 1.0, 2.0, 3.0]), bins=2, value_range=(0.0, 1.0))
    assert hist.total == 3
    assert hist.excluded == 2


def test_non_positive_bins_raise():
    with pytest.raises(ValueError):
        build_histogram(np.arange(4.0), bins=0)


def test_huge_constant_field_gets_a_usable_span():
    hist = build_histogram(np.full(8, 1e17), bins=16)
    assert len(hist) == 16
    assert hist.total == 8
    assert np.count_nonzero(hist.populations) == 1
    assert np.all(np.diff(hist.values) > 0)


def test_span_narrower_than_float_resolution():
    field = _field([1.0, 1.0 + 1e-15, 1.0 + 2e-15], (1, 1, 3))
    hist = build_histogram(field)
    assert len(hist) == config.HISTOGRAM_BINS
    assert hist.total == 3
    assert hist.excluded == 0
    assert np.all(np.diff(hist.values) > 0)
