import numpy as np
import pytest

from core import ChangeKind, Histogram, ScalarField, VolumeImage


def test_scalar_field_copies_and_freezes_values():
    source = np.arange(8, dtype=np.float64)
    field = ScalarField(dimensions=(2, 2, 2), values=source)
    source[0] = 99.0

    assert field.values[0] == 0.0
    with pytest.raises(ValueError):
        field.values[0] = 5.0


def test_scalar_field_validates_value_count():
    with pytest.raises(ValueError):
        ScalarField(dimensions=(2, 2, 2), values=np.zeros(7))


def test_scalar_field_rejects_negative_dimension():
    with pytest.raises(ValueError):
        ScalarField(dimensions=(2, -1, 2))


def test_scalar_field_rejects_bad_origin():
    with pytest.raises(ValueError):
        ScalarField(dimensions=(1, 1, 1), origin=(0.0, 0.0), values=[1.0])


def test_native_index_and_world_position():
    field = ScalarField(
        dimensions=(2, 3, 4),
        origin=(1.0, 2.0, 3.0),
        spacing=(0.5, 0.25, 2.0),
        values=np.arange(24),
    )
    assert field.native_index(1, 2, 3) == (1 * 3 + 2) * 4 + 3
    assert field.value_at(1, 2, 3) == 23
    assert field.world_position(1, 2, 3) == (1.5, 2.5, 9.0)


def test_from_array_uses_xyz_indexing():
    arr = np.arange(24).reshape(2, 3, 4)
    field = ScalarField.from_array(arr, name="grid")
    assert field.dimensions == (2, 3, 4)
    assert field.value_at(1, 0, 2) == arr[1, 0, 2]
    np.testing.assert_array_equal(field.as_array(), arr)


def test_value_range_ignores_non_finite():
    field = ScalarField(dimensions=(1, 1, 4), values=[np.nan, -2.0, 3.0, np.inf])
    assert field.value_range() == (-2.0, 3.0)


def test_empty_field_range():
    field = ScalarField(dimensions=(0, 0, 0))
    assert field.is_empty
    assert field.value_range() == (0.0, 0.0)


def test_volume_image_to_pyvista_keeps_framing():
    image = VolumeImage(dimensions=(2, 2, 1), origin=(1.0, 0.0, 0.0),
                        spacing=(0.5, 0.5, 0.5), values=np.arange(4))
    grid = image.to_pyvista()
    assert tuple(grid.dimensions) == (2, 2, 1)
    assert tuple(grid.origin) == (1.0, 0.0, 0.0)
    assert tuple(grid.spacing) == (0.5, 0.5, 0.5)
    np.testing.assert_array_equal(grid.point_data["values"], np.arange(4))


def test_empty_histogram():
    hist = Histogram.empty()
    assert len(hist) == 0
    assert hist.is_empty
    assert hist.total == 0
    assert hist.peak == 0
    assert hist.value_range == (0.0, 0.0)
    assert hist.pairs() == []


@pytest.mark.parametrize(
    "kind, count, fields",
    [
        (ChangeKind.ATOMS, False, False),
        (ChangeKind.BONDS, False, False),
        (ChangeKind.FIELDS_ADDED, True, True),
        (ChangeKind.FIELDS_REMOVED, True, True),
        (ChangeKind.FIELDS_MODIFIED, False, True),
    ],
)
def test_change_kind_flags(kind, count, fields):
    assert kind.affects_field_count is count
    assert kind.affects_fields is fields
