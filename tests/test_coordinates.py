import unittest
import numpy as np

from core import ScalarField, VolumeImage
from core.coordinates import (
    native_index,
    renderer_index,
    native_to_renderer_order,
    renderer_to_native_order,
    field_to_volume_image,
    volume_image_to_field,
    world_to_index,
)


class TestLayoutConversion(unittest.TestCase):
    def test_two_cubed_reorders_exactly(self):
        field = ScalarField(dimensions=(2, 2, 2), values=np.arange(8, dtype=np.float32))
        image = field_to_volume_image(field)
        self.assertEqual(image.values.tolist(), [0, 4, 2, 6, 1, 5, 3, 7])

    def test_every_sample_lands_at_renderer_index(self):
        dims = (3, 4, 5)
        rng = np.random.default_rng(7)
        field = ScalarField(dimensions=dims, values=rng.normal(size=60))
        image = field_to_volume_image(field)

        for i in range(3):
            for j in range(4):
                for k in range(5):
                    self.assertEqual(
                        image.values[renderer_index((i, j, k), dims)],
                        field.values[native_index((i, j, k), dims)],
                    )
                    self.assertEqual(image.value_at(i, j, k), field.value_at(i, j, k))

    def test_conversion_is_a_bijection(self):
        dims = (4, 3, 2)
        values = np.arange(24, dtype=np.int64)
        reordered = native_to_renderer_order(values, dims)
        self.assertEqual(sorted(reordered.tolist()), values.tolist())
        np.testing.assert_array_equal(renderer_to_native_order(reordered, dims), values)

    def test_framing_is_preserved(self):
        field = ScalarField(
            dimensions=(2, 3, 4),
            origin=(-1.5, 0.25, 3.0),
            spacing=(0.1, 0.2, 0.3),
            values=np.ones(24),
        )
        image = field_to_volume_image(field)
        self.assertEqual(image.dimensions, (2, 3, 4))
        self.assertEqual(image.origin, (-1.5, 0.25, 3.0))
        self.assertEqual(image.spacing, (0.1, 0.2, 0.3))

    def test_dtype_is_preserved(self):
        field = ScalarField(dimensions=(2, 1, 3), values=np.arange(6, dtype=np.float32))
        self.assertEqual(field_to_volume_image(field).values.dtype, np.float32)

    def test_zero_dimension_gives_empty_image(self):
        field = ScalarField(dimensions=(0, 3, 3))
        image = field_to_volume_image(field)
        self.assertTrue(image.is_empty)
        self.assertEqual(image.dimensions, (0, 3, 3))

    def test_flat_axis_is_identity(self):
        # With nx == 1 and nz == 1 both orders walk y only.
        field = ScalarField(dimensions=(1, 5, 1), values=np.arange(5))
        self.assertEqual(field_to_volume_image(field).values.tolist(), [0, 1, 2, 3, 4])

    def test_round_trip_through_image(self):
        field = ScalarField(dimensions=(3, 2, 2), values=np.arange(12), name="rho")
        back = volume_image_to_field(field_to_volume_image(field), name="rho")
        np.testing.assert_array_equal(back.values, field.values)
        self.assertEqual(back.name, "rho")

    def test_size_mismatch_raises(self):
        with self.assertRaises(ValueError):
            native_to_renderer_order(np.arange(7), (2, 2, 2))
        with self.assertRaises(ValueError):
            renderer_to_native_order(np.arange(9), (2, 2, 2))


class TestWorldToIndex(unittest.TestCase):
    def test_rounds_to_nearest_sample(self):
        idx = world_to_index((14.4, 23.2, 34.1), (2.0, 3.0, 4.0), (10.0, 20.0, 30.0))
        self.assertEqual(idx, (2, 1, 1))

    def test_zero_spacing_raises(self):
        with self.assertRaises(ValueError):
            world_to_index((0.0, 0.0, 0.0), (0.0, 1.0, 1.0), (0.0, 0.0, 0.0))


def test_image_index_matches_vtk_point_order():
    image = VolumeImage(dimensions=(3, 2, 2), values=np.arange(12))
    grid = image.to_pyvista()
    assert grid.n_points == 12
    # vtkImageData point id is i + nx*(j + ny*k)
    assert grid.point_data["values"][image.renderer_index(2, 1, 1)] == image.value_at(2, 1, 1)
