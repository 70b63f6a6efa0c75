"""
Tests for sphere-mapped fBm heightmap generation.
"""

import numpy as np
import pytest

from py_imperia.core.errors import InvalidParameter
from py_imperia.core.heightmap_generator import (
    GeoBounds,
    HeightmapGenerator,
    NoiseParams,
    generate_heightmap,
    octave_amplitudes,
    summarize_heightmap,
    validate_heightmap,
)


class TestHeightmapGenerator:
    """Test heightmap generation functionality."""

    @pytest.fixture
    def generator(self, fast_noise):
        return HeightmapGenerator(fast_noise)

    def test_output_shape_and_dtype(self, generator):
        """Samples are laid out (height, width) as float64."""
        samples = generator.generate(12, 5)

        assert samples.shape == (5, 12)
        assert samples.dtype == np.float64

    def test_values_within_unit_range(self, generator):
        samples = generator.generate(16, 8)

        assert np.all(samples >= -1.0)
        assert np.all(samples <= 1.0)
        assert np.all(np.isfinite(samples))

    def test_same_seed_is_deterministic(self, fast_noise):
        first = generate_heightmap(10, 6, fast_noise)
        second = generate_heightmap(10, 6, fast_noise)

        np.testing.assert_array_equal(first, second)

    def test_different_seeds_differ(self):
        first = generate_heightmap(10, 6, NoiseParams(seed=1, octaves=2))
        second = generate_heightmap(10, 6, NoiseParams(seed=2, octaves=2))

        assert not np.array_equal(first, second)

    def test_heightmap_is_not_flat(self, generator):
        samples = generator.generate(20, 10)

        assert samples.max() - samples.min() > 0.01

    def test_single_cell_map(self, generator):
        samples = generator.generate(1, 1)

        assert samples.shape == (1, 1)

    def test_sample_matches_generate(self, generator):
        """generate() evaluates sample() at each projected grid point."""
        points = generator.sphere_points(6, 4)
        samples = generator.generate(6, 4)

        x, y, z = points[2, 3]
        assert samples[2, 3] == pytest.approx(generator.sample(float(x), float(y), float(z)))

    def test_check_called_once_per_row(self, generator):
        stages = []

        generator.generate(3, 5, check=stages.append)

        assert stages == ["heightmap"] * 5

    def test_check_can_abort_sampling(self, generator):
        calls = []

        def stop_after_two_rows(stage):
            calls.append(stage)
            if len(calls) > 2:
                raise RuntimeError("stop")

        with pytest.raises(RuntimeError):
            generator.generate(4, 10, check=stop_after_two_rows)
        assert len(calls) == 3

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3), (2.5, 3)])
    def test_invalid_dimensions(self, generator, width, height):
        with pytest.raises(InvalidParameter):
            generator.generate(width, height)


class TestSphereMapping:
    """Test projection of grid cells onto the unit sphere."""

    def test_points_lie_on_unit_sphere(self):
        points = HeightmapGenerator(NoiseParams(octaves=1)).sphere_points(8, 4)

        assert points.shape == (4, 8, 3)
        np.testing.assert_allclose(np.linalg.norm(points, axis=-1), 1.0)

    def test_rows_sampled_at_cell_centres(self):
        """Row 0 sits half a cell below the north pole, mirrored by the last row."""
        points = HeightmapGenerator(NoiseParams(octaves=1)).sphere_points(8, 4)

        np.testing.assert_allclose(points[0, :, 2], np.sin(np.radians(67.5)))
        np.testing.assert_allclose(points[-1, :, 2], -points[0, :, 2])
        assert np.all(points[0, :, 2] < 1.0)

    def test_first_row_is_not_degenerate(self):
        points = HeightmapGenerator(NoiseParams(octaves=1)).sphere_points(8, 4)

        assert len({tuple(np.round(p, 9)) for p in points[0]}) == 8

    def test_full_globe_wraps_horizontally(self):
        """The last column is as close to the first as neighbouring columns are."""
        points = HeightmapGenerator(NoiseParams(octaves=1)).sphere_points(16, 8)

        edge_gap = np.linalg.norm(points[4, -1] - points[4, 0])
        inner_gap = np.linalg.norm(points[4, 1] - points[4, 0])
        assert edge_gap == pytest.approx(inner_gap)

    def test_bounds_window(self):
        bounds = GeoBounds(lat_min=0.0, lat_max=45.0, lon_min=0.0, lon_max=90.0)
        points = HeightmapGenerator(NoiseParams(octaves=1, bounds=bounds)).sphere_points(4, 4)

        # Cell (0, 0) is centred on lon 11.25, lat 39.375.
        lon, lat = np.radians(11.25), np.radians(39.375)
        expected = np.array([np.cos(lat) * np.cos(lon), np.cos(lat) * np.sin(lon), np.sin(lat)])
        np.testing.assert_allclose(points[0, 0], expected, atol=1e-12)


class TestNoiseParams:
    """Test noise parameter validation."""

    @pytest.mark.parametrize("field,value", [
        ("persistence", 0.0),
        ("persistence", -0.5),
        ("frequency", 0.0),
        ("frequency", float("nan")),
        ("lacunarity", float("inf")),
        ("octaves", 0),
        ("seed", 1.5),
    ])
    def test_invalid_values(self, field, value):
        params = NoiseParams(**{field: value})

        with pytest.raises(InvalidParameter) as exc_info:
            HeightmapGenerator(params)
        assert exc_info.value.name == field

    @pytest.mark.parametrize("bounds", [
        GeoBounds(lat_min=10.0, lat_max=10.0),
        GeoBounds(lat_min=-100.0),
        GeoBounds(lon_min=90.0, lon_max=-90.0),
        GeoBounds(lon_max=200.0),
    ])
    def test_invalid_bounds(self, bounds):
        with pytest.raises(InvalidParameter):
            NoiseParams(bounds=bounds).validate()

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            NoiseParams(octaves=-1).validate()

    def test_octave_amplitudes(self):
        amplitudes = octave_amplitudes(NoiseParams(persistence=0.5, octaves=4))

        assert amplitudes == [1.0, 0.5, 0.25, 0.125]


class TestHeightmapHelpers:
    """Test validation and statistics of precomputed heightmaps."""

    def test_validate_accepts_matching_shape(self):
        samples = validate_heightmap([[0, 1], [0.5, -1]], width=2, height=2)

        assert samples.dtype == np.float64
        assert samples.shape == (2, 2)

    def test_validate_rejects_transposed_shape(self):
        with pytest.raises(InvalidParameter):
            validate_heightmap(np.zeros((3, 2)), width=3, height=2)

    def test_validate_rejects_nan(self):
        samples = np.zeros((2, 2))
        samples[1, 1] = np.nan

        with pytest.raises(InvalidParameter):
            validate_heightmap(samples, width=2, height=2)

    def test_summary_counts_threshold_as_land(self):
        samples = np.array([[0.05, 0.0], [1.0, -1.0]])

        stats = summarize_heightmap(samples, threshold=0.05)

        assert stats.min_height == -1.0
        assert stats.max_height == 1.0
        assert stats.mean_height == pytest.approx(0.0125)
        assert stats.land_fraction == 0.5
        assert stats.sample_count == 4

    def test_summary_rejects_empty(self):
        with pytest.raises(InvalidParameter):
            summarize_heightmap(np.zeros((0, 0)), threshold=0.0)
