"""
Tests for land/ocean terrain classification.
"""

import numpy as np
import pytest

from py_imperia.core.errors import InvalidParameter
from py_imperia.core.terrain import (
    DEFAULT_THRESHOLD,
    TerrainClassifier,
    TerrainPalette,
    TerrainType,
    classify,
)


class TestClassify:
    """Test the threshold rule."""

    def test_sample_at_threshold_is_land(self):
        assert classify(0.05, 0.05) == TerrainType.LAND

    def test_sample_below_threshold_is_ocean(self):
        assert classify(0.0499, 0.05) == TerrainType.OCEAN

    def test_extremes(self):
        assert classify(1.0) == TerrainType.LAND
        assert classify(-1.0) == TerrainType.OCEAN

    def test_default_threshold(self):
        assert DEFAULT_THRESHOLD == 0.05
        assert classify(0.05) == TerrainType.LAND

    def test_threshold_above_range_makes_everything_ocean(self):
        classifier = TerrainClassifier(threshold=2.0)

        assert classifier.classify(1.0) == TerrainType.OCEAN

    def test_classify_array_matches_scalar_rule(self):
        classifier = TerrainClassifier(threshold=0.0)
        samples = np.array([[-0.1, 0.0], [0.3, -1.0]])

        mask = classifier.classify_array(samples)

        np.testing.assert_array_equal(mask, [[False, True], [True, False]])
        for value, is_land in zip(samples.ravel(), mask.ravel()):
            assert (classifier.classify(value) == TerrainType.LAND) == is_land

    @pytest.mark.parametrize("threshold", [float("nan"), float("inf"), "0.1", True])
    def test_invalid_threshold(self, threshold):
        with pytest.raises(InvalidParameter):
            TerrainClassifier(threshold=threshold)


class TestTerrainPalette:
    """Test terrain to visual index mapping."""

    def test_default_indices(self):
        palette = TerrainPalette()

        assert palette.index_of(TerrainType.OCEAN) == 0
        assert palette.index_of(TerrainType.LAND) == 1
        assert palette.max_index == 1

    def test_reverse_lookup(self):
        palette = TerrainPalette({TerrainType.OCEAN: 1, TerrainType.LAND: 2})

        assert palette.terrain_for(2) == TerrainType.LAND
        with pytest.raises(InvalidParameter):
            palette.terrain_for(0)

    def test_from_names_round_trip(self):
        palette = TerrainPalette.from_names({"ocean": 4, "land": 7})

        assert palette.as_dict() == {"ocean": 4, "land": 7}
        assert palette == TerrainPalette({TerrainType.OCEAN: 4, TerrainType.LAND: 7})

    def test_missing_terrain_rejected(self):
        with pytest.raises(InvalidParameter):
            TerrainPalette({TerrainType.LAND: 1})

    def test_duplicate_index_rejected(self):
        with pytest.raises(InvalidParameter):
            TerrainPalette({TerrainType.OCEAN: 1, TerrainType.LAND: 1})

    def test_negative_index_rejected(self):
        with pytest.raises(InvalidParameter):
            TerrainPalette({TerrainType.OCEAN: -1, TerrainType.LAND: 1})

    def test_unknown_terrain_name_rejected(self):
        with pytest.raises(InvalidParameter):
            TerrainPalette.from_names({"ocean": 0, "land": 1, "lava": 2})

    def test_classifier_visual_index(self):
        classifier = TerrainClassifier(palette=TerrainPalette.from_names({"ocean": 2, "land": 0}))

        assert classifier.visual_index(classifier.classify(0.9)) == 0
        assert classifier.visual_index(classifier.classify(-0.9)) == 2
