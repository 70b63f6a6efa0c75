"""
Terrain classification.

A single-threshold binary rule: heights at or above the threshold are land,
everything below is ocean. Visual indices are not baked into the enum; they
come from a TerrainPalette so the tile atlas layout stays configurable.

Multi-band classification (beaches, hills, mountains) would extend
TerrainType and replace the threshold with an ordered list of band edges.
"""

import math
import numpy as np
from enum import Enum
from typing import Dict, Mapping, Optional

from .errors import InvalidParameter

DEFAULT_THRESHOLD = 0.05


class TerrainType(str, Enum):
    """Terrain categories a hex can take."""

    OCEAN = "ocean"
    LAND = "land"


DEFAULT_VISUAL_INDICES: Dict[TerrainType, int] = {
    TerrainType.OCEAN: 0,
    TerrainType.LAND: 1,
}


class TerrainPalette:
    """Maps each terrain type to a stable, unique, non-negative atlas index."""

    def __init__(self, indices: Optional[Mapping[TerrainType, int]] = None):
        indices = dict(DEFAULT_VISUAL_INDICES if indices is None else indices)

        missing = [terrain.value for terrain in TerrainType if terrain not in indices]
        if missing:
            raise InvalidParameter("palette", missing, "every terrain type needs a visual index")

        for terrain, index in indices.items():
            if not isinstance(terrain, TerrainType):
                raise InvalidParameter("palette", terrain, "keys must be TerrainType members")
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise InvalidParameter(
                    f"palette[{terrain.value}]", index, "visual index must be a non-negative int"
                )

        if len(set(indices.values())) != len(indices):
            raise InvalidParameter("palette", indices, "visual indices must be unique per terrain")

        self._indices = indices
        self._terrain_by_index = {index: terrain for terrain, index in indices.items()}

    @classmethod
    def from_names(cls, names: Mapping[str, int]) -> "TerrainPalette":
        """Build a palette from {"ocean": 0, "land": 1} style mappings."""
        try:
            return cls({TerrainType(name): index for name, index in names.items()})
        except ValueError as e:
            if isinstance(e, InvalidParameter):
                raise
            raise InvalidParameter("palette", dict(names), str(e)) from e

    def index_of(self, terrain: TerrainType) -> int:
        return self._indices[terrain]

    def terrain_for(self, index: int) -> TerrainType:
        """Reverse lookup of a visual index."""
        try:
            return self._terrain_by_index[index]
        except KeyError:
            raise InvalidParameter("visual_index", index, "not present in palette") from None

    @property
    def max_index(self) -> int:
        return max(self._indices.values())

    def as_dict(self) -> Dict[str, int]:
        return {terrain.value: index for terrain, index in self._indices.items()}

    def __eq__(self, other) -> bool:
        if not isinstance(other, TerrainPalette):
            return NotImplemented
        return self._indices == other._indices

    def __repr__(self) -> str:
        return f"TerrainPalette({self.as_dict()})"


def _validate_threshold(threshold: float) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not math.isfinite(threshold):
        raise InvalidParameter("threshold", threshold, "must be a finite number")
    return float(threshold)


def classify(sample: float, threshold: float = DEFAULT_THRESHOLD) -> TerrainType:
    """Return LAND when sample >= threshold, OCEAN otherwise."""
    if sample >= threshold:
        return TerrainType.LAND
    return TerrainType.OCEAN


class TerrainClassifier:
    """Threshold classifier bound to a palette."""

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        palette: Optional[TerrainPalette] = None,
    ):
        self.threshold = _validate_threshold(threshold)
        self.palette = palette or TerrainPalette()

    def classify(self, sample: float) -> TerrainType:
        return classify(sample, self.threshold)

    def classify_array(self, samples: np.ndarray) -> np.ndarray:
        """Boolean land mask for an array of samples."""
        return np.asarray(samples) >= self.threshold

    def visual_index(self, terrain: TerrainType) -> int:
        return self.palette.index_of(terrain)
