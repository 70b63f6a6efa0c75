"""
Heightmap generation module for world map generation.

Produces a continuous height field by sampling fractal Brownian motion (fBm)
over 3D OpenSimplex noise. Grid cells are mapped onto geographic bounds and
projected onto the unit sphere before sampling, so a full-globe map wraps
continuously across its left/right edges and collapses smoothly at the poles.

Output convention: samples are float64 in [-1.0, 1.0], shaped (height, width),
row 0 being the northern edge.
"""

import math
import numpy as np
import structlog
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from opensimplex import OpenSimplex

from .errors import InvalidParameter

logger = structlog.get_logger()

SAMPLE_MIN = -1.0
SAMPLE_MAX = 1.0


@dataclass(frozen=True)
class GeoBounds:
    """Latitude/longitude window the heightmap is mapped onto (degrees)."""

    lat_min: float = -90.0
    lat_max: float = 90.0
    lon_min: float = -180.0
    lon_max: float = 180.0

    def validate(self) -> None:
        for name in ("lat_min", "lat_max"):
            value = getattr(self, name)
            if not -90.0 <= value <= 90.0:
                raise InvalidParameter(name, value, "latitude must be within [-90, 90]")
        for name in ("lon_min", "lon_max"):
            value = getattr(self, name)
            if not -180.0 <= value <= 180.0:
                raise InvalidParameter(name, value, "longitude must be within [-180, 180]")
        if self.lat_min >= self.lat_max:
            raise InvalidParameter(
                "bounds", (self.lat_min, self.lat_max), "lat_min must be below lat_max"
            )
        if self.lon_min >= self.lon_max:
            raise InvalidParameter(
                "bounds", (self.lon_min, self.lon_max), "lon_min must be below lon_max"
            )

    @property
    def lat_extent(self) -> float:
        return self.lat_max - self.lat_min

    @property
    def lon_extent(self) -> float:
        return self.lon_max - self.lon_min


@dataclass(frozen=True)
class NoiseParams:
    """Configuration for fBm noise sampling."""

    seed: int = 0
    persistence: float = 0.5
    frequency: float = 1.0
    lacunarity: float = 2.0
    octaves: int = 6
    bounds: GeoBounds = field(default_factory=GeoBounds)

    def validate(self) -> None:
        """Raise InvalidParameter if any parameter is out of range."""
        if isinstance(self.seed, bool) or not isinstance(self.seed, (int, np.integer)):
            raise InvalidParameter("seed", self.seed, "seed must be an integer")
        for name in ("persistence", "frequency", "lacunarity"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise InvalidParameter(name, value, "must be a finite number > 0")
        if isinstance(self.octaves, bool) or not isinstance(self.octaves, int) or self.octaves < 1:
            raise InvalidParameter("octaves", self.octaves, "must be an integer >= 1")
        self.bounds.validate()


@dataclass(frozen=True)
class HeightmapStatistics:
    """Summary of a generated heightmap."""

    min_height: float
    max_height: float
    mean_height: float
    land_fraction: float
    sample_count: int


def _validate_dimension(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
        raise InvalidParameter(name, value, "must be a positive integer")


class HeightmapGenerator:
    """
    Generates sphere-mapped fBm heightmaps.

    Each octave reads its own OpenSimplex source seeded with ``seed + octave``;
    the octave sum is divided by the total amplitude so the result stays in
    [-1, 1] before a final clip.
    """

    def __init__(self, params: Optional[NoiseParams] = None):
        """
        Initialize the heightmap generator.

        Args:
            params: Noise parameters; defaults to NoiseParams()
        """
        self.params = params or NoiseParams()
        self.params.validate()

        self._sources = [
            OpenSimplex(seed=int(self.params.seed) + octave)
            for octave in range(self.params.octaves)
        ]
        self._amplitudes = octave_amplitudes(self.params)
        self._scale = 1.0 / sum(self._amplitudes)

    def sphere_points(self, width: int, height: int) -> np.ndarray:
        """
        Project every grid cell onto the unit sphere.

        Cells are sampled at their centres: column x maps to longitude
        lon_min + lon_extent * (x + 0.5) / width and row y to latitude
        lat_max - lat_extent * (y + 0.5) / height. On a full globe both poles
        are approached symmetrically and never sampled as a degenerate row.

        Returns:
            Array of shape (height, width, 3) with unit-sphere coordinates
        """
        _validate_dimension("width", width)
        _validate_dimension("height", height)
        bounds = self.params.bounds

        lon = bounds.lon_min + bounds.lon_extent * (np.arange(width) + 0.5) / width
        lat = bounds.lat_max - bounds.lat_extent * (np.arange(height) + 0.5) / height
        lon_rad, lat_rad = np.meshgrid(np.radians(lon), np.radians(lat))

        cos_lat = np.cos(lat_rad)
        return np.stack(
            [cos_lat * np.cos(lon_rad), cos_lat * np.sin(lon_rad), np.sin(lat_rad)],
            axis=-1,
        )

    def sample(self, x: float, y: float, z: float) -> float:
        """Evaluate normalised fBm at a 3D point."""
        frequency = self.params.frequency
        total = 0.0
        for source, amplitude in zip(self._sources, self._amplitudes):
            total += source.noise3(x * frequency, y * frequency, z * frequency) * amplitude
            frequency *= self.params.lacunarity
        return total * self._scale

    def generate(
        self,
        width: int,
        height: int,
        check: Optional[Callable[[str], None]] = None,
    ) -> np.ndarray:
        """
        Sample one height per cell of a width x height grid.

        Args:
            width: Number of columns (> 0)
            height: Number of rows (> 0)
            check: Called with "heightmap" before each row; may raise to abort

        Returns:
            float64 array of shape (height, width) with values in [-1, 1]
        """
        points = self.sphere_points(width, height)

        logger.info(
            "Generating heightmap",
            width=width,
            height=height,
            seed=self.params.seed,
            octaves=self.params.octaves,
        )

        samples = np.empty((height, width), dtype=np.float64)
        for row in range(height):
            if check is not None:
                check("heightmap")
            for col in range(width):
                px, py, pz = points[row, col]
                samples[row, col] = self.sample(float(px), float(py), float(pz))

        np.clip(samples, SAMPLE_MIN, SAMPLE_MAX, out=samples)

        logger.info(
            "Heightmap generated",
            min_height=round(float(samples.min()), 4),
            max_height=round(float(samples.max()), 4),
        )
        return samples


def generate_heightmap(width: int, height: int, params: Optional[NoiseParams] = None) -> np.ndarray:
    """Convenience wrapper around HeightmapGenerator.generate()."""
    return HeightmapGenerator(params).generate(width, height)


def validate_heightmap(samples: np.ndarray, width: int, height: int) -> np.ndarray:
    """
    Check that a precomputed heightmap can stand in for generated output.

    Returns the samples as a float64 array.
    """
    _validate_dimension("width", width)
    _validate_dimension("height", height)

    array = np.asarray(samples, dtype=np.float64)
    if array.shape != (height, width):
        raise InvalidParameter(
            "heightmap", array.shape, f"expected shape {(height, width)}"
        )
    if not np.all(np.isfinite(array)):
        raise InvalidParameter("heightmap", "non-finite", "samples must be finite")
    return array


def summarize_heightmap(samples: np.ndarray, threshold: float) -> HeightmapStatistics:
    """Compute min/max/mean and the fraction of samples at or above threshold."""
    array = np.asarray(samples, dtype=np.float64)
    if array.size == 0:
        raise InvalidParameter("heightmap", array.shape, "heightmap is empty")

    return HeightmapStatistics(
        min_height=float(array.min()),
        max_height=float(array.max()),
        mean_height=float(array.mean()),
        land_fraction=float(np.count_nonzero(array >= threshold)) / array.size,
        sample_count=int(array.size),
    )


def octave_amplitudes(params: NoiseParams) -> List[float]:
    """Amplitude of each octave before normalisation."""
    params.validate()
    return [params.persistence ** i for i in range(params.octaves)]
