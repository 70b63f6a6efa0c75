"""Shared fixtures for world generation tests."""

import numpy as np
import pytest

from py_imperia.core.heightmap_generator import NoiseParams
from py_imperia.core.map_builder import ChunkConfig


@pytest.fixture
def fast_noise():
    """Low-octave noise parameters that keep sampling quick."""
    return NoiseParams(seed=42, octaves=2)


@pytest.fixture
def small_chunks():
    """2x2 chunks with the default sprite geometry."""
    return ChunkConfig(chunk_tile_size=(2, 2))


@pytest.fixture
def checkerboard():
    """4x4 heightmap alternating between land (0.5) and ocean (-0.5)."""
    samples = np.full((4, 4), -0.5)
    samples[::2, ::2] = 0.5
    samples[1::2, 1::2] = 0.5
    return samples
