#!/usr/bin/env python3
"""
Visualize a generated world as hexes colored by height.
Draws every tile at its hex pixel centre next to the raw heightmap image.
"""

import math
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import PatchCollection
from matplotlib.patches import RegularPolygon

sys.path.append(str(Path(__file__).parent))

from py_imperia.core.heightmap_generator import HeightmapGenerator, NoiseParams
from py_imperia.core.hex_coords import HexTilt
from py_imperia.core.map_builder import ChunkConfig, MapBuilder


def create_hex_patches(tile_map, width, height):
    """Create one hexagon patch per tile at its pixel centre."""
    tile_w, tile_h = tile_map.tile_pixel_size
    radius = tile_w / 2
    # Flat-top hexes have a vertex on the x axis.
    orientation = math.pi / 6 if tile_map.layout.tilt == HexTilt.FLAT else 0.0

    patches = []
    for y in range(height):
        for x in range(width):
            cx, cy = tile_map.tile_center_pixels(x, y)
            patches.append(RegularPolygon((cx, -cy), numVertices=6, radius=radius, orientation=orientation))
    return patches


def visualize_world(width=60, height=30, seed=123456, threshold=0.05, octaves=6):
    """
    Generate a world and plot it as hexes and as a raw heightmap.

    Args:
        width: Map width in tiles
        height: Map height in tiles
        seed: Noise seed
        threshold: Land/ocean threshold
        octaves: Number of fBm octaves
    """
    params = NoiseParams(seed=seed, octaves=octaves)

    print(f"Generating {width}x{height} heightmap (seed {seed})...")
    heights = HeightmapGenerator(params).generate(width, height)

    builder = MapBuilder(params, classify_threshold=threshold, chunk_config=ChunkConfig())
    world = builder.build(width, height, heightmap=heights)

    stats = world.statistics
    print(f"\nHeightmap statistics:")
    print(f"  Min height: {stats.min_height:.3f}")
    print(f"  Max height: {stats.max_height:.3f}")
    print(f"  Mean height: {stats.mean_height:.3f}")
    print(f"  Land tiles (h>={threshold}): {world.land_tiles} ({stats.land_fraction * 100:.1f}%)")
    print(f"  Ocean tiles (h<{threshold}): {world.ocean_tiles}")
    print(f"  Chunks: {world.tile_map.chunk_grid_size}")

    print("\nCreating visualization...")

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(18, 6))

    # Left plot: hexes colored by height
    patches = create_hex_patches(world.tile_map, width, height)
    collection = PatchCollection(patches, cmap="terrain", edgecolor="none")
    collection.set_array(heights.ravel())
    collection.set_clim(-1, 1)
    ax1.add_collection(collection)
    ax1.autoscale_view()
    ax1.set_aspect("equal")
    ax1.set_title(f"Hex tiles\n{width * height} tiles, layout {world.tile_map.layout.tilt.value}")
    plt.colorbar(collection, ax=ax1, label="Height")

    # Right plot: raw heightmap with coastline
    im = ax2.imshow(heights, cmap="terrain", vmin=-1, vmax=1, interpolation="nearest")
    if heights.min() < threshold <= heights.max():
        ax2.contour(heights, levels=[threshold], colors="blue", linewidths=1.5)
    plt.colorbar(im, ax=ax2, label="Height")
    ax2.set_title(f"Heightmap\nSea level = {threshold} (blue line)")

    fig.suptitle(f"World Visualization - Seed: {seed}", fontsize=16)
    plt.tight_layout()

    output_file = f"world_{seed}.png"
    plt.savefig(output_file, dpi=200, bbox_inches="tight")
    print(f"\nVisualization saved to: {output_file}")

    plt.show()


if __name__ == "__main__":
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 123456
    visualize_world(seed=seed)
