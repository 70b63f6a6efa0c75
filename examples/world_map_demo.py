#!/usr/bin/env python3
"""
Demo script showing world map generation and chunk placement.
"""

import numpy as np

from py_imperia.core import ChunkConfig, MapBuilder, NoiseParams, TerrainType
from py_imperia.core.hex_coords import HexLayout


class PrintingRenderer:
    """Stands in for a game engine: reports each chunk it is asked to spawn."""

    def spawn_chunk(self, chunk, map_id):
        print(f"  spawn chunk {chunk.coordinate} for map {map_id[:8]}")
        return chunk.coordinate


def main():
    """Demonstrate world generation."""
    print("Py-Imperia World Generation Demo")
    print("=" * 40)

    width, height = 25, 15
    layouts = {
        "column_even": HexLayout.column_even(),
        "row_odd": HexLayout.row_odd(),
    }

    for name, layout in layouts.items():
        print(f"\n{name.upper()} layout:")
        print("-" * 30)

        builder = MapBuilder(
            noise_params=NoiseParams(seed=2024, octaves=5),
            classify_threshold=0.05,
            chunk_config=ChunkConfig(chunk_tile_size=(10, 10), layout=layout),
        )
        world = builder.build(width, height, renderer=PrintingRenderer())
        tile_map = world.tile_map

        print(f"  Tiles placed: {tile_map.placed_count}/{tile_map.tile_count}")
        print(f"  Land tiles: {world.land_tiles} ({world.statistics.land_fraction * 100:.1f}%)")
        print(f"  Ocean tiles: {world.ocean_tiles}")
        print(f"  Last tile centre (px): {tile_map.tile_center_pixels(width - 1, height - 1)}")

        # ASCII map, land as '#', ocean as '~'
        indices = tile_map.visual_index_array()
        land_index = world.palette.index_of(TerrainType.LAND)
        print("\n  Map:")
        for row in indices:
            print("  " + "".join("#" if v == land_index else "~" for v in row))

        print(f"\n  Chunk fill: {[chunk.placed_count for chunk in tile_map.chunks()]}")
        values, counts = np.unique(indices, return_counts=True)
        print(f"  Visual index histogram: {dict(zip(values.tolist(), counts.tolist()))}")


if __name__ == "__main__":
    main()
