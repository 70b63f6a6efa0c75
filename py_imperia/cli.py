"""
Command line entry point.

Usage:
    py-imperia generate [--width W] [--height H] [--seed S] [--threshold T]
                        [--chunk-size CW CH] [--layout NAME] [--image PATH]
                        [--terrain-image PATH] [--json]
"""

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional

import structlog

from .config import (
    HEX_LAYOUTS,
    settings,
    chunk_config_from_settings,
    get_layout,
    noise_params_from_settings,
    palette_from_settings,
)
from .core.errors import ImperiaError
from .core.map_builder import ChunkConfig, MapBuilder, WorldMap
from .utils.log_setup import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="py-imperia", description="Hex world map generator")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument(
        "--log-format", default="console", choices=["console", "json"], help="Log output format"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a world map")
    generate.add_argument("--width", type=int, default=settings.default_map_width, help="Map width in tiles")
    generate.add_argument("--height", type=int, default=settings.default_map_height, help="Map height in tiles")
    generate.add_argument("--seed", type=int, default=settings.noise_seed, help="Noise seed")
    generate.add_argument("--persistence", type=float, default=settings.noise_persistence)
    generate.add_argument("--frequency", type=float, default=settings.noise_frequency)
    generate.add_argument("--lacunarity", type=float, default=settings.noise_lacunarity)
    generate.add_argument("--octaves", type=int, default=settings.noise_octaves)
    generate.add_argument("--threshold", type=float, default=settings.terrain_threshold, help="Land threshold")
    generate.add_argument(
        "--chunk-size", type=int, nargs=2, metavar=("CW", "CH"),
        default=(settings.chunk_width, settings.chunk_height), help="Chunk size in tiles",
    )
    generate.add_argument("--layout", choices=sorted(HEX_LAYOUTS), default=settings.hex_layout)
    generate.add_argument("--image", help="Write a heightmap debug PNG to this path")
    generate.add_argument("--terrain-image", help="Write a terrain PNG to this path")
    generate.add_argument("--json", action="store_true", help="Print the summary as JSON")
    return parser


def summarize(world_map: WorldMap) -> dict:
    """Plain-dict summary of a built world."""
    tile_map = world_map.tile_map
    stats = world_map.statistics
    return {
        "width": world_map.width,
        "height": world_map.height,
        "seed": world_map.noise_params.seed,
        "threshold": world_map.threshold,
        "chunk_grid_size": list(tile_map.chunk_grid_size),
        "chunk_tile_size": list(tile_map.chunk_tile_size),
        "placed_tiles": tile_map.placed_count,
        "land_tiles": world_map.land_tiles,
        "ocean_tiles": world_map.ocean_tiles,
        "land_fraction": round(stats.land_fraction, 4),
        "height_range": [round(stats.min_height, 4), round(stats.max_height, 4)],
        "generation_time_seconds": round(world_map.generation_time_seconds, 3),
    }


def run_generate(args: argparse.Namespace) -> int:
    base = noise_params_from_settings(settings, seed=args.seed)
    noise_params = replace(
        base,
        persistence=args.persistence,
        frequency=args.frequency,
        lacunarity=args.lacunarity,
        octaves=args.octaves,
    )
    base_config = chunk_config_from_settings(settings)
    chunk_config = ChunkConfig(
        chunk_tile_size=tuple(args.chunk_size),
        tile_pixel_size=base_config.tile_pixel_size,
        atlas_pixel_size=base_config.atlas_pixel_size,
        layout=get_layout(args.layout),
    )
    builder = MapBuilder(
        noise_params=noise_params,
        classify_threshold=args.threshold,
        chunk_config=chunk_config,
        palette=palette_from_settings(settings),
        deadline_seconds=settings.generation_timeout,
    )

    world_map = builder.build(args.width, args.height)
    heightmap = world_map.heightmap

    if args.image or args.terrain_image:
        from .utils.visualize import save_heightmap_image, save_terrain_image

        if args.image:
            save_heightmap_image(heightmap, args.image, threshold=args.threshold,
                                 title=f"Heightmap (seed {noise_params.seed})")
        if args.terrain_image:
            save_terrain_image(world_map.tile_map.visual_index_array(), args.terrain_image)

    summary = summarize(world_map)
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        for key, value in summary.items():
            print(f"{key:>24}: {value}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    try:
        if args.command == "generate":
            return run_generate(args)
    except ImperiaError as e:
        logger.error("World generation failed", error=str(e))
        print(f"error: {e}", file=sys.stderr)
        return 2
    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
