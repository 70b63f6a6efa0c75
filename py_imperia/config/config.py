from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from IMPERIA_* environment variables."""

    # Database Configuration
    database_url: str = Field(default="sqlite:///./py_imperia.db", description="SQLAlchemy database URL")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (console or json)")

    # Map Generation Configuration
    default_map_width: int = Field(default=100, description="Default map width in tiles")
    default_map_height: int = Field(default=100, description="Default map height in tiles")
    max_map_width: int = Field(default=1000, description="Max allowed map width in tiles")
    max_map_height: int = Field(default=1000, description="Max allowed map height in tiles")
    generation_timeout: float = Field(default=300.0, description="Generation timeout in seconds")

    # Chunk / sprite geometry
    chunk_width: int = Field(default=10, description="Chunk width in tiles")
    chunk_height: int = Field(default=10, description="Chunk height in tiles")
    tile_pixel_width: int = Field(default=32, description="Tile sprite width in pixels")
    tile_pixel_height: int = Field(default=32, description="Tile sprite height in pixels")
    atlas_pixel_width: int = Field(default=96, description="Texture atlas width in pixels")
    atlas_pixel_height: int = Field(default=32, description="Texture atlas height in pixels")
    hex_layout: str = Field(default="column_even", description="column_even, column_odd, row_even or row_odd")

    # Noise Configuration
    noise_seed: int = Field(default=0, description="Heightmap noise seed")
    noise_persistence: float = Field(default=0.5, description="Amplitude falloff per octave")
    noise_frequency: float = Field(default=1.0, description="Base noise frequency")
    noise_lacunarity: float = Field(default=2.0, description="Frequency growth per octave")
    noise_octaves: int = Field(default=6, description="Number of fBm octaves")

    # Terrain Configuration
    terrain_threshold: float = Field(default=0.05, description="Heights at or above this are land")
    ocean_visual_index: int = Field(default=0, description="Atlas index for ocean tiles")
    land_visual_index: int = Field(default=1, description="Atlas index for land tiles")

    class Config:
        env_prefix = "IMPERIA_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
