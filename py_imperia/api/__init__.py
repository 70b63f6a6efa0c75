"""HTTP API for world map generation."""
