"""
Error types raised by the world generation pipeline.

All of these are build-time programmer or configuration errors. None of them
are retried in place; they propagate to the caller of the map builder.
"""

from typing import Any, Optional, Tuple


class ImperiaError(Exception):
    """Base class for all pipeline errors."""


class InvalidParameter(ImperiaError, ValueError):
    """Generation inputs or configuration values are invalid."""

    def __init__(self, name: str, value: Any, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class GridError(ImperiaError):
    """Misuse of a HexGrid during population."""


class DuplicateCoordinate(GridError, KeyError):
    """A tile already exists at the coordinate."""

    def __init__(self, coordinate: Any):
        self.coordinate = coordinate
        super().__init__(f"Tile already exists at {coordinate}")

    def __str__(self) -> str:
        return self.args[0]


class MismatchedCoordinateSystem(GridError, TypeError):
    """A coordinate uses a different system than the grid it is used with."""

    def __init__(self, expected: Any, actual: Any, coordinate: Optional[Any] = None):
        self.expected = expected
        self.actual = actual
        self.coordinate = coordinate
        super().__init__(
            f"Coordinate system mismatch: grid uses {expected}, got {actual}"
            + (f" for {coordinate}" if coordinate is not None else "")
        )


class TileMapError(ImperiaError):
    """Misuse of a ChunkedTileMap during tile placement."""


class OutOfBounds(TileMapError, IndexError):
    """A logical tile coordinate lies outside the declared map extent."""

    def __init__(self, coordinate: Tuple[int, int], extent: Tuple[int, int]):
        self.coordinate = coordinate
        self.extent = extent
        super().__init__(
            f"Tile coordinate {coordinate} outside map extent {extent[0]}x{extent[1]}"
        )


class TileAlreadyPlaced(TileMapError):
    """The resolved chunk slot already holds a tile."""

    def __init__(
        self,
        coordinate: Tuple[int, int],
        chunk: Tuple[int, int],
        local: Tuple[int, int],
    ):
        self.coordinate = coordinate
        self.chunk = chunk
        self.local = local
        super().__init__(
            f"Tile {coordinate} already placed in chunk {chunk} at local {local}"
        )


class GenerationTimeout(ImperiaError, TimeoutError):
    """World generation exceeded its configured deadline."""

    def __init__(self, deadline_seconds: float, elapsed_seconds: float, stage: str):
        self.deadline_seconds = deadline_seconds
        self.elapsed_seconds = elapsed_seconds
        self.stage = stage
        super().__init__(
            f"Generation exceeded {deadline_seconds}s deadline during {stage} "
            f"({elapsed_seconds:.3f}s elapsed)"
        )
