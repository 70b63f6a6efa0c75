"""
Chunked tile map.

The logical tile space is a rectangle of offset (column, row) coordinates.
It is partitioned into a grid of fixed-size chunks; a logical coordinate
(x, y) resolves to chunk (x // cw, y // ch) and local offset
(x % cw, y % ch). Resolution is a pure function of the coordinate and the
chunk size, so the final structure does not depend on placement order.

The map only does bookkeeping. Drawing is left to a host renderer that is
handed each chunk through the ChunkRenderer protocol when the map is built.
"""

import uuid
import numpy as np
import structlog
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Protocol, Tuple

from .errors import InvalidParameter, OutOfBounds, TileAlreadyPlaced
from .hex_coords import HexCoordinate, HexLayout, hex_to_pixel

logger = structlog.get_logger()

EMPTY_TILE = -1

Size = Tuple[int, int]


@dataclass(frozen=True)
class TileRecord:
    """Visual record for one tile slot."""

    visual_index: int
    local_position: Tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class MapHandle:
    """Opaque handle describing a built map."""

    map_id: str
    chunk_grid_size: Size
    chunk_count: int
    chunk_handles: Dict[Tuple[int, int], Any] = field(default_factory=dict)


class ChunkRenderer(Protocol):
    """Host-side primitive that instantiates visuals for one chunk."""

    def spawn_chunk(self, chunk: "Chunk", map_id: str) -> Any:
        ...


def _validate_size(name: str, size: Size, allow_zero: bool = False) -> Size:
    try:
        w, h = size
    except (TypeError, ValueError):
        raise InvalidParameter(name, size, "must be a (width, height) pair") from None
    minimum = 0 if allow_zero else 1
    for value in (w, h):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < minimum:
            raise InvalidParameter(name, size, f"components must be integers >= {minimum}")
    return int(w), int(h)


class Chunk:
    """Dense grid of tile records for one chunk."""

    def __init__(self, coordinate: Tuple[int, int], size: Size, valid_size: Optional[Size] = None):
        self.coordinate = coordinate
        self.size = size
        # Partial chunks at the ragged map edge only accept tiles inside valid_size.
        self.valid_size = valid_size or size
        width, height = size
        self.visual_indices = np.full((height, width), EMPTY_TILE, dtype=np.int32)
        self._tiles: List[List[Optional[TileRecord]]] = [[None] * width for _ in range(height)]

    def get(self, local_x: int, local_y: int) -> Optional[TileRecord]:
        return self._tiles[local_y][local_x]

    def place(self, local_x: int, local_y: int, record: TileRecord) -> None:
        self._tiles[local_y][local_x] = record
        self.visual_indices[local_y, local_x] = record.visual_index

    @property
    def placed_count(self) -> int:
        return int(np.count_nonzero(self.visual_indices != EMPTY_TILE))

    @property
    def capacity(self) -> int:
        return self.valid_size[0] * self.valid_size[1]

    @property
    def is_full(self) -> bool:
        return self.placed_count == self.capacity

    def __repr__(self) -> str:
        return f"Chunk({self.coordinate}, placed={self.placed_count}/{self.capacity})"


class ChunkedTileMap:
    """
    Tile map partitioned into fixed-size chunks.

    Args:
        chunk_grid_size: (cols, rows) of chunks
        chunk_tile_size: (width, height) of each chunk in tiles
        tile_pixel_size: (width, height) of one tile sprite in pixels
        atlas_pixel_size: (width, height) of the texture atlas in pixels
        initial_chunk_count: chunks allocated eagerly, in row-major chunk order
        layout: hex layout used for pixel placement; logical coordinates are
            always offset (column, row)
        map_size: logical extent in tiles; defaults to the full chunk grid
    """

    def __init__(
        self,
        chunk_grid_size: Size,
        chunk_tile_size: Size,
        tile_pixel_size: Size,
        atlas_pixel_size: Size,
        initial_chunk_count: int = 0,
        layout: Optional[HexLayout] = None,
        map_size: Optional[Size] = None,
    ):
        self.chunk_grid_size = _validate_size("chunk_grid_size", chunk_grid_size)
        self.chunk_tile_size = _validate_size("chunk_tile_size", chunk_tile_size)
        self.tile_pixel_size = _validate_size("tile_pixel_size", tile_pixel_size)
        self.atlas_pixel_size = _validate_size("atlas_pixel_size", atlas_pixel_size)
        self.layout = layout or HexLayout.column_even()

        cols, rows = self.chunk_grid_size
        cw, ch = self.chunk_tile_size
        capacity = (cols * cw, rows * ch)
        if map_size is None:
            self.map_size = capacity
        else:
            self.map_size = _validate_size("map_size", map_size)
            if self.map_size[0] > capacity[0] or self.map_size[1] > capacity[1]:
                raise InvalidParameter("map_size", map_size, f"exceeds chunk grid capacity {capacity}")

        tw, th = self.tile_pixel_size
        aw, ah = self.atlas_pixel_size
        if aw < tw or ah < th:
            raise InvalidParameter(
                "atlas_pixel_size", atlas_pixel_size, "atlas must hold at least one tile"
            )

        if isinstance(initial_chunk_count, bool) or not isinstance(initial_chunk_count, (int, np.integer)):
            raise InvalidParameter("initial_chunk_count", initial_chunk_count, "must be an integer")
        if not 0 <= initial_chunk_count <= cols * rows:
            raise InvalidParameter(
                "initial_chunk_count", initial_chunk_count, f"must be within [0, {cols * rows}]"
            )

        self._chunks: Dict[Tuple[int, int], Chunk] = {}
        self.handle: Optional[MapHandle] = None

        for index in range(int(initial_chunk_count)):
            self._ensure_chunk((index % cols, index // cols))

    # -- coordinate resolution -------------------------------------------------

    def resolve(self, x: int, y: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        """
        Resolve a logical tile coordinate to (chunk_coordinate, local_offset).

        Raises:
            OutOfBounds: coordinate is negative or outside the map extent
        """
        for value in (x, y):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidParameter("coordinate", (x, y), "tile coordinates must be integers")
        width, height = self.map_size
        if not (0 <= x < width and 0 <= y < height):
            raise OutOfBounds((x, y), self.map_size)
        cx, lx = divmod(x, self.chunk_tile_size[0])
        cy, ly = divmod(y, self.chunk_tile_size[1])
        return (cx, cy), (lx, ly)

    def _chunk_valid_size(self, cx: int, cy: int) -> Size:
        cw, ch = self.chunk_tile_size
        width, height = self.map_size
        return min(cw, width - cx * cw), min(ch, height - cy * ch)

    def _ensure_chunk(self, chunk_coordinate: Tuple[int, int]) -> Chunk:
        chunk = self._chunks.get(chunk_coordinate)
        if chunk is None:
            chunk = Chunk(
                chunk_coordinate,
                self.chunk_tile_size,
                self._chunk_valid_size(*chunk_coordinate),
            )
            self._chunks[chunk_coordinate] = chunk
        return chunk

    # -- placement ---------------------------------------------------------------

    def add_tile(self, coordinate: Tuple[int, int], tile: TileRecord) -> TileRecord:
        """
        Place a tile at a logical coordinate.

        The stored record carries the resolved local offset as its
        local_position. Nothing is mutated when an error is raised.

        Returns:
            The stored TileRecord

        Raises:
            OutOfBounds: coordinate outside the declared map extent
            TileAlreadyPlaced: the resolved slot is occupied
            InvalidParameter: visual index is not a non-negative integer
        """
        x, y = coordinate
        index = tile.visual_index
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)) or index < 0:
            raise InvalidParameter("visual_index", index, "must be a non-negative integer")

        chunk_coordinate, (lx, ly) = self.resolve(x, y)
        existing = self._chunks.get(chunk_coordinate)
        if existing is not None and existing.get(lx, ly) is not None:
            raise TileAlreadyPlaced((x, y), chunk_coordinate, (lx, ly))

        record = TileRecord(visual_index=int(index), local_position=(lx, ly))
        self._ensure_chunk(chunk_coordinate).place(lx, ly, record)
        return record

    def get_tile(self, coordinate: Tuple[int, int]) -> Optional[TileRecord]:
        """Tile placed at a logical coordinate, or None."""
        chunk_coordinate, (lx, ly) = self.resolve(*coordinate)
        chunk = self._chunks.get(chunk_coordinate)
        if chunk is None:
            return None
        return chunk.get(lx, ly)

    # -- chunks --------------------------------------------------------------------

    def chunk(self, cx: int, cy: int) -> Optional[Chunk]:
        """Allocated chunk at (cx, cy), or None."""
        return self._chunks.get((cx, cy))

    def chunks(self) -> List[Chunk]:
        """Allocated chunks in row-major chunk order."""
        return [self._chunks[key] for key in sorted(self._chunks, key=lambda c: (c[1], c[0]))]

    def chunk_coordinates(self) -> Iterator[Tuple[int, int]]:
        cols, rows = self.chunk_grid_size
        for cy in range(rows):
            for cx in range(cols):
                yield (cx, cy)

    def visual_index_array(self) -> np.ndarray:
        """Assemble all chunks into one (map_height, map_width) array of visual indices."""
        width, height = self.map_size
        cw, ch = self.chunk_tile_size
        cols, rows = self.chunk_grid_size
        full = np.full((rows * ch, cols * cw), EMPTY_TILE, dtype=np.int32)
        for (cx, cy), chunk in self._chunks.items():
            full[cy * ch:(cy + 1) * ch, cx * cw:(cx + 1) * cw] = chunk.visual_indices
        return full[:height, :width]

    @property
    def allocated_chunk_count(self) -> int:
        return len(self._chunks)

    @property
    def placed_count(self) -> int:
        return sum(chunk.placed_count for chunk in self._chunks.values())

    @property
    def tile_count(self) -> int:
        """Number of valid tile slots in the declared extent."""
        return self.map_size[0] * self.map_size[1]

    def build(self, renderer: Optional[ChunkRenderer] = None, map_id: Optional[str] = None) -> MapHandle:
        """
        Allocate every chunk of the declared grid and hand each to the renderer.

        Chunks are passed by reference, so tiles placed after build() are
        visible to the host.
        """
        map_id = map_id or str(uuid.uuid4())
        chunk_handles = {}
        for chunk_coordinate in self.chunk_coordinates():
            chunk = self._ensure_chunk(chunk_coordinate)
            if renderer is not None:
                chunk_handles[chunk_coordinate] = renderer.spawn_chunk(chunk, map_id)

        self.handle = MapHandle(
            map_id=map_id,
            chunk_grid_size=self.chunk_grid_size,
            chunk_count=len(self._chunks),
            chunk_handles=chunk_handles,
        )
        logger.info(
            "Tile map built",
            map_id=map_id,
            chunks=len(self._chunks),
            renderer=type(renderer).__name__ if renderer is not None else None,
        )
        return self.handle

    # -- pixel space -----------------------------------------------------------------

    def tile_center_pixels(self, x: int, y: int) -> Tuple[float, float]:
        """Pixel centre of logical tile (x, y) relative to tile (0, 0)."""
        self.resolve(x, y)
        return hex_to_pixel(HexCoordinate.offset(x, y), self.layout, self.tile_pixel_size)

    def chunk_origin_pixels(self, cx: int, cy: int) -> Tuple[float, float]:
        """Pixel centre of the first tile of chunk (cx, cy)."""
        cols, rows = self.chunk_grid_size
        if not (0 <= cx < cols and 0 <= cy < rows):
            raise OutOfBounds((cx, cy), self.chunk_grid_size)
        cw, ch = self.chunk_tile_size
        return hex_to_pixel(HexCoordinate.offset(cx * cw, cy * ch), self.layout, self.tile_pixel_size)

    @property
    def atlas_columns(self) -> int:
        return self.atlas_pixel_size[0] // self.tile_pixel_size[0]

    @property
    def atlas_rows(self) -> int:
        return self.atlas_pixel_size[1] // self.tile_pixel_size[1]

    @property
    def atlas_capacity(self) -> int:
        return self.atlas_columns * self.atlas_rows

    def atlas_uv(self, visual_index: int) -> Tuple[float, float, float, float]:
        """
        Normalised (u0, v0, u1, v1) rectangle of a visual index in the atlas.

        Sub-images are laid out row-major starting at the top-left corner.
        """
        if isinstance(visual_index, bool) or not 0 <= visual_index < self.atlas_capacity:
            raise InvalidParameter(
                "visual_index", visual_index, f"atlas holds {self.atlas_capacity} tiles"
            )
        column = visual_index % self.atlas_columns
        row = visual_index // self.atlas_columns
        tw, th = self.tile_pixel_size
        aw, ah = self.atlas_pixel_size
        return (
            column * tw / aw,
            row * th / ah,
            (column + 1) * tw / aw,
            (row + 1) * th / ah,
        )

    def __repr__(self) -> str:
        return (
            f"ChunkedTileMap(chunks={self.chunk_grid_size}, chunk_size={self.chunk_tile_size}, "
            f"map_size={self.map_size}, placed={self.placed_count})"
        )
