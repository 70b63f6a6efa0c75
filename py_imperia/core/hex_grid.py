"""
Hex grid storage.

A HexGrid owns at most one HexTile per coordinate. Its layout (tilt, parity
and coordinate system) is fixed at construction; coordinates from any other
system are rejected instead of being silently reinterpreted.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from .errors import DuplicateCoordinate, InvalidParameter, MismatchedCoordinateSystem
from .hex_coords import CoordSystem, HexCoordinate, HexLayout, HexParity, HexTilt, neighbors
from .terrain import TerrainType


@dataclass(frozen=True)
class HexTile:
    """Persistent record of one grid cell."""

    coordinate: HexCoordinate
    terrain: TerrainType


class HexGrid:
    """Associative hex storage keyed by HexCoordinate."""

    def __init__(
        self,
        tilt: HexTilt = HexTilt.FLAT,
        parity: HexParity = HexParity.EVEN,
        system: CoordSystem = CoordSystem.OFFSET,
    ):
        self.layout = HexLayout(HexTilt(tilt), HexParity(parity), CoordSystem(system))
        self._tiles: Dict[HexCoordinate, HexTile] = {}

    @classmethod
    def from_layout(cls, layout: HexLayout) -> "HexGrid":
        return cls(layout.tilt, layout.parity, layout.system)

    @property
    def system(self) -> CoordSystem:
        return self.layout.system

    def _check_system(self, coordinate: HexCoordinate) -> None:
        if coordinate.system != self.layout.system:
            raise MismatchedCoordinateSystem(self.layout.system, coordinate.system, coordinate)

    def add(self, coordinate: HexCoordinate, tile: HexTile) -> None:
        """
        Insert a tile.

        Raises:
            MismatchedCoordinateSystem: coordinate or tile uses another system
            InvalidParameter: the tile's own coordinate differs from the key
            DuplicateCoordinate: a tile is already stored at coordinate
        """
        self._check_system(coordinate)
        self._check_system(tile.coordinate)
        if tile.coordinate != coordinate:
            raise InvalidParameter("tile", tile.coordinate, f"tile coordinate does not match key {coordinate}")
        if coordinate in self._tiles:
            raise DuplicateCoordinate(coordinate)
        self._tiles[coordinate] = tile

    def get(self, coordinate: HexCoordinate) -> Optional[HexTile]:
        """Stored tile at coordinate, or None."""
        self._check_system(coordinate)
        return self._tiles.get(coordinate)

    def neighbors(self, coordinate: HexCoordinate) -> List[HexTile]:
        """Stored tiles adjacent to coordinate, following the grid layout."""
        self._check_system(coordinate)
        return [
            self._tiles[neighbor]
            for neighbor in neighbors(coordinate, self.layout)
            if neighbor in self._tiles
        ]

    def coordinates(self) -> List[HexCoordinate]:
        return list(self._tiles)

    def count_by_terrain(self) -> Dict[TerrainType, int]:
        counts = {terrain: 0 for terrain in TerrainType}
        for tile in self._tiles.values():
            counts[tile.terrain] += 1
        return counts

    def __contains__(self, coordinate: object) -> bool:
        if isinstance(coordinate, HexCoordinate):
            self._check_system(coordinate)
        return coordinate in self._tiles

    def __iter__(self) -> Iterator[HexTile]:
        return iter(self._tiles.values())

    def __len__(self) -> int:
        return len(self._tiles)

    def __repr__(self) -> str:
        return (
            f"HexGrid(tilt={self.layout.tilt.value}, parity={self.layout.parity.value}, "
            f"system={self.layout.system.value}, tiles={len(self)})"
        )
