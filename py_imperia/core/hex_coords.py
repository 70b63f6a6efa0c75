"""Hex coordinate systems and conversions.

Offset coordinates store (column, row) in (q, r). How offset rows and columns
shift depends on the layout:

    FLAT tilt  -> columns are shifted ("q" offsets), parity picks even-q/odd-q
    POINTY tilt -> rows are shifted ("r" offsets), parity picks even-r/odd-r

Axial coordinates use the six directions (clockwise from E):

    (+1,  0), (+1, -1), (0, -1), (-1, 0), (-1, +1), (0, +1)

Cube coordinates are axial coordinates with the derived third component
s = -q - r.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .errors import InvalidParameter, MismatchedCoordinateSystem


class HexTilt(str, Enum):
    """Hexagon orientation."""

    FLAT = "flat"
    POINTY = "pointy"


class HexParity(str, Enum):
    """Which offset rows/columns are shoved."""

    EVEN = "even"
    ODD = "odd"


class CoordSystem(str, Enum):
    """Coordinate system used to address hexes."""

    OFFSET = "offset"
    AXIAL = "axial"
    CUBE = "cube"


@dataclass(frozen=True)
class HexCoordinate:
    """One hex cell. Equality covers q, r and the coordinate system."""

    q: int
    r: int
    system: CoordSystem = CoordSystem.OFFSET

    @property
    def s(self) -> int:
        return -self.q - self.r

    @classmethod
    def offset(cls, col: int, row: int) -> "HexCoordinate":
        return cls(col, row, CoordSystem.OFFSET)

    @classmethod
    def axial(cls, q: int, r: int) -> "HexCoordinate":
        return cls(q, r, CoordSystem.AXIAL)

    @classmethod
    def cube(cls, q: int, r: int, s: int) -> "HexCoordinate":
        if q + r + s != 0:
            raise InvalidParameter("cube", (q, r, s), "q + r + s must equal 0")
        return cls(q, r, CoordSystem.CUBE)

    def __str__(self) -> str:
        if self.system == CoordSystem.CUBE:
            return f"cube({self.q}, {self.r}, {self.s})"
        return f"{self.system.value}({self.q}, {self.r})"


@dataclass(frozen=True)
class HexLayout:
    """Tilt, parity and coordinate system, fixed for a grid or map."""

    tilt: HexTilt = HexTilt.FLAT
    parity: HexParity = HexParity.EVEN
    system: CoordSystem = CoordSystem.OFFSET

    @classmethod
    def column_even(cls) -> "HexLayout":
        return cls(HexTilt.FLAT, HexParity.EVEN, CoordSystem.OFFSET)

    @classmethod
    def column_odd(cls) -> "HexLayout":
        return cls(HexTilt.FLAT, HexParity.ODD, CoordSystem.OFFSET)

    @classmethod
    def row_even(cls) -> "HexLayout":
        return cls(HexTilt.POINTY, HexParity.EVEN, CoordSystem.OFFSET)

    @classmethod
    def row_odd(cls) -> "HexLayout":
        return cls(HexTilt.POINTY, HexParity.ODD, CoordSystem.OFFSET)

    def coordinate(self, q: int, r: int) -> HexCoordinate:
        """Build a coordinate in this layout's system."""
        return HexCoordinate(q, r, self.system)


AXIAL_DIRECTIONS: List[Tuple[int, int]] = [
    (+1, 0),
    (+1, -1),
    (0, -1),
    (-1, 0),
    (-1, +1),
    (0, +1),
]

# (dcol, drow) offsets indexed by [tilt, parity][shoved line parity]
# where index 0 is an even row/column and 1 is odd.
OFFSET_NEIGHBORS = {
    (HexTilt.FLAT, HexParity.ODD): (
        [(+1, 0), (+1, -1), (0, -1), (-1, -1), (-1, 0), (0, +1)],
        [(+1, +1), (+1, 0), (0, -1), (-1, 0), (-1, +1), (0, +1)],
    ),
    (HexTilt.FLAT, HexParity.EVEN): (
        [(+1, +1), (+1, 0), (0, -1), (-1, 0), (-1, +1), (0, +1)],
        [(+1, 0), (+1, -1), (0, -1), (-1, -1), (-1, 0), (0, +1)],
    ),
    (HexTilt.POINTY, HexParity.ODD): (
        [(+1, 0), (0, -1), (-1, -1), (-1, 0), (-1, +1), (0, +1)],
        [(+1, 0), (+1, -1), (0, -1), (-1, 0), (0, +1), (+1, +1)],
    ),
    (HexTilt.POINTY, HexParity.EVEN): (
        [(+1, 0), (+1, -1), (0, -1), (-1, 0), (0, +1), (+1, +1)],
        [(+1, 0), (0, -1), (-1, -1), (-1, 0), (-1, +1), (0, +1)],
    ),
}


def offset_to_axial(col: int, row: int, tilt: HexTilt, parity: HexParity) -> Tuple[int, int]:
    """Convert offset (col, row) to axial (q, r)."""
    if tilt == HexTilt.FLAT:
        if parity == HexParity.EVEN:
            return col, row - (col + (col & 1)) // 2
        return col, row - (col - (col & 1)) // 2
    if parity == HexParity.EVEN:
        return col - (row + (row & 1)) // 2, row
    return col - (row - (row & 1)) // 2, row


def axial_to_offset(q: int, r: int, tilt: HexTilt, parity: HexParity) -> Tuple[int, int]:
    """Convert axial (q, r) to offset (col, row)."""
    if tilt == HexTilt.FLAT:
        if parity == HexParity.EVEN:
            return q, r + (q + (q & 1)) // 2
        return q, r + (q - (q & 1)) // 2
    if parity == HexParity.EVEN:
        return q + (r + (r & 1)) // 2, r
    return q + (r - (r & 1)) // 2, r


def to_axial(coordinate: HexCoordinate, layout: HexLayout) -> HexCoordinate:
    """Express any coordinate as axial, using the layout for offset input."""
    if coordinate.system == CoordSystem.OFFSET:
        q, r = offset_to_axial(coordinate.q, coordinate.r, layout.tilt, layout.parity)
        return HexCoordinate.axial(q, r)
    return HexCoordinate.axial(coordinate.q, coordinate.r)


def convert(coordinate: HexCoordinate, layout: HexLayout, target: CoordSystem) -> HexCoordinate:
    """Convert a coordinate into the target system under the given layout."""
    if coordinate.system == target:
        return coordinate
    axial = to_axial(coordinate, layout)
    if target == CoordSystem.OFFSET:
        col, row = axial_to_offset(axial.q, axial.r, layout.tilt, layout.parity)
        return HexCoordinate.offset(col, row)
    return HexCoordinate(axial.q, axial.r, target)


def neighbors(coordinate: HexCoordinate, layout: HexLayout) -> List[HexCoordinate]:
    """
    Six neighbours of a hex, in the same coordinate system as the input.

    Offset coordinates use the tilt/parity neighbour tables; axial and cube
    coordinates use AXIAL_DIRECTIONS.
    """
    if coordinate.system == CoordSystem.OFFSET:
        even_table, odd_table = OFFSET_NEIGHBORS[(layout.tilt, layout.parity)]
        shoved = coordinate.q if layout.tilt == HexTilt.FLAT else coordinate.r
        table = odd_table if shoved & 1 else even_table
        return [
            HexCoordinate.offset(coordinate.q + dc, coordinate.r + dr) for dc, dr in table
        ]
    return [
        HexCoordinate(coordinate.q + dq, coordinate.r + dr, coordinate.system)
        for dq, dr in AXIAL_DIRECTIONS
    ]


def distance(a: HexCoordinate, b: HexCoordinate, layout: HexLayout) -> int:
    """Hex distance between two coordinates of the same system."""
    if a.system != b.system:
        raise MismatchedCoordinateSystem(a.system, b.system, b)
    a_ax = to_axial(a, layout)
    b_ax = to_axial(b, layout)
    dq = a_ax.q - b_ax.q
    dr = a_ax.r - b_ax.r
    return (abs(dq) + abs(dq + dr) + abs(dr)) // 2


def axial_round(q: float, r: float) -> Tuple[int, int]:
    """Round fractional axial coordinates to the nearest hex."""
    s = -q - r
    rq = round(q)
    rr = round(r)
    rs = round(s)

    q_diff = abs(rq - q)
    r_diff = abs(rr - r)
    s_diff = abs(rs - s)

    if q_diff > r_diff and q_diff > s_diff:
        rq = -rr - rs
    elif r_diff > s_diff:
        rr = -rq - rs

    return int(rq), int(rr)


def hex_to_pixel(
    coordinate: HexCoordinate, layout: HexLayout, tile_size: Tuple[float, float]
) -> Tuple[float, float]:
    """
    Pixel centre of a hex relative to the centre of hex (0, 0).

    Tiles are sprites of tile_size (w, h). Flat-top hexes advance 3/4 of the
    width per column and a full height per row; pointy-top hexes advance a
    full width per column and 3/4 of the height per row.
    """
    width, height = tile_size
    axial = to_axial(coordinate, layout)
    if layout.tilt == HexTilt.FLAT:
        return width * 0.75 * axial.q, height * (axial.r + axial.q / 2.0)
    return width * (axial.q + axial.r / 2.0), height * 0.75 * axial.r


def pixel_to_hex(
    x: float, y: float, layout: HexLayout, tile_size: Tuple[float, float]
) -> HexCoordinate:
    """Inverse of hex_to_pixel; returns a coordinate in the layout's system."""
    width, height = tile_size
    if width <= 0 or height <= 0 or not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidParameter("pixel", (x, y), "tile size must be positive and pixels finite")

    if layout.tilt == HexTilt.FLAT:
        q = x / (width * 0.75)
        r = y / height - q / 2.0
    else:
        r = y / (height * 0.75)
        q = x / width - r / 2.0

    rq, rr = axial_round(q, r)
    return convert(HexCoordinate.axial(rq, rr), layout, layout.system)
