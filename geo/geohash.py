"""
Purpose: Geohash codec (pure functions).
What it does:
- encode a Coordinate into a fixed-length base-32 cell string
- decode a cell string back to its centre (or its bounding box)
- list the "nearby" cells searched by the matching engine

Bit layout: bits alternate longitude/latitude starting with longitude at bit 0.
Every 5 bits form one symbol, most significant bit first.

Rule: No state here. Same input, same output.
"""

from __future__ import annotations

from typing import Set, Tuple

from .models import Coordinate

BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_DECODE_MAP = {symbol: index for index, symbol in enumerate(BASE32)}

# ~1.2km x 0.6km cells
DEFAULT_PRECISION = 6

BBox = Tuple[float, float, float, float]


def encode(coordinate: Coordinate, precision: int = DEFAULT_PRECISION) -> str:
    """
    Encode a coordinate into a geohash of exactly `precision` symbols.

    Out-of-range coordinates are not rejected: they saturate to an edge cell.
    """
    if precision < 0:
        raise ValueError("precision must be >= 0")

    lat_min, lat_max = -90.0, 90.0
    lon_min, lon_max = -180.0, 180.0

    symbols = []
    bit = 0
    ch = 0

    while len(symbols) < precision:
        if bit % 2 == 0:
            mid = (lon_min + lon_max) / 2
            if coordinate.longitude >= mid:
                ch |= 1 << (4 - bit % 5)
                lon_min = mid
            else:
                lon_max = mid
        else:
            mid = (lat_min + lat_max) / 2
            if coordinate.latitude >= mid:
                ch |= 1 << (4 - bit % 5)
                lat_min = mid
            else:
                lat_max = mid

        bit += 1
        if bit % 5 == 0:
            symbols.append(BASE32[ch])
            ch = 0

    return "".join(symbols)


def decode_bbox(geohash: str) -> BBox:
    """
    Return (lat_min, lat_max, lon_min, lon_max) for a geohash.

    A symbol outside the alphabet leaves the ranges untouched for its 5 bits,
    but the axis alternation still advances.
    """
    lat_min, lat_max = -90.0, 90.0
    lon_min, lon_max = -180.0, 180.0
    is_longitude = True

    for symbol in geohash:
        index = _DECODE_MAP.get(symbol)
        for mask in (16, 8, 4, 2, 1):
            if index is not None:
                if is_longitude:
                    mid = (lon_min + lon_max) / 2
                    if index & mask:
                        lon_min = mid
                    else:
                        lon_max = mid
                else:
                    mid = (lat_min + lat_max) / 2
                    if index & mask:
                        lat_min = mid
                    else:
                        lat_max = mid
            is_longitude = not is_longitude

    return lat_min, lat_max, lon_min, lon_max


def decode(geohash: str) -> Coordinate:
    """
    Decode a geohash to the centre of its cell.
    """
    lat_min, lat_max, lon_min, lon_max = decode_bbox(geohash)
    return Coordinate(
        latitude=(lat_min + lat_max) / 2,
        longitude=(lon_min + lon_max) / 2,
    )


def neighbors(geohash: str) -> Set[str]:
    """
    Approximate neighbourhood of a cell.

    Drops the last symbol (unless the hash has at most one symbol) and returns
    the 32 cells sharing that parent prefix. These are siblings, not the 8
    geographically adjacent cells: a cell on the edge of its parent will not
    see the cell across the boundary.
    """
    prefix = geohash[:-1] if len(geohash) > 1 else geohash
    return {prefix + symbol for symbol in BASE32}
