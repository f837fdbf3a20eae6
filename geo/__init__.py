#Marks geo as a package.
#Re-exports the spatial primitives (Coordinate, geohash codec, trie index)
#so other modules import from geo without knowing internal file names.
#No business logic.

from .models import Coordinate
from .geohash import BASE32, DEFAULT_PRECISION, encode, decode, decode_bbox, neighbors
from .spatial_index import GeohashTrie

__all__ = [
    "Coordinate",
    "BASE32",
    "DEFAULT_PRECISION",
    "encode",
    "decode",
    "decode_bbox",
    "neighbors",
    "GeohashTrie",
]
