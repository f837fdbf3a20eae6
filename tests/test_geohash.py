import pytest

from geo.geohash import BASE32, decode, decode_bbox, encode, neighbors
from geo.models import Coordinate


def test_encode_origin_single_symbol():
    assert encode(Coordinate(0.0, 0.0), 1) == "s"


def test_encode_known_cities():
    # Reference values from the standard geohash layout
    assert encode(Coordinate(57.64911, 10.40744), 6) == "u4pruy"
    assert encode(Coordinate(40.7128, -74.0060), 5) == "dr5re"


@pytest.mark.parametrize("precision", [1, 3, 6, 9, 12])
def test_encode_length_and_alphabet(precision):
    geohash = encode(Coordinate(-33.8688, 151.2093), precision)

    assert len(geohash) == precision
    assert all(symbol in BASE32 for symbol in geohash)


def test_encode_is_deterministic():
    coordinate = Coordinate(-17.824858, 31.053028)
    assert encode(coordinate) == encode(coordinate)
    assert len(encode(coordinate)) == 6


def test_encode_zero_precision_and_negative():
    assert encode(Coordinate(10.0, 10.0), 0) == ""
    with pytest.raises(ValueError):
        encode(Coordinate(10.0, 10.0), -1)


def test_encode_does_not_reject_out_of_range_input():
    # Saturates to the north-east corner cell
    assert encode(Coordinate(200.0, 400.0), 3) == "zzz"


def test_decode_lands_inside_the_encoded_cell():
    """
    Round trip error is bounded by the cell, not zero.
    """
    coordinate = Coordinate(52.517037, 13.388860)
    geohash = encode(coordinate, 6)

    lat_min, lat_max, lon_min, lon_max = decode_bbox(geohash)
    centre = decode(geohash)

    assert lat_min <= coordinate.latitude <= lat_max
    assert lon_min <= coordinate.longitude <= lon_max
    assert lat_min <= centre.latitude <= lat_max
    assert lon_min <= centre.longitude <= lon_max
    assert encode(centre, 6) == geohash


def test_decode_single_symbol_centre():
    centre = decode("s")
    assert centre.latitude == pytest.approx(22.5)
    assert centre.longitude == pytest.approx(22.5)


def test_decode_skips_unknown_symbols():
    # "a" is not in the alphabet: its 5 bits leave the ranges unchanged
    assert decode("a") == Coordinate(0.0, 0.0)
    assert decode_bbox("a") == (-90.0, 90.0, -180.0, 180.0)


def test_neighbors_are_the_32_siblings():
    cells = neighbors("u4pruy")

    assert len(cells) == 32
    assert "u4pruy" in cells
    assert all(cell.startswith("u4pru") and len(cell) == 6 for cell in cells)


def test_neighbors_of_short_hash_extend_it():
    cells = neighbors("s")

    assert len(cells) == 32
    assert all(cell.startswith("s") and len(cell) == 2 for cell in cells)
