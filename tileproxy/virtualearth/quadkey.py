"""Tile coordinate to quadkey conversion.

See https://learn.microsoft.com/en-us/bingmaps/articles/bing-maps-tile-system
"""

from typing import Tuple


def tile_to_quadkey(x: int, y: int, z: int) -> str:
    """Encode tile coordinates as a quadkey.

    One base-4 digit per zoom level, most significant level first. The
    x bit weighs 1 and the y bit weighs 2.

    >>> tile_to_quadkey(3, 5, 3)
    '213'
    """
    digits = []
    for i in range(z, 0, -1):
        mask = 1 << (i - 1)
        digit = 0
        if x & mask:
            digit += 1
        if y & mask:
            digit += 2
        digits.append(str(digit))

    return "".join(digits)


def quadkey_to_tile(quadkey: str) -> Tuple[int, int, int]:
    """Decode a quadkey back to (x, y, z)."""
    x = y = 0
    z = len(quadkey)
    for i, char in enumerate(quadkey):
        mask = 1 << (z - i - 1)
        if char == "0":
            continue
        elif char == "1":
            x |= mask
        elif char == "2":
            y |= mask
        elif char == "3":
            x |= mask
            y |= mask
        else:
            raise ValueError(f"Invalid quadkey digit {char!r} in {quadkey!r}")

    return x, y, z
