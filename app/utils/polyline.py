"""
Polyline encoding utility.
Implements the Encoded Polyline Algorithm Format.
ref: https://developers.google.com/maps/documentation/utilities/polylinealgorithm

Points are plain 2-tuples kept in the order they are encoded. The codec does
not know which axis is latitude; callers reorder with `swap_axes` at the
boundary where they know the provider's convention.
"""
from typing import Iterable, List, Sequence, Tuple

DEFAULT_PRECISION = 1e5


class PolylineDecodeError(ValueError):
    """Raised when an encoded polyline string is truncated or malformed."""


def encode_polyline(
    points: Iterable[Sequence[float]],
    precision: float = DEFAULT_PRECISION
) -> str:
    """
    Encode a list of coordinate pairs into a polyline string.

    Args:
        points: Iterable of (first, second) pairs, e.g. (latitude, longitude).
        precision: Multiplier applied before rounding (1e5 is the standard).

    Returns:
        Encoded polyline string.
    """
    result = []
    prev_first = 0
    prev_second = 0

    for first, second in points:
        first_int = int(round(first * precision))
        second_int = int(round(second * precision))

        result.append(_encode_value(first_int - prev_first))
        result.append(_encode_value(second_int - prev_second))

        prev_first = first_int
        prev_second = second_int

    return "".join(result)


def decode_polyline(
    encoded: str,
    precision: float = DEFAULT_PRECISION
) -> List[Tuple[float, float]]:
    """
    Decode a polyline string into coordinate pairs.

    Args:
        encoded: Encoded polyline string.
        precision: Divisor applied to the accumulated integers. Must match the
            value the encoder used; a wrong factor scales every coordinate.

    Returns:
        List of (first, second) pairs in encoded order.

    Raises:
        PolylineDecodeError: If the string ends inside a value or holds an
            odd number of values.
    """
    points = []
    index = 0
    first = 0
    second = 0
    length = len(encoded)

    while index < length:
        delta_first, index = _decode_value(encoded, index)
        if index >= length:
            raise PolylineDecodeError(
                f"Polyline ends after a lone coordinate at position {index}"
            )
        delta_second, index = _decode_value(encoded, index)

        first += delta_first
        second += delta_second
        points.append((first / precision, second / precision))

    return points


def swap_axes(points: Iterable[Sequence[float]]) -> List[Tuple[float, float]]:
    """Convert (x, y) pairs to (y, x) pairs and back."""
    return [(b, a) for a, b in points]


def _encode_value(value: int) -> str:
    """Encode a single value."""
    value = value << 1
    if value < 0:
        value = ~value

    result = []
    while value >= 0x20:
        result.append(chr((0x20 | (value & 0x1f)) + 63))
        value >>= 5
    result.append(chr(value + 63))

    return "".join(result)


def _decode_value(encoded: str, index: int) -> Tuple[int, int]:
    """Decode a single zig-zag value starting at index. Returns (value, next_index)."""
    result = 0
    shift = 0

    while True:
        if index >= len(encoded):
            raise PolylineDecodeError(
                f"Unterminated value at end of polyline (length {len(encoded)})"
            )
        chunk = ord(encoded[index]) - 63
        index += 1
        if chunk < 0 or chunk > 0x3f:
            raise PolylineDecodeError(
                f"Invalid polyline character {encoded[index - 1]!r} at position {index - 1}"
            )
        result |= (chunk & 0x1f) << shift
        shift += 5
        if chunk < 0x20:
            break

    if result & 1:
        return ~(result >> 1), index
    return result >> 1, index
