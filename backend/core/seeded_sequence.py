"""
Deterministic pseudo-random sequence.

Part of FL-8: Reproducible plan generation

Plans must be reproducible: the same date, profile and category always give
the same exercise order. A seed string is hashed to 32 bits, which seeds a
linear congruential generator that drives a Fisher-Yates shuffle.
"""

from typing import List, Sequence, TypeVar

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223


def string_hash(text: str) -> int:
    """
    31-multiplier string hash, wrapped to signed 32 bits, as an absolute value.

    Hashes UTF-16 code units so that characters outside the BMP contribute
    two units, the same way a browser-side implementation would.
    """
    h = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        unit = encoded[i] | (encoded[i + 1] << 8)
        h = (31 * h + unit) & _MASK_32
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class SeededSequence:
    """
    Linear congruential generator seeded from a string.

    Example:
        >>> a = SeededSequence("2024-03-0412chest")
        >>> b = SeededSequence("2024-03-0412chest")
        >>> a.shuffle([1, 2, 3, 4]) == b.shuffle([1, 2, 3, 4])
        True
    """

    def __init__(self, seed: str):
        self._state = string_hash(seed)

    @property
    def state(self) -> int:
        return self._state

    def next(self) -> int:
        """Advance and return the next 32-bit value."""
        self._state = (self._state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _MASK_32
        return self._state

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy; the input is left untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.next() % (i + 1)
            result[i], result[j] = result[j], result[i]
        return result
