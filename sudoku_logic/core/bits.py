"""Precomputed bitset tables: population counts and subsets of a given size."""

from __future__ import annotations
from functools import lru_cache
from typing import Dict, List, Sequence

import numpy as np


# Names of values, in bit order (bit 0 is value 1).
DIGITS = "123456789abcdefghijklmnopqrstuvwxyz@"


class BitTables:
    """
    Lookup tables over the bitsets of a universe of ``size`` elements.

    ``nb_bits[x]`` is the number of bits set in ``x`` for every
    ``0 <= x < 2**size``; it also counts the bits of a whole array of masks
    at once (``nb_bits[masks]``).

    ``of_size(k)`` lists the bitsets with ``k`` bits set, in numeric order.
    """

    def __init__(self, size: int):
        if size < 1 or size > 25:
            raise ValueError(f"Universe size must be 1-25, got {size}")

        self.size = size
        self.full = (1 << size) - 1

        counts = np.zeros(1 << size, dtype=np.uint8)
        for bit in range(size):
            low = 1 << bit
            counts[low:low << 1] = counts[:low] + 1
        self.nb_bits: np.ndarray = counts
        self._by_size: Dict[int, np.ndarray] = {}

    def of_size(self, k: int) -> np.ndarray:
        """All bitsets with exactly ``k`` bits set, ascending."""
        subsets = self._by_size.get(k)
        if subsets is None:
            subsets = np.flatnonzero(self.nb_bits == k).astype(np.int64)
            self._by_size[k] = subsets
        return subsets

    def __repr__(self) -> str:
        return f"BitTables(size={self.size})"


@lru_cache(maxsize=None)
def get_tables(size: int) -> BitTables:
    """Tables for ``size``, built on first use and shared afterwards."""
    return BitTables(size)


def bit_values(bits: int) -> List[int]:
    """1-based values of the bits set in ``bits``, ascending."""
    values = []
    value = 1
    while bits:
        if bits & 1:
            values.append(value)
        bits >>= 1
        value += 1
    return values


def value_name(value: int) -> str:
    return DIGITS[value - 1]


def values_string(bits: int) -> str:
    """Render a bitset as space separated value names, e.g. ``"2 5 9"``."""
    return " ".join(value_name(v) for v in bit_values(bits))


def single_value(bits: int) -> int:
    """The value held by a single-bit set, 0 otherwise."""
    if bits and not bits & (bits - 1):
        return bits.bit_length()
    return 0


def spread(local: np.ndarray, positions: Sequence[int]) -> np.ndarray:
    """
    Move bit ``i`` of every mask of ``local`` to bit ``positions[i]``.

    With ascending positions the numeric order of the masks is kept.
    """
    out = np.zeros_like(local)
    for i, p in enumerate(positions):
        out |= ((local >> i) & 1) << p
    return out


def gather_unions(local: np.ndarray, masks: Sequence[int]) -> np.ndarray:
    """For every mask of ``local``, the OR of ``masks[i]`` over its bits ``i``."""
    out = np.zeros_like(local)
    for i, m in enumerate(masks):
        if m:
            out |= ((local >> i) & 1) * m
    return out
