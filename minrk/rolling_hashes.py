from __future__ import annotations
import logging
from collections import defaultdict
from typing import Iterator, List, Tuple

import numpy as np  # To compare candidate windows against each other in one go

from minrk.config import HashConfig, resolve
from minrk.errors import InvalidArgument
from minrk.modpow import modular_power
from minrk.utils import SequenceLike, as_codes

log = logging.getLogger(__name__)


class HashIndex:
    """
    Mapping from the hash of a window to the start offsets of every window with that hash.

    Offsets are only ever appended, and they are appended left to right, so each list is strictly increasing. The
    search relies on that to return the first match.
    """

    def __init__(self, size: int):
        self.size = size
        self.window_count = 0
        self._offsets = defaultdict(list)

    def add(self, value: int, offset: int) -> None:
        offsets = self._offsets[value]
        assert not offsets or offsets[-1] < offset, f"offset {offset} added out of order"
        offsets.append(offset)
        self.window_count += 1

    def candidates(self, value: int) -> Tuple[int, ...]:
        """Offsets of the windows hashing to `value`, ascending. Empty if there are none."""
        return tuple(self._offsets.get(value, ()))

    def items(self) -> Iterator[Tuple[int, Tuple[int, ...]]]:
        for value, offsets in self._offsets.items():
            yield value, tuple(offsets)

    def __contains__(self, value: int) -> bool:
        return value in self._offsets

    def __iter__(self) -> Iterator[int]:
        return iter(self._offsets)

    def __len__(self) -> int:
        return len(self._offsets)

    def __repr__(self) -> str:
        return f"HashIndex(size={self.size}, windows={self.window_count}, hashes={len(self)})"


def _check_size(size: int) -> None:
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise InvalidArgument(f"window size must be a positive integer, got {size!r}")


def _roll(codes: List[int], size: int, config: HashConfig) -> Iterator[Tuple[int, int]]:
    """Yield `(offset, hash)` for every window of `size` in `codes`, left to right. O(1) per window."""
    prime, mod = config.prime, config.mod
    if len(codes) < size:
        return

    # Weight of the leading character in the window, to take it back out when we slide
    coefficient = modular_power(prime, size - 1, mod)

    rhsh = 0
    for i in range(size):
        rhsh = (rhsh * prime) % mod
        rhsh = (rhsh + codes[i]) % mod
    yield 0, rhsh

    for i in range(1, len(codes) - size + 1):
        # 1. Take away the leftmost character portion
        subber = (codes[i - 1] * coefficient) % mod
        # Add mod first in case we under-flow
        rhsh = (rhsh - subber + mod) % mod

        # 2. Shift and add the new character in
        rhsh = (rhsh * prime) % mod
        rhsh = (rhsh + codes[i + size - 1]) % mod
        yield i, rhsh


def calculate_hashes(sequence: SequenceLike, size: int, config: HashConfig | None = None) -> HashIndex:
    """Build the hash index of every window of length `size` in `sequence`.

    :param sequence:    string, bytes, or sequence of characters / integer codes.
    :param size:        window length, a positive integer.
    :param config:      hash base and modulus, `DEFAULT_CONFIG` if None.
    :return:            a HashIndex; empty if the sequence is shorter than the window.
    """
    _check_size(size)
    config = resolve(config)
    codes = as_codes(sequence).tolist()  # Plain Python ints so nothing wraps around

    index = HashIndex(size)
    for offset, value in _roll(codes, size, config):
        index.add(value, offset)

    assert index.window_count == max(0, len(codes) - size + 1)
    log.debug("indexed %d windows of size %d under %d hashes", index.window_count, size, len(index))
    return index


def rolling_hash_values(sequence: SequenceLike, size: int, config: HashConfig | None = None) -> List[int]:
    """Hash of each window of `size`, indexed by the window's start offset."""
    _check_size(size)
    return [value for _, value in _roll(as_codes(sequence).tolist(), size, resolve(config))]


def window_hash(sequence: SequenceLike, start: int, size: int, config: HashConfig | None = None) -> int:
    """
    Hash of the single window `[start, start + size)`, summed from scratch: sum of s[j] * prime^(size-1-j) mod mod.

    This is the slow reference the rolling update has to agree with.
    """
    _check_size(size)
    config = resolve(config)
    codes = as_codes(sequence).tolist()
    if isinstance(start, bool) or not isinstance(start, int) or start < 0 or start + size > len(codes):
        raise InvalidArgument(f"window [{start}, {start}+{size}) does not fit in a sequence of length {len(codes)}")

    total = 0
    for j in range(size):
        term = (codes[start + j] * modular_power(config.prime, size - 1 - j, config.mod)) % config.mod
        total = (total + term) % config.mod
    return total


def rolling_hash_string_pair_intersection(
    string1: SequenceLike, string2: SequenceLike, size: int, config: HashConfig | None = None
) -> bool:
    """
    Check if two strings contain the same substring of length `size`.

    Windows of `string2` are rolled against the hash index of `string1`. Matching hashes are confirmed by comparing
    the windows themselves, so a collision never reports a shared substring that isn't there.
    """
    _check_size(size)
    config = resolve(config)
    codes1 = as_codes(string1)
    codes2 = as_codes(string2)

    index1 = calculate_hashes(codes1, size, config)
    if not len(index1):
        return False
    for offset, value in _roll(codes2.tolist(), size, config):
        for candidate in index1.candidates(value):
            if np.array_equal(codes1[candidate : candidate + size], codes2[offset : offset + size]):
                return True
    return False
