from __future__ import annotations
import logging
import os
import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np  # To compare a candidate window against the target

from minrk.config import HashConfig, resolve
from minrk.rolling_hashes import HashIndex, calculate_hashes
from minrk.utils import SequenceLike, as_codes, print_stats, read_sequence_file

log = logging.getLogger(__name__)


@dataclass
class SearchStats:
    windows: int = 0  # Source windows hashed
    candidates: int = 0  # Windows compared character by character
    collisions: int = 0  # Of those, the ones whose hash matched but content didn't


def _target_hash(target_codes: np.ndarray, config: HashConfig) -> int:
    # The target is its own single window
    index = calculate_hashes(target_codes, len(target_codes), config)
    assert len(index) == 1
    return next(iter(index))


def _matches(source_codes: np.ndarray, target_codes: np.ndarray, offset: int) -> bool:
    return np.array_equal(source_codes[offset : offset + len(target_codes)], target_codes)


def _search(
    source: SequenceLike, target: SequenceLike, config: HashConfig | None, first_only: bool
) -> Tuple[List[int], SearchStats]:
    config = resolve(config)
    source_codes = as_codes(source)
    target_codes = as_codes(target)
    stats = SearchStats()

    if len(target_codes) == 0:
        # The empty target sits in front of every position, the end included
        return ([0] if first_only else list(range(len(source_codes) + 1))), stats
    if len(target_codes) > len(source_codes):
        return [], stats

    index: HashIndex = calculate_hashes(source_codes, len(target_codes), config)
    stats.windows = index.window_count

    offsets = []
    for candidate in index.candidates(_target_hash(target_codes, config)):
        stats.candidates += 1
        if not _matches(source_codes, target_codes, candidate):
            stats.collisions += 1
            log.debug("hash collision at offset %d", candidate)
            continue
        offsets.append(candidate)
        if first_only:
            break
    return offsets, stats


def find(
    source: SequenceLike,
    target: SequenceLike,
    config: HashConfig | None = None,
    return_stats: bool = False,
) -> Union[Optional[int], Tuple[Optional[int], SearchStats]]:
    """Rabin-Karp search for the first occurrence of `target` in `source`.

    :param source:  the sequence searched in.
    :param target:  the sequence searched for. The empty target is found at offset 0.
    :param config:  hash base and modulus, `DEFAULT_CONFIG` if None.
    :param return_stats:    whether to also return the SearchStats of the search.

    :return:    the smallest offset `i` with `source[i:i+len(target)] == target`, or None if there is none.
                if `return_stats` is True, a tuple of that and the SearchStats.
    """
    offsets, stats = _search(source, target, config, first_only=True)
    offset = offsets[0] if offsets else None
    return (offset, stats) if return_stats else offset


def find_all(source: SequenceLike, target: SequenceLike, config: HashConfig | None = None) -> List[int]:
    """Every offset where `target` occurs in `source`, ascending. Overlapping occurrences are all reported."""
    offsets, _ = _search(source, target, config, first_only=False)
    return offsets


def contains(source: SequenceLike, target: SequenceLike, config: HashConfig | None = None) -> bool:
    return find(source, target, config) is not None


def main():
    level = os.environ.get("MINRK_LOG_LEVEL")
    if level:
        logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) != 3:
        print("Usage: python -m minrk.search <source.txt|.fa> <target.txt|.fa>")
    else:
        source, target = map(read_sequence_file, sys.argv[1:3])
        offset, stats = find(source, target, return_stats=True)
        print_stats(source, target, offset, stats)


if __name__ == "__main__":
    main()
