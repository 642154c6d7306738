from __future__ import annotations
from typing import Sequence, Union

import numpy as np  # Integer codes for each character, compared a slice at a time

from minrk.errors import InvalidArgument

SequenceLike = Union[str, bytes, bytearray, Sequence]

# Codes are held as int64
MAX_CODE = int(np.iinfo(np.int64).max)


def _code(element) -> int:
    if isinstance(element, str):
        if len(element) != 1:
            raise InvalidArgument(f"expected a single character, got {element!r}")
        return ord(element)
    if isinstance(element, (int, np.integer)) and not isinstance(element, bool):
        code = int(element)
        if code < 0 or code > MAX_CODE:
            raise InvalidArgument(f"integer codes must be in [0, {MAX_CODE}], got {code}")
        return code
    raise InvalidArgument(f"expected a character or an integer code, got {element!r}")


def as_codes(sequence: SequenceLike) -> np.ndarray:
    """Turn a string, a byte string, or a sequence of characters / non-negative ints into an int64 array of codes."""
    if isinstance(sequence, np.ndarray) and np.issubdtype(sequence.dtype, np.integer):
        if sequence.ndim != 1:
            raise InvalidArgument("integer code arrays must be one-dimensional")
        # Compare before the cast, uint64 values past MAX_CODE would wrap to negative
        too_large = sequence.dtype == np.uint64 and (sequence > np.uint64(MAX_CODE)).any()
        if too_large or (sequence < 0).any():
            raise InvalidArgument(f"integer codes must be in [0, {MAX_CODE}]")
        return sequence.astype(np.int64)
    if isinstance(sequence, str):
        return np.fromiter(map(ord, sequence), dtype=np.int64, count=len(sequence))
    if isinstance(sequence, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(sequence), dtype=np.uint8).astype(np.int64)
    return np.array([_code(x) for x in sequence], dtype=np.int64)


def read_sequence_file(path: str) -> str:
    """
    Read a sequence from disk.

    FASTA files (first non-blank line starts with '>') have their header lines dropped and the remaining lines
    joined. Anything else is read as plain text with trailing newlines removed. Bytes that aren't valid UTF-8 come
    back as U+FFFD.
    """
    with open(path, encoding="utf-8", errors="replace") as f:
        lines = f.read().splitlines()
    first = next((line for line in lines if line.strip()), "")
    if first.startswith(">"):
        return "".join(line.strip() for line in lines if not line.startswith(">"))
    return "\n".join(lines).rstrip("\n")


def print_stats(source: str, target: str, offset, stats) -> None:
    print(f"Source length: {len(source)}")
    print(f"Target length: {len(target)}")
    print(f"Offset: {'not found' if offset is None else offset}")
    print(f"Windows hashed: {stats.windows}")
    print(f"Candidates compared: {stats.candidates}")
    print(f"Collisions: {stats.collisions}")
