from __future__ import annotations

from minrk.errors import InvalidArgument


def _check_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")


def modular_power(base: int, exponent: int, modulus: int) -> int:
    """Return `base ** exponent % modulus` by repeated squaring.

    :param base:        non-negative integer.
    :param exponent:    non-negative integer.
    :param modulus:     positive integer.
    :return:            an integer in [0, modulus).
    """
    _check_int("base", base)
    _check_int("exponent", exponent)
    _check_int("modulus", modulus)
    if base < 0:
        raise InvalidArgument(f"base must be non-negative, got {base}")
    if exponent < 0:
        raise InvalidArgument(f"exponent must be non-negative, got {exponent}")
    if modulus < 1:
        raise InvalidArgument(f"modulus must be positive, got {modulus}")

    result = 1 % modulus
    base = base % modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        base = (base * base) % modulus
        exponent >>= 1
    return result
