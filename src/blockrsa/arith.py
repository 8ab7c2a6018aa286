"""Integer arithmetic core: modular exponentiation, GCD and modular inversion."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from blockrsa.errors import NoInverseError


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    """Computes `base**exponent % modulus` by square-and-multiply.

    Args:
        base: The base. Reduced modulo `modulus` before the loop, so negative or oversized values are fine.
        exponent: The exponent. Must be >= 0.
        modulus: The modulus. Must be >= 1.

    Returns:
        The result in `[0, modulus)`. A modulus of 1 always yields 0.

    Raises:
        ValueError: If `exponent` is negative or `modulus` is not positive.
    """
    if exponent < 0:
        raise ValueError("exponent must be >= 0")
    if modulus < 1:
        raise ValueError("modulus must be >= 1")
    if modulus == 1:
        return 0
    result = 1
    base %= modulus
    while exponent > 0:
        if exponent & 1:
            result = (result * base) % modulus
        exponent >>= 1
        base = (base * base) % modulus
    return result


def gcd(a: int, b: int) -> int:
    """Greatest common divisor by the Euclidean algorithm. Always non-negative."""
    while b != 0:
        a, b = b, a % b
    return abs(a)


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers, as well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse(e: int, phi: int) -> int:
    """Finds the modular inverse of `e` modulo `phi`.

    Args:
        e: The value to invert, usually the public exponent.
        phi: The modulus, usually Euler's totient of the RSA modulus. Must be positive.

    Returns:
        The unique `d` in `[0, phi)` with `e*d % phi == 1`.

    Raises:
        NoInverseError: If `gcd(e, phi) != 1`.
    """
    if phi < 1:
        raise ValueError("phi must be >= 1")
    g, _, t = eea(phi, e % phi)
    if g != 1:
        raise NoInverseError(f"Modular inverse of {e} mod {phi} does not exist.")
    return t % phi
