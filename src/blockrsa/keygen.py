"""Prime and key pair generation for small demonstration keys.

Primes are found by generate-and-test: draw a biased random candidate of the requested width, make it odd, and check
it by exhaustive trial division. Trial division costs O(sqrt(n)), so only the small `PRIME_BITS_MENU` widths finish in
reasonable time. The search is unbounded by default; `max_tries` and `timeout` turn it into a bounded one.

Typical usage example:

    p = generate_prime(32)
    pair = generate_key_pair(64)
    pub, priv = pair
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import time

from blockrsa import arith
from blockrsa.errors import NoSuitableExponentError
from blockrsa.errors import PrimeSearchExhaustedError
from blockrsa.keys import KeyPair
from blockrsa.keys import PrivateKey
from blockrsa.keys import PublicKey
from blockrsa.randomness import random_int
from blockrsa.randomness import RandomSource

logger = logging.getLogger(__name__)

PRIME_BITS_MENU: tuple[int, ...] = (32, 64, 128)
DEFAULT_PRIME_BITS: int = 128
DEFAULT_PUBLIC_EXPONENT: int = 65537
MINIMUM_PRIME_BITS: int = 8


def is_prime(n: int) -> bool:
    """Checks primality by trial division with every odd number up to the square root.

    Args:
        n: The number to check.

    Returns:
        True if `n` is prime, False otherwise.
    """
    if n < 2:
        return False
    if n in (2, 3):
        return True
    if n % 2 == 0:
        return False
    for i in range(3, math.isqrt(n) + 1, 2):
        if n % i == 0:
            return False
    return True


def _candidate(bits: int, source: RandomSource | None) -> int:
    """Draws an odd candidate of exactly `bits` bits, with both top bits set."""
    num = (1 << (bits - 1)) + random_int(bits - 1, source)
    if num % 2 == 0:
        num += 1
    return num


def generate_prime(bits: int,
                   source: RandomSource | None = None,
                   max_tries: int | None = None,
                   timeout: float | None = None) -> int:
    """Generate a prime number of the specified bit size.

    Keeps drawing candidates until one passes `is_prime`. Without `max_tries` or `timeout` this blocks until a prime
    turns up, which for widths far beyond `PRIME_BITS_MENU` may effectively be forever.

    Args:
        bits: The size of the prime to generate in bits. Must be at least `MINIMUM_PRIME_BITS`.
        source: The random source to draw candidates from. Defaults to the detected system source.
        max_tries: Optional cap on the number of candidates tested.
        timeout: Optional cap on the wall-clock seconds spent searching.

    Returns:
        A prime with exactly `bits` bits.

    Raises:
        ValueError: If `bits` is below `MINIMUM_PRIME_BITS`.
        PrimeSearchExhaustedError: If a configured bound is hit before a prime is found.
    """
    if bits < MINIMUM_PRIME_BITS:
        raise ValueError(f"Prime bit length must be at least {MINIMUM_PRIME_BITS}.")
    deadline = None if timeout is None else time.monotonic() + timeout
    tries = 0
    while True:
        if max_tries is not None and tries >= max_tries:
            raise PrimeSearchExhaustedError(f"No {bits}-bit prime found in {max_tries} tries.")
        if deadline is not None and time.monotonic() >= deadline:
            raise PrimeSearchExhaustedError(f"No {bits}-bit prime found within {timeout} seconds.")
        tries += 1
        num = _candidate(bits, source)
        if is_prime(num):
            logger.debug("Found %d-bit prime after %d candidates.", bits, tries)
            return num


def generate_primes(bits: int,
                    source: RandomSource | None = None,
                    max_tries: int | None = None,
                    timeout: float | None = None) -> tuple[int, int]:
    """Generates a pair of distinct primes of the same width.

    Args:
        bits: The width of each prime in bits.
        source: Passed to `generate_prime()`.
        max_tries: Passed to `generate_prime()`, applies to each prime separately.
        timeout: Passed to `generate_prime()`, applies to each prime separately.

    Returns:
        The primes `(p, q)` with `p != q`.
    """
    p = generate_prime(bits, source, max_tries, timeout)
    q = generate_prime(bits, source, max_tries, timeout)
    while p == q:  # Only plausible at the smallest widths.
        q = generate_prime(bits, source, max_tries, timeout)
    return p, q


def find_public_exponent(phi: int, start: int = DEFAULT_PUBLIC_EXPONENT) -> int:
    """Finds the first odd exponent from `start` upward that is coprime to `phi`.

    Args:
        phi: Euler's totient of the modulus.
        start: The first exponent to try. Defaults to 65537.

    Returns:
        The public exponent.

    Raises:
        NoSuitableExponentError: If the search reaches `phi` without success.
    """
    e = start
    while arith.gcd(e, phi) != 1:
        logger.warning("gcd(%d, %d) is not 1. Trying next odd e.", e, phi)
        e += 2
        if e >= phi:
            raise NoSuitableExponentError("Could not find a suitable public exponent e.")
    return e


def generate_key_pair(prime_bits: int = DEFAULT_PRIME_BITS,
                      pub: int = DEFAULT_PUBLIC_EXPONENT,
                      expose_primes: bool = False,
                      source: RandomSource | None = None,
                      max_tries: int | None = None,
                      timeout: float | None = None) -> KeyPair:
    """Generates an RSA key pair.

    Args:
        prime_bits: The width of each of the two primes. One of `PRIME_BITS_MENU` is recommended.
        pub: The first public exponent to try. Defaults to 65537.
        expose_primes: Whether the private key keeps `p`, `q` and `e`. Defaults to False.
            Needed for PKCS8 export.
        source: The random source for prime generation.
        max_tries: Optional bound on candidates per prime.
        timeout: Optional bound in seconds per prime.

    Returns:
        The `KeyPair`, whose halves share the modulus.

    Raises:
        NoSuitableExponentError: If no exponent coprime to phi exists below phi.
    """
    logger.info("Generating %d-bit primes... This might take a while with trial division.", prime_bits)
    p, q = generate_primes(prime_bits, source, max_tries, timeout)
    logger.debug("Generated primes p=%d, q=%d", p, q)
    n = p * q
    phi = (p - 1) * (q - 1)
    e = find_public_exponent(phi, pub)
    logger.debug("Using public exponent e=%d", e)
    d = arith.mod_inverse(e, phi)
    logger.info("Key generation complete, modulus has %d bits.", n.bit_length())
    if not expose_primes:
        del p, q
        return KeyPair.of(PublicKey(n, e), PrivateKey(n, d))
    return KeyPair.of(PublicKey(n, e), PrivateKey(n, d, e, p, q))
