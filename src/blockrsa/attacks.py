"""Cryptanalysis demonstrations against toy-sized keys.

With moduli this small, both exhaustive plaintext search and factoring the modulus are instant. These functions show
why the demonstration keys offer no secrecy.

Typical usage example:

    m = brute_force_block(8, PublicKey(55, 3))
    priv = recover_private_key(PublicKey(55, 3))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import typing

from blockrsa import arith
from blockrsa import codec as codecs
from blockrsa import rsa
from blockrsa.keys import PrivateKey
from blockrsa.keys import PublicKey

logger = logging.getLogger(__name__)


def brute_force_block(block: int, public_key: typing.Any) -> int | None:
    """Finds the plaintext block by trying every value below the modulus.

    Args:
        block: One encrypted block.
        public_key: The public key it was encrypted with.

    Returns:
        The first `m` with `m**e % n == block`, or None if nothing matches.
    """
    key = PublicKey.coerce(public_key)
    for m in range(key.n):
        if arith.mod_pow(m, key.e, key.n) == block:
            return m
    return None


def factor_modulus(n: int) -> tuple[int, int]:
    """Splits `n` into two factors by trial division.

    Args:
        n: The modulus.

    Returns:
        `(p, q)` with `p <= q` and `p * q == n`.

    Raises:
        ValueError: If `n` has no non-trivial factor.
    """
    if n > 3 and n % 2 == 0:
        return 2, n // 2
    for i in range(3, math.isqrt(n) + 1, 2):
        if n % i == 0:
            return i, n // i
    raise ValueError(f"{n} has no non-trivial factor.")


def recover_private_key(public_key: typing.Any) -> PrivateKey:
    """Rebuilds the private key by factoring the public modulus.

    Raises:
        ValueError: If the modulus cannot be factored.
        NoInverseError: If `e` is not invertible modulo phi.
    """
    key = PublicKey.coerce(public_key)
    p, q = factor_modulus(key.n)
    logger.info("Factored n=%d into p=%d, q=%d", key.n, p, q)
    d = arith.mod_inverse(key.e, (p - 1) * (q - 1))
    return PrivateKey(key.n, d, key.e, p, q)


def crack(ciphertext: str, public_key: typing.Any, codec: codecs.LossyCodec | None = None) -> str:
    """Decrypts a ciphertext knowing only the public key.

    Returns:
        The plaintext, or `rsa.DECRYPTION_FAILED` if the recovered key cannot decode it.
    """
    return rsa.decrypt(ciphertext, recover_private_key(public_key), codec)
