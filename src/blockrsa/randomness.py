"""Randomness sources for prime generation.

Two interchangeable strategies exist: `SystemRandomSource`, backed by the operating system CSPRNG, and
`FallbackRandomSource`, a seeded Mersenne Twister used only when the platform has no OS randomness. The fallback is a
real security degradation and announces itself with a `RuntimeWarning` whenever it is built.

Typical usage example:

    src = detect_source(require_strong=True)
    candidate = random_int(64, src)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import abc
import logging
import os
import random
import secrets
import threading
import time
import warnings

from blockrsa.errors import WeakRandomnessError

logger = logging.getLogger(__name__)

_DEFAULT_SOURCE: "RandomSource | None" = None
_DEFAULT_LOCK = threading.Lock()


class RandomSource(abc.ABC):
    """Supplies uniformly random non-negative integers of a fixed bit width.

    Attributes:
        strong: Whether the source is suitable for cryptographic use.
    """

    strong: bool = False

    @abc.abstractmethod
    def randbits(self, bits: int) -> int:
        """Returns a uniformly random integer in `[0, 2**bits)`."""


class SystemRandomSource(RandomSource):
    """Operating system CSPRNG via `secrets`. Safe for concurrent use."""

    strong = True

    def randbits(self, bits: int) -> int:
        return secrets.randbits(bits)


class FallbackRandomSource(RandomSource):
    """Non-cryptographic fallback built on `random.Random`.

    The underlying generator keeps shared state, so every draw is serialised through a lock to keep concurrent callers
    from receiving correlated values.
    """

    strong = False

    def __init__(self, seed: int | None = None) -> None:
        warnings.warn("Falling back to a non-cryptographic random generator! Generated keys are predictable.",
                      RuntimeWarning)
        logger.warning("No OS randomness available, using non-cryptographic fallback generator.")
        if seed is None:
            seed = time.time_ns() ^ (os.getpid() << 32) ^ threading.get_ident()
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def randbits(self, bits: int) -> int:
        if bits <= 0:
            return 0
        with self._lock:
            return self._rng.getrandbits(bits)


def has_system_randomness() -> bool:
    """Probes whether the platform provides OS-level randomness."""
    try:
        os.urandom(1)
    except NotImplementedError:
        return False
    return True


def detect_source(require_strong: bool = False) -> RandomSource:
    """Selects a random source based on what the platform offers.

    Args:
        require_strong: Fail closed instead of degrading to the fallback. Defaults to False.

    Returns:
        A `SystemRandomSource` when OS randomness exists, otherwise a `FallbackRandomSource`.

    Raises:
        WeakRandomnessError: If `require_strong` is set and no strong source is available.
    """
    if has_system_randomness():
        return SystemRandomSource()
    if require_strong:
        raise WeakRandomnessError("A cryptographically strong random source is required but unavailable.")
    return FallbackRandomSource()


def default_source() -> RandomSource:
    """Returns the process-wide detected source, detecting it on first use."""
    global _DEFAULT_SOURCE
    with _DEFAULT_LOCK:
        if _DEFAULT_SOURCE is None:
            _DEFAULT_SOURCE = detect_source()
            logger.debug("Detected random source: %s", type(_DEFAULT_SOURCE).__name__)
        return _DEFAULT_SOURCE


def reset_default_source() -> None:
    """Forgets the cached default source so the next call re-detects it."""
    global _DEFAULT_SOURCE
    with _DEFAULT_LOCK:
        _DEFAULT_SOURCE = None


def random_int(bits: int, source: RandomSource | None = None) -> int:
    """Draws a random integer occupying exactly `bits` bits.

    The most significant bit is forced to 1, so the result lies in `[2**(bits-1), 2**bits - 1]`.

    Args:
        bits: The bit width. Values <= 0 yield 0.
        source: The random source to draw from. Defaults to `default_source()`.

    Returns:
        The random integer.
    """
    if bits <= 0:
        return 0
    if source is None:
        source = default_source()
    rand = source.randbits(bits) & ((1 << bits) - 1)
    return rand | (1 << (bits - 1))
