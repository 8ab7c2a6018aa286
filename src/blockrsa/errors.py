"""Exceptions raised by blockrsa.

Every exception also subclasses the builtin a caller would naturally catch, so `except ValueError` keeps working for
bad arguments and `except RuntimeError` for failed generation.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAError(Exception):
    """Base class for all blockrsa errors."""


class InvalidKeyError(RSAError, ValueError):
    """Key material is missing or malformed."""


class ModulusTooSmallError(RSAError, ValueError):
    """The modulus cannot hold a single byte per block."""


class BlockRangeError(RSAError, RuntimeError):
    """An encoded block is not strictly smaller than the modulus."""


class NoInverseError(RSAError, ValueError):
    """No modular inverse exists for the given pair."""


class NoSuitableExponentError(RSAError, RuntimeError):
    """No public exponent coprime to phi was found below phi."""


class PrimeSearchExhaustedError(RSAError, TimeoutError):
    """A bounded prime search ran out of attempts or time."""


class WeakRandomnessError(RSAError, RuntimeError):
    """A cryptographically strong random source was required but is unavailable."""
