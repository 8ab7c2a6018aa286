"""A toy RSA cryptosystem for text messages.

Provides modular arithmetic, trial-division prime generation, key pair derivation and a block codec that encrypts
variable-length text as a sequence of RSA blocks. Keys are far too small to be secure and no padding is used; this
package exists for demonstrations only.

Typical usage example:

    pub, priv = generate_key_pair(64)
    c = encrypt("Hi there!", pub)
    r = decrypt(c, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from blockrsa.arith import gcd
from blockrsa.arith import mod_inverse
from blockrsa.arith import mod_pow
from blockrsa.keygen import generate_key_pair
from blockrsa.keygen import generate_prime
from blockrsa.keygen import is_prime
from blockrsa.keys import KeyPair
from blockrsa.keys import PrivateKey
from blockrsa.keys import PublicKey
from blockrsa.rsa import DECRYPTION_FAILED
from blockrsa.rsa import decrypt
from blockrsa.rsa import decrypt_result
from blockrsa.rsa import DecryptResult
from blockrsa.rsa import encrypt

__version__ = "0.1.0"
__all__ = [
    "DECRYPTION_FAILED",
    "DecryptResult",
    "KeyPair",
    "PrivateKey",
    "PublicKey",
    "decrypt",
    "decrypt_result",
    "encrypt",
    "gcd",
    "generate_key_pair",
    "generate_prime",
    "is_prime",
    "mod_inverse",
    "mod_pow",
]
