# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

from blockrsa import attacks
from blockrsa import keygen
from blockrsa import rsa
from blockrsa.errors import NoInverseError
from blockrsa.keys import PublicKey


def test_brute_force_textbook(textbook_keys):
    pub, _ = textbook_keys
    assert attacks.brute_force_block(8, pub) == 2
    assert attacks.brute_force_block(8, {"n": "55", "e": "3"}) == 2


@pytest.mark.parametrize("m", [0, 1, 2, 17, 54])
def test_brute_force_recovers(textbook_keys, m):
    pub, _ = textbook_keys
    assert attacks.brute_force_block(pow(m, pub.e, pub.n), pub) == m


def test_brute_force_no_match():
    # e=2 is not a permutation, so some residues have no square root.
    assert attacks.brute_force_block(3, PublicKey(7, 2)) is None


@pytest.mark.parametrize("n,expected", [(55, (5, 11)), (3233, (53, 61)), (4, (2, 2)), (10, (2, 5)), (49, (7, 7)),
                                        (4294967291 * 65537, (65537, 4294967291))])
def test_factor_modulus(n, expected):
    assert attacks.factor_modulus(n) == expected


@pytest.mark.parametrize("n", [2, 3, 13, 65537])
def test_factor_modulus_prime(n):
    with pytest.raises(ValueError):
        attacks.factor_modulus(n)


def test_recover_private_key(textbook_keys):
    pub, priv = textbook_keys
    recovered = attacks.recover_private_key(pub)
    assert recovered == priv
    assert (recovered.p, recovered.q) == (5, 11)


def test_recover_private_key_not_invertible():
    with pytest.raises(NoInverseError):
        attacks.recover_private_key(PublicKey(55, 5))


def test_crack_generated_key():
    pub, _ = keygen.generate_key_pair(16)
    ciphertext = rsa.encrypt("attack at dawn", pub)
    assert attacks.crack(ciphertext, pub) == "attack at dawn"


def test_crack_malformed_is_sentinel():
    pub, _ = keygen.generate_key_pair(16)
    assert attacks.crack("nope", pub) == rsa.DECRYPTION_FAILED
