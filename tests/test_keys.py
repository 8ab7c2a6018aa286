# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa as crsa
from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_modules import rfc5208
from pyasn1_modules import rfc8017
import pytest

from blockrsa import keygen
from blockrsa import keys
from blockrsa import rsa
from blockrsa.errors import InvalidKeyError


@pytest.fixture(scope="module")
def crypto_key() -> crsa.RSAPrivateKey:
    return crsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module")
def small_pair() -> keys.KeyPair:
    return keygen.generate_key_pair(24, expose_primes=True)


def localize_key(pk: crsa.RSAPrivateKey) -> keys.PrivateKey:
    privs = pk.private_numbers()
    pubs = pk.public_key().public_numbers()
    return keys.PrivateKey(pubs.n, privs.d, pubs.e, privs.p, privs.q)


def test_public_record_round_trip(small_pair):
    pub = small_pair.public_key
    rec = pub.to_record()
    assert rec == {"n": str(pub.n), "e": str(pub.e)}
    assert keys.PublicKey.from_record(rec) == pub


def test_private_record_excludes_primes(small_pair):
    priv = small_pair.private_key
    rec = priv.to_record()
    assert rec == {"n": str(priv.n), "d": str(priv.d)}
    restored = keys.PrivateKey.from_record(rec)
    assert restored == priv
    assert restored.p is None


def test_record_strips_whitespace():
    assert keys.PublicKey.from_record({"n": " 55 ", "e": "3"}) == keys.PublicKey(55, 3)


@pytest.mark.parametrize("rec", [{"n": "5.5", "e": "3"}, {"n": "55", "e": "-3"}, {"n": "", "e": "3"}, {"n": "55"},
                                 {"n": "\u00b2", "e": "3"}, {"n": "\uff15\uff15", "e": "3"}, {"n": "55", "e": True}])
def test_record_rejects_malformed(rec):
    with pytest.raises(InvalidKeyError):
        keys.PublicKey.from_record(rec)


def test_keys_are_frozen(textbook_keys):
    pub, priv = textbook_keys
    with pytest.raises(dataclasses.FrozenInstanceError):
        pub.n = 77
    with pytest.raises(dataclasses.FrozenInstanceError):
        priv.d = 1


def test_private_repr_hides_secrets(textbook_keys):
    _, priv = textbook_keys
    assert "27" not in repr(priv)
    assert "55" in repr(priv)


def test_key_pair_shares_modulus(textbook_keys):
    pub, priv = textbook_keys
    pair = keys.KeyPair.of(pub, priv)
    assert pair.public_key.n == pair.private_key.n
    with pytest.raises(InvalidKeyError):
        keys.KeyPair.of(keys.PublicKey(77, 7), priv)


def test_public_pem_round_trip(small_pair, tmp_path):
    des = tmp_path / "key.pub"
    small_pair.public_key.export(des)
    assert des.read_text(encoding="ascii").startswith("-----BEGIN RSA PUBLIC KEY-----\n")
    assert keys.PublicKey.import_key(des) == small_pair.public_key


def test_private_pem_round_trip(small_pair, tmp_path):
    des = tmp_path / "key"
    small_pair.private_key.export(des)
    imported = keys.PrivateKey.import_key(des)
    assert imported == small_pair.private_key
    assert (imported.e, imported.p, imported.q) == (small_pair.public_key.e, small_pair.private_key.p,
                                                    small_pair.private_key.q)
    ciphertext = rsa.encrypt("Hi there!", small_pair.public_key)
    assert rsa.decrypt(ciphertext, imported) == "Hi there!"


def test_private_export_needs_primes(tmp_path):
    with pytest.raises(NotImplementedError):
        keys.PrivateKey(55, 27).export(tmp_path / "key")


def test_public_export_interop(crypto_key, tmp_path):
    pubs = crypto_key.public_key().public_numbers()
    des = tmp_path / "interop.pub"
    keys.PublicKey(pubs.n, pubs.e).export(des)
    with open(des, "rb") as fi:
        loaded = serialization.load_pem_public_key(fi.read())
    assert loaded.public_numbers() == pubs


def test_private_export_interop(crypto_key, tmp_path):
    des = tmp_path / "interop"
    localize_key(crypto_key).export(des)
    with open(des, "rb") as fi:
        loaded = serialization.load_pem_private_key(fi.read(), None)
    assert loaded.private_numbers() == crypto_key.private_numbers()


def test_import_interop(crypto_key, tmp_path):
    priv_file, pub_file = tmp_path / "theirs", tmp_path / "theirs.pub"
    priv_file.write_bytes(
        crypto_key.private_bytes(serialization.Encoding.PEM, serialization.PrivateFormat.PKCS8,
                                 serialization.NoEncryption()))
    pub_file.write_bytes(crypto_key.public_key().public_bytes(serialization.Encoding.PEM,
                                                              serialization.PublicFormat.PKCS1))
    pub = keys.PublicKey.import_key(pub_file)
    priv = keys.PrivateKey.import_key(priv_file)
    expected = localize_key(crypto_key)
    assert pub == keys.PublicKey(expected.n, expected.e)
    assert priv == expected
    assert (priv.p, priv.q) == (expected.p, expected.q)
    assert rsa.decrypt(rsa.encrypt("interop", pub), priv) == "interop"


def _lying_pkcs8(tmp_path, errtp: str):
    interkey = rfc8017.RSAPrivateKey()
    interkey["version"] = 1 if errtp == "pkver" else 0
    for field, value in (("modulus", 55), ("publicExponent", 3), ("privateExponent", 27), ("prime1", 5),
                         ("prime2", 11), ("exponent1", 3), ("exponent2", 7), ("coefficient", 1)):
        interkey[field] = value
    pkalgo = rfc5208.AlgorithmIdentifier()
    pkalgo["algorithm"] = rfc8017.id_RSAES_OAEP if errtp == "pkalgo" else rfc8017.rsaEncryption
    pkalgo["parameters"] = univ.Null("")
    pkraw = rfc5208.PrivateKeyInfo()
    pkraw["version"] = 1 if errtp == "wrapperver" else 0
    pkraw["privateKeyAlgorithm"] = pkalgo
    pkraw["privateKey"] = encoder.encode(interkey)
    des = tmp_path / f"lie_{errtp}"
    keys.write_pem(des, "PKCS8", encoder.encode(pkraw))
    return des


@pytest.mark.parametrize("errtp", ["pkalgo", "pkver", "wrapperver"])
def test_private_import_validates(tmp_path, errtp):
    with pytest.raises(IOError):
        keys.PrivateKey.import_key(_lying_pkcs8(tmp_path, errtp))


def test_import_wrong_pem_type(small_pair, tmp_path):
    des = tmp_path / "key.pub"
    small_pair.public_key.export(des)
    with pytest.raises(IOError, match="Headline"):
        keys.PrivateKey.import_key(des)


def test_import_missing_footer(tmp_path):
    des = tmp_path / "broken.pub"
    des.write_text("-----BEGIN RSA PUBLIC KEY-----\nMAYCAQUCAQM=\n", encoding="ascii")
    with pytest.raises(IOError, match="footer"):
        keys.PublicKey.import_key(des)


def test_import_garbage_payload(tmp_path):
    des = tmp_path / "garbage.pub"
    keys.write_pem(des, "PKCS1_PUB", b"\x01\x02\x03")
    with pytest.raises(IOError):
        keys.PublicKey.import_key(des)


def test_write_pem_wraps(tmp_path):
    des = tmp_path / "wrapped"
    keys.write_pem(des, "PKCS8", bytes(range(200)))
    lines = des.read_text(encoding="ascii").splitlines()
    assert lines[0] == keys.PEM_TYPES["PKCS8"][0]
    assert lines[-1] == keys.PEM_TYPES["PKCS8"][1]
    assert all(len(line) <= 64 for line in lines[1:-1])
    assert keys.read_pem(des, "PKCS8") == bytes(range(200))


def test_import_invalid_base64(tmp_path):
    des = tmp_path / "mangled.pub"
    des.write_text("-----BEGIN RSA PUBLIC KEY-----\nnot*base64!\n-----END RSA PUBLIC KEY-----\n", encoding="ascii")
    with pytest.raises(IOError, match="base64"):
        keys.PublicKey.import_key(des)


def test_import_empty_file(tmp_path):
    des = tmp_path / "empty"
    des.write_text("", encoding="ascii")
    with pytest.raises(IOError, match="Headline"):
        keys.PrivateKey.import_key(des)
