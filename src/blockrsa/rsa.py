"""Encrypts and decrypts whole messages with textbook RSA over codec blocks.

Ciphertext is the list of encrypted blocks as decimal strings joined by `DELIMITER`. There is no padding and every
block is encrypted independently, so this is only fit for demonstrations.

Decryption never raises for bad ciphertext: callers branch on a `DecryptResult`, or on the `DECRYPTION_FAILED`
sentinel returned by `decrypt()`. Bad keys still raise `InvalidKeyError`.

Typical usage example:

    pub, priv = generate_key_pair(64)
    c = encrypt("Hi there!", pub)
    r = decrypt(c, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import typing

from blockrsa import arith
from blockrsa import codec as codecs
from blockrsa.errors import BlockRangeError
from blockrsa.keys import PrivateKey
from blockrsa.keys import PublicKey

logger = logging.getLogger(__name__)

DELIMITER = ":"
DECRYPTION_FAILED = "[Decryption Failed]"


class DecryptResult(typing.NamedTuple):
    """Outcome of a decryption.

    Attributes:
        ok: Whether decryption succeeded.
        text: The plaintext, or `DECRYPTION_FAILED` on failure.
        error: The exception that caused the failure, if any.
    """
    ok: bool
    text: str
    error: Exception | None = None

    @classmethod
    def success(cls, text: str) -> "DecryptResult":
        return cls(True, text)

    @classmethod
    def failure(cls, error: Exception) -> "DecryptResult":
        return cls(False, DECRYPTION_FAILED, error)

    def __bool__(self) -> bool:
        return self.ok


def encrypt_blocks(blocks: typing.Iterable[int], public_key: typing.Any) -> list[int]:
    """Applies the public key to each block.

    Args:
        blocks: Message representatives, each in `[0, n)`.
        public_key: A `PublicKey`, or a mapping/object with `n` and `e`.

    Returns:
        The encrypted blocks, in order.

    Raises:
        InvalidKeyError: If the key is missing or malformed.
        BlockRangeError: If a block is outside `[0, n)`.
    """
    key = PublicKey.coerce(public_key)
    encrypted = []
    for block in blocks:
        if not 0 <= block < key.n:
            logger.error("Block value is >= n during encryption!")
            raise BlockRangeError("Encryption failed: Block value too large.")
        encrypted.append(arith.mod_pow(block, key.e, key.n))
    return encrypted


def decrypt_blocks(blocks: typing.Iterable[int], private_key: typing.Any) -> list[int]:
    """Applies the private key to each block, without decoding.

    Raises:
        InvalidKeyError: If the key is missing or malformed.
    """
    key = PrivateKey.coerce(private_key)
    return [arith.mod_pow(block, key.d, key.n) for block in blocks]


def encrypt(message: str, public_key: typing.Any, codec: codecs.LossyCodec | None = None) -> str:
    """Use the public key to encrypt the message.

    Args:
        message: The message to encrypt.
        public_key: A `PublicKey`, or a mapping/object with `n` and `e`.
        codec: The block codec. Defaults to the wire compatible `codecs.LOSSY`.

    Returns:
        The ciphertext, decimal blocks joined by `DELIMITER`.

    Raises:
        InvalidKeyError: If the key is missing or malformed.
        BlockRangeError: If a block is not below the modulus.
    """
    key = PublicKey.coerce(public_key)
    codec = codec or codecs.LOSSY
    logger.debug("Starting encryption...")
    encrypted = encrypt_blocks(codec.encode(message, key.n), key)
    logger.debug("Encryption complete.")
    return DELIMITER.join(str(b) for b in encrypted)


def _parse_token(token: str) -> int:
    if not token.isdecimal() or not token.isascii():
        raise ValueError(f"Malformed ciphertext token {token!r}.")
    return int(token)


def decrypt_result(ciphertext: str, private_key: typing.Any, codec: codecs.LossyCodec | None = None) -> DecryptResult:
    """Decrypts the ciphertext, reporting failures as a result instead of raising.

    Args:
        ciphertext: Decimal blocks joined by `DELIMITER`.
        private_key: A `PrivateKey`, or a mapping/object with `n` and `d`.
        codec: The block codec the ciphertext was produced with. Defaults to `codecs.LOSSY`.

    Returns:
        A successful result with the plaintext, a successful empty result for empty ciphertext, or a failed result.

    Raises:
        InvalidKeyError: If the key is missing or malformed.
    """
    key = PrivateKey.coerce(private_key)
    codec = codec or codecs.LOSSY
    if not isinstance(ciphertext, str) or not ciphertext:
        logger.warning("Attempted to decrypt empty or non-string ciphertext.")
        return DecryptResult.success("")
    logger.debug("Starting decryption...")
    try:
        blocks = decrypt_blocks([_parse_token(tok) for tok in ciphertext.split(DELIMITER)], key)
        text = codec.decode(blocks)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        logger.error("Decryption error: %s", exc)
        return DecryptResult.failure(exc)
    logger.debug("Decryption complete.")
    return DecryptResult.success(text)


def decrypt(ciphertext: str, private_key: typing.Any, codec: codecs.LossyCodec | None = None) -> str:
    """Decrypts the ciphertext using the private key.

    Returns:
        The plaintext, `""` for empty ciphertext, or `DECRYPTION_FAILED` if the ciphertext could not be decoded.

    Raises:
        InvalidKeyError: If the key is missing or malformed.
    """
    return decrypt_result(ciphertext, private_key, codec).text
