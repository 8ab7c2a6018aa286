"""Block codecs mapping text to integers below a modulus and back.

The default `LossyCodec` is the wire format every stored ciphertext uses: plain big-endian chunks with no length
information. A chunk whose first byte is 0x00 loses that byte on decode. `LengthPrefixedCodec` fixes this by
prepending a length byte to each chunk, at the cost of a different, incompatible ciphertext format.

Typical usage example:

    blocks = encode("Hi there!", n)
    text = decode(blocks)
    blocks = LENGTH_PREFIXED.encode("\\x00abc", n)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from collections.abc import Iterable

from blockrsa.errors import BlockRangeError
from blockrsa.errors import ModulusTooSmallError

logger = logging.getLogger(__name__)


def _fitting_bytes(n: int) -> int:
    return (n.bit_length() - 1) // 8


def max_bytes_per_block(n: int) -> int:
    """Chunk width used by the wire compatible codec.

    This is the largest width whose every big-endian value is strictly below `n`, but never less than one byte.
    Moduli under 256 still get one-byte chunks, so encoding only succeeds for bytes below `n`; larger bytes are caught
    by the block range check.

    Args:
        n: The modulus.

    Returns:
        `max(1, (bit_length(n) - 1) // 8)`.

    Raises:
        ModulusTooSmallError: If `n` cannot hold any block at all (n <= 1).
    """
    if n <= 1:
        raise ModulusTooSmallError("Key size (n) is too small to encode even 1 byte.")
    return max(1, _fitting_bytes(n))


def _check_blocks(blocks: list[int], n: int) -> list[int]:
    for block in blocks:
        if not 0 <= block < n:
            logger.error("Generated block is unexpectedly larger than or equal to n.")
            raise BlockRangeError("Encoding block size validation failed.")
    return blocks


class LossyCodec:
    """The wire compatible codec, without any per-block length information.

    Attributes:
        errors: How invalid UTF-8 is handled on decode. Defaults to "replace".
    """
    name = "lossy"

    def __init__(self, errors: str = "replace") -> None:
        self.errors = errors

    def chunk_size(self, n: int) -> int:
        return max_bytes_per_block(n)

    def encode(self, text: str, n: int) -> list[int]:
        """Splits the UTF-8 encoding of `text` into big-endian blocks below `n`.

        Raises:
            ModulusTooSmallError: If `n` cannot hold a block.
            BlockRangeError: If a block is not below `n`, e.g. a byte above a modulus under 256.
        """
        data = text.encode("utf-8")
        size = self.chunk_size(n)
        blocks = [self._pack(data[i:i + size]) for i in range(0, len(data), size)]
        logger.debug("Encoded message into %d blocks (max %d bytes per block).", len(blocks), size)
        return _check_blocks(blocks, n)

    def decode(self, blocks: Iterable[int]) -> str:
        """Joins blocks back into text.

        Leading zero bytes of a chunk cannot be recovered; a block of value 0 decodes to one zero byte.
        """
        data = bytearray()
        for block in blocks:
            data += self._unpack(block)
        return data.decode("utf-8", errors=self.errors)

    @staticmethod
    def _pack(chunk: bytes) -> int:
        return int.from_bytes(chunk, byteorder="big", signed=False)

    @staticmethod
    def _unpack(block: int) -> bytes:
        if block < 0:
            raise ValueError("Blocks must be non-negative.")
        if block == 0:
            return b"\x00"
        out = bytearray()
        while block > 0:
            out.append(block & 0xFF)
            block >>= 8
        out.reverse()
        return bytes(out)


class LengthPrefixedCodec(LossyCodec):
    """Lossless codec storing each chunk as `[length][chunk]`.

    Not compatible with ciphertexts produced by `LossyCodec`. Needs room for at least two bytes per block.
    """
    name = "length-prefixed"

    def chunk_size(self, n: int) -> int:
        size = min(_fitting_bytes(n) - 1, 0xFF)
        if size < 1:
            raise ModulusTooSmallError("Key size (n) is too small for length-prefixed blocks.")
        return size

    @staticmethod
    def _pack(chunk: bytes) -> int:
        return int.from_bytes(bytes([len(chunk)]) + chunk, byteorder="big", signed=False)

    @staticmethod
    def _unpack(block: int) -> bytes:
        raw = LossyCodec._unpack(block)
        length, body = raw[0], raw[1:]
        if length == 0 or len(body) > length:
            raise ValueError("Corrupted length-prefixed block.")
        return body.rjust(length, b"\x00")


LOSSY = LossyCodec()
LENGTH_PREFIXED = LengthPrefixedCodec()
CODECS: dict[str, LossyCodec] = {LOSSY.name: LOSSY, LENGTH_PREFIXED.name: LENGTH_PREFIXED}


def get_codec(name: str) -> LossyCodec:
    """Resolves a codec by name.

    Raises:
        ValueError: For unknown names.
    """
    try:
        return CODECS[name]
    except KeyError:
        raise ValueError(f"Unknown codec {name!r}, expected one of {sorted(CODECS)}.") from None


def encode(text: str, n: int) -> list[int]:
    """Encodes `text` with the wire compatible codec."""
    return LOSSY.encode(text, n)


def decode(blocks: Iterable[int]) -> str:
    """Decodes blocks with the wire compatible codec."""
    return LOSSY.decode(blocks)
