"""Incremental SHA-256 built on `compress_block` from `compress.py`.

This module provides:

- `Sha256`: an absorb/finalize hash object. Input may be fed in chunks of any
  size; every complete 64-byte block is scheduled and compressed as soon as it
  is available, so the whole message never has to be held in memory.
- `new(data=None) -> Sha256`: construct a fresh hash object.
- `sha256(data) -> bytes`: one-shot digest of `data`.
- `to_hex(digest) -> str`: lowercase hex rendering of a digest.

Typical use:

    h = new()
    for chunk in chunks:
        h.absorb(chunk)
    digest = h.finalize()
"""

from __future__ import annotations

from typing import Sequence

from compress import State, compress_block
from schedule import BLOCK_SIZE, build_message_schedule


# Initial hash values (first 32 bits of the fractional parts of the
# square roots of the first 8 primes 2..19), as per FIPS 180-4.
H0: State = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

DIGEST_SIZE = 32

# Bytes of room left in a block once the 8-byte length field is reserved.
_LENGTH_OFFSET = BLOCK_SIZE - 8


class AlreadyFinalized(ValueError):
    """Raised when a finalized `Sha256` object is fed or finalized again."""


def padding(byte_count: int) -> bytes:
    """Return the SHA-256 pad for a message of `byte_count` bytes.

    The pad is a single 0x80 byte, then zero bytes until the padded length is
    congruent to 56 mod 64, then the message length in *bits* as a 64-bit
    big-endian integer. Message plus pad is always a multiple of 64 bytes.
    """
    zeros = (_LENGTH_OFFSET - 1 - byte_count) % BLOCK_SIZE
    return b"\x80" + b"\x00" * zeros + (byte_count * 8).to_bytes(8, byteorder="big")


def serialize_state(state: Sequence[int]) -> bytes:
    """Convert a chaining value into the 32-byte SHA-256 digest."""
    if len(state) != 8:
        raise ValueError(f"State must contain 8 words, got {len(state)}")
    return b"".join(word.to_bytes(4, byteorder="big") for word in state)


def to_hex(digest: bytes) -> str:
    """Render a digest as lowercase hex (64 characters for SHA-256)."""
    return bytes(digest).hex()


class Sha256:
    """Streaming SHA-256 hash object.

    The object is either *active* (accepting input) or *finalized*. Once
    `finalize` has run, the length field and padding are committed and every
    further `absorb` or `finalize` raises `AlreadyFinalized`.

    Instances are not thread-safe; distinct instances share no mutable state.
    """

    name = "sha256"
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data=None) -> None:
        self._state: State = H0
        self._buffer = bytearray()
        self._byte_count = 0
        self._blocks = 0
        self._finalized = False

        if data is not None:
            self.absorb(data)

    @property
    def bit_length(self) -> int:
        """Number of message bits absorbed so far (padding excluded)."""
        return self._byte_count * 8

    @property
    def blocks(self) -> int:
        """Number of 64-byte blocks compressed into the state so far."""
        return self._blocks

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_active(self, operation: str) -> None:
        if self._finalized:
            raise AlreadyFinalized(
                f"{operation}() called on a finalized {self.name} object; "
                f"construct a new one"
            )

    def _compress(self, block) -> None:
        self._state = compress_block(self._state, build_message_schedule(block))
        self._blocks += 1

    def absorb(self, data) -> None:
        """Feed `data` (any bytes-like object) into the hash."""
        self._check_active("absorb")
        if isinstance(data, str):
            raise TypeError("Strings must be encoded before hashing")
        try:
            view = memoryview(data).cast("B")
        except TypeError:
            raise TypeError(
                f"a bytes-like object is required, not '{type(data).__name__}'"
            ) from None

        if not view:
            return

        self._byte_count += len(view)
        offset = 0

        # Top up a partially filled block first.
        if self._buffer:
            take = min(BLOCK_SIZE - len(self._buffer), len(view))
            self._buffer += view[:take]
            offset = take
            if len(self._buffer) < BLOCK_SIZE:
                return
            self._compress(self._buffer)
            self._buffer.clear()

        # Whole blocks straight from the caller's data.
        end = offset + (len(view) - offset) // BLOCK_SIZE * BLOCK_SIZE
        for i in range(offset, end, BLOCK_SIZE):
            self._compress(view[i : i + BLOCK_SIZE])

        self._buffer += view[end:]

    update = absorb

    def finalize(self) -> bytes:
        """Pad, compress the remaining block(s) and return the 32-byte digest."""
        self._check_active("finalize")

        tail = self._buffer + padding(self._byte_count)
        for i in range(0, len(tail), BLOCK_SIZE):
            self._compress(tail[i : i + BLOCK_SIZE])

        self._buffer.clear()
        self._finalized = True
        return serialize_state(self._state)

    def hexdigest(self) -> str:
        """Finalize and return the digest as 64 lowercase hex characters."""
        return to_hex(self.finalize())

    def __repr__(self) -> str:
        status = "finalized" if self._finalized else "active"
        return f"<{self.name} {status} bits={self.bit_length} blocks={self._blocks}>"


def new(data=None) -> Sha256:
    """Return a fresh `Sha256` object, optionally primed with `data`."""
    return Sha256(data)


def sha256(data) -> bytes:
    """Compute the SHA-256 digest of `data` in one call."""
    h = Sha256()
    h.absorb(data)
    return h.finalize()
