"""SHA-256 message schedule.

Expands one 512-bit block into the 64 words `w[0..63]` consumed by the
compression loop in `compress.py`.
"""

from __future__ import annotations

from typing import List

from compress import MASK32, _rotr


BLOCK_SIZE = 64
SCHEDULE_WORDS = 64


def _shr(x: int, n: int) -> int:
    """Right-shift a 32-bit word `x` by `n` bits."""
    return (x & MASK32) >> n


def _small_sigma0(x: int) -> int:
    """SHA-256 function σ0 used in the message schedule."""
    return _rotr(x, 7) ^ _rotr(x, 18) ^ _shr(x, 3)


def _small_sigma1(x: int) -> int:
    """SHA-256 function σ1 used in the message schedule."""
    return _rotr(x, 17) ^ _rotr(x, 19) ^ _shr(x, 10)


def build_message_schedule(block: bytes) -> List[int]:
    """Given a 512-bit block, build the 64-word message schedule w[0..63].

    Words 0..15 are the block read as big-endian 32-bit integers; words
    16..63 follow the recurrence

        w[j] = σ1(w[j-2]) + w[j-7] + σ0(w[j-15]) + w[j-16]   (mod 2**32)
    """
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"Expected {BLOCK_SIZE}-byte block, got {len(block)}")

    w: List[int] = [0] * SCHEDULE_WORDS

    for i in range(16):
        w[i] = int.from_bytes(block[4 * i : 4 * (i + 1)], byteorder="big")

    for i in range(16, SCHEDULE_WORDS):
        s0 = _small_sigma0(w[i - 15])
        s1 = _small_sigma1(w[i - 2])
        w[i] = (w[i - 16] + s0 + w[i - 7] + s1) & MASK32

    return w
