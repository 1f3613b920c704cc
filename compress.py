"""SHA-256 compression function.

Given the chaining value `(h0, ..., h7)` and a 64-word message schedule
`w[0..63]`, the working registers `(a, b, c, d, e, f, g, h)` start as a copy of
the chaining value and each of the 64 rounds computes:

    S1    = (e >>> 6) ^ (e >>> 11) ^ (e >>> 25)
    ch    = (e & f) ^ (~e & g)
    temp1 = h + S1 + ch + k[i] + w[i]

    S0    = (a >>> 2) ^ (a >>> 13) ^ (a >>> 22)
    maj   = (a & b) ^ (a & c) ^ (b & c)
    temp2 = S0 + maj

    h, g, f, e, d, c, b, a = g, f, e, d + temp1, c, b, a, temp1 + temp2

After the last round the registers are added word-wise into the chaining
value. All additions are performed modulo 2**32.
"""

from __future__ import annotations

from typing import Sequence, Tuple


MASK32 = 0xFFFFFFFF

State = Tuple[int, int, int, int, int, int, int, int]


# Standard SHA-256 round constants k[0..63] from FIPS 180-4.
K_VALUES: Tuple[int, ...] = (
    0x428A2F98,
    0x71374491,
    0xB5C0FBCF,
    0xE9B5DBA5,
    0x3956C25B,
    0x59F111F1,
    0x923F82A4,
    0xAB1C5ED5,
    0xD807AA98,
    0x12835B01,
    0x243185BE,
    0x550C7DC3,
    0x72BE5D74,
    0x80DEB1FE,
    0x9BDC06A7,
    0xC19BF174,
    0xE49B69C1,
    0xEFBE4786,
    0x0FC19DC6,
    0x240CA1CC,
    0x2DE92C6F,
    0x4A7484AA,
    0x5CB0A9DC,
    0x76F988DA,
    0x983E5152,
    0xA831C66D,
    0xB00327C8,
    0xBF597FC7,
    0xC6E00BF3,
    0xD5A79147,
    0x06CA6351,
    0x14292967,
    0x27B70A85,
    0x2E1B2138,
    0x4D2C6DFC,
    0x53380D13,
    0x650A7354,
    0x766A0ABB,
    0x81C2C92E,
    0x92722C85,
    0xA2BFE8A1,
    0xA81A664B,
    0xC24B8B70,
    0xC76C51A3,
    0xD192E819,
    0xD6990624,
    0xF40E3585,
    0x106AA070,
    0x19A4C116,
    0x1E376C08,
    0x2748774C,
    0x34B0BCB5,
    0x391C0CB3,
    0x4ED8AA4A,
    0x5B9CCA4F,
    0x682E6FF3,
    0x748F82EE,
    0x78A5636F,
    0x84C87814,
    0x8CC70208,
    0x90BEFFFA,
    0xA4506CEB,
    0xBEF9A3F7,
    0xC67178F2,
)



def _rotr(x: int, n: int) -> int:
    """Right-rotate a 32-bit word `x` by `n` bits."""
    return ((x >> n) | (x << (32 - n))) & MASK32


def compression(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    w: int,
    k: int,
) -> State:
    """Perform one SHA-256 compression round.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        32-bit working registers before the round.
    w : int
        Message schedule word `w[i]`.
    k : int
        Round constant `k[i]`.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working registers after the round.
    """
    S1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
    ch = (e & f) ^ ((~e) & g)
    temp1 = (h + S1 + ch + k + w) & MASK32

    S0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
    maj = (a & b) ^ (a & c) ^ (b & c)
    temp2 = (S0 + maj) & MASK32

    return (
        (temp1 + temp2) & MASK32,
        a,
        b,
        c,
        (d + temp1) & MASK32,
        e,
        f,
        g,
    )


def compress64(
    a: int,
    b: int,
    c: int,
    d: int,
    e: int,
    f: int,
    g: int,
    h: int,
    ws: Sequence[int],
) -> State:
    """Run the 64-round compression loop for one block.

    Parameters
    ----------
    a, b, c, d, e, f, g, h : int
        Initial working registers (the current chaining value).
    ws : Sequence[int]
        The 64-word message schedule `w[0..63]` for this block.

    Returns
    -------
    (a, b, c, d, e, f, g, h) : tuple[int, ...]
        Working registers after 64 rounds, *not* yet added to the chaining
        value; see `update_hash_state`.
    """
    if len(ws) != 64:
        raise ValueError(f"compress64 expects 64 message schedule words, got {len(ws)}")

    regs = (a, b, c, d, e, f, g, h)
    for w, k in zip(ws, K_VALUES):
        regs = compression(*regs, w, k)
    return regs


def update_hash_state(state: Sequence[int], *working: int) -> State:
    """Add the working registers a..h into the chaining value.

        H_{i+1}[j] = (H_i[j] + working[j]) mod 2^32
    """
    if len(state) != 8 or len(working) != 8:
        raise ValueError(
            f"Expected 8 state words and 8 working registers, "
            f"got {len(state)} and {len(working)}"
        )
    return tuple((h + x) & MASK32 for h, x in zip(state, working))


def compress_block(state: Sequence[int], ws: Sequence[int]) -> State:
    """Compress one scheduled block into `state` and return the new chaining value.

    The input state is never modified; callers replace their state with the
    returned tuple once the whole block has been processed.
    """
    if len(state) != 8:
        raise ValueError(f"State must contain 8 words, got {len(state)}")
    return update_hash_state(state, *compress64(*state, ws))
