import hashlib
import random
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
import yaml

from sha256 import (
    H0,
    AlreadyFinalized,
    Sha256,
    new,
    padding,
    serialize_state,
    sha256,
    to_hex,
)


with open(Path(__file__).parent / "vectors.yaml") as f:
    VECTORS = yaml.safe_load(f)["vectors"]


def _reference(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def _message(n: int, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.getrandbits(8) for _ in range(n))


@pytest.mark.parametrize("vector", VECTORS, ids=[v["name"] for v in VECTORS])
def test_known_vectors(vector):
    data = vector["message"].encode("utf-8")
    assert to_hex(sha256(data)) == vector["digest"]
    assert new(data).hexdigest() == vector["digest"]


def test_empty_input_digest():
    h = new()
    digest = h.finalize()

    assert to_hex(digest) == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    assert h.blocks == 1
    assert h.bit_length == 0


@pytest.mark.parametrize("length", [0, 1, 3, 55, 56, 57, 63, 64, 65, 119, 120, 128, 1000])
def test_matches_reference(length):
    data = _message(length, seed=length)
    assert sha256(data) == _reference(data)


@pytest.mark.parametrize("length", [0, 54, 55, 56, 63, 64, 100, 127])
def test_padding_length(length):
    pad = padding(length)

    assert (length + len(pad)) % 64 == 0
    assert pad[0] == 0x80
    assert pad[1:-8] == b"\x00" * (len(pad) - 9)
    assert int.from_bytes(pad[-8:], "big") == length * 8


def test_padding_boundary_55_vs_56_bytes():
    """55 bytes leave room for the pad in one block, 56 bytes need a second."""
    short, long = b"a" * 55, b"a" * 56

    h55 = new(short)
    d55 = h55.finalize()
    h56 = new(long)
    d56 = h56.finalize()

    assert h55.blocks == 1
    assert h56.blocks == 2
    assert d55 == _reference(short)
    assert d56 == _reference(long)
    assert d55 != d56


def test_padding_of_large_length_field():
    # Length counters beyond 32 bits are encoded exactly.
    pad = padding(2**33)
    assert int.from_bytes(pad[-8:], "big") == 2**36


@pytest.mark.parametrize("chunk_size", [1, 3, 7, 55, 56, 63, 64, 65, 100, 1000])
def test_streaming_equivalence(chunk_size):
    data = _message(700, seed=chunk_size)
    h = new()
    for i in range(0, len(data), chunk_size):
        h.absorb(data[i : i + chunk_size])

    assert h.finalize() == sha256(data)


def test_streaming_with_irregular_and_empty_chunks():
    data = _message(500, seed=42)
    rng = random.Random(7)

    h = new()
    pos = 0
    while pos < len(data):
        size = rng.choice([0, 0, 1, 2, 13, 61, 64, 70, 129])
        h.absorb(data[pos : pos + size])
        pos += size

    assert h.finalize() == _reference(data)


def test_64_bytes_one_call_vs_single_bytes():
    data = bytes(range(64))

    whole = new()
    whole.absorb(data)

    single = new()
    for byte in data:
        single.absorb(bytes([byte]))

    assert whole.blocks == single.blocks == 1
    assert whole.finalize() == single.finalize() == _reference(data)


def test_buffer_is_drained_as_blocks_fill():
    h = new()
    h.absorb(b"x" * 63)
    assert h.blocks == 0
    h.absorb(b"x")
    assert h.blocks == 1
    h.absorb(b"x" * 130)
    assert h.blocks == 3
    assert h.bit_length == 194 * 8


def test_accepts_bytes_like_inputs():
    data = b"streaming input " * 9
    expected = sha256(data)

    assert sha256(bytearray(data)) == expected
    assert sha256(memoryview(data)) == expected

    h = new()
    h.absorb(memoryview(data)[:10])
    h.update(bytearray(data[10:]))
    assert h.finalize() == expected


@pytest.mark.parametrize("bad", ["abc", 123, None, [1, 2, 3]])
def test_rejects_non_bytes(bad):
    with pytest.raises(TypeError):
        new().absorb(bad)


def test_determinism_across_instances():
    data = _message(333, seed=3)
    digests = {sha256(data) for _ in range(5)}
    assert len(digests) == 1


@pytest.mark.parametrize("length", [0, 1, 55, 56, 64, 200])
def test_digest_size_is_fixed(length):
    assert len(sha256(b"\x5a" * length)) == Sha256.digest_size == 32
    assert len(new(b"\x5a" * length).hexdigest()) == 64


@pytest.mark.parametrize("data", [b"a", b"abc", bytes(64), _message(150, seed=9)])
def test_single_bit_flip_changes_digest(data):
    base = sha256(data)
    for byte_index in {0, len(data) // 2, len(data) - 1}:
        for bit in range(8):
            flipped = bytearray(data)
            flipped[byte_index] ^= 1 << bit
            assert sha256(bytes(flipped)) != base


def test_absorb_after_finalize_raises():
    h = new(b"abc")
    h.finalize()

    assert h.finalized
    with pytest.raises(AlreadyFinalized):
        h.absorb(b"more")
    with pytest.raises(AlreadyFinalized):
        h.update(b"")


def test_finalize_twice_raises():
    h = new()
    h.finalize()
    with pytest.raises(AlreadyFinalized):
        h.finalize()
    with pytest.raises(AlreadyFinalized):
        h.hexdigest()


def test_already_finalized_is_a_value_error():
    assert issubclass(AlreadyFinalized, ValueError)


def test_digest_is_a_snapshot():
    h = new(b"abc")
    digest = h.finalize()
    assert isinstance(digest, bytes)
    assert digest == bytes.fromhex(
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_caller_buffer_may_be_reused_after_absorb():
    buf = bytearray(b"a" * 30)
    h = new()
    h.absorb(buf)
    buf[:] = b"b" * 30
    h.absorb(buf)

    assert h.finalize() == _reference(b"a" * 30 + b"b" * 30)


def test_serialize_state_of_iv():
    assert serialize_state(H0).hex() == (
        "6a09e667bb67ae853c6ef372a54ff53a510e527f9b05688c1f83d9ab5be0cd19"
    )
    with pytest.raises(ValueError):
        serialize_state(H0[:7])


def test_to_hex_zero_pads_each_word():
    digest = serialize_state((0, 1, 0xF, 0x100, 0, 0, 0, 0xFFFFFFFF))
    assert to_hex(digest) == "00000000" "00000001" "0000000f" "00000100" + "0" * 24 + "ffffffff"


def test_independent_instances_in_parallel():
    inputs = [_message(n * 17, seed=n) for n in range(16)]

    with ThreadPoolExecutor(max_workers=4) as pool:
        digests = list(pool.map(sha256, inputs))

    assert digests == [_reference(data) for data in inputs]


def test_repr_reports_status():
    h = new(b"abc")
    assert "active" in repr(h)
    h.finalize()
    assert "finalized" in repr(h)
