import numpy as np
import pytest

from keyblind.curve import BN128, SECP256K1
from keyblind.errors import InvalidScalarError
from keyblind.offset import Offset, derive_offset, derive_offsets


def test_big_endian_interpretation():
    offset = derive_offset(SECP256K1, b"\x30\x39")
    assert offset.value == 12345
    assert offset.raw == 12345


def test_str_is_utf8():
    assert derive_offset(SECP256K1, "09") == derive_offset(SECP256K1, b"09")
    assert derive_offset(SECP256K1, "09").value == 12345

    election = derive_offset(SECP256K1, "Election 2019031")
    assert election.value == int.from_bytes(b"Election 2019031", "big")


def test_deterministic():
    first = derive_offset(SECP256K1, bytearray(b"round-7"))
    second = derive_offset(SECP256K1, memoryview(b"round-7"))
    assert first == second


def test_reduced_modulo_order():
    n = SECP256K1.order
    offset = derive_offset(SECP256K1, (n + 5).to_bytes(33, "big"))
    assert offset.value == 5
    assert offset.raw == n + 5

    # same value, different group order
    assert derive_offset(BN128, (n + 5).to_bytes(33, "big")).value == (n + 5) % BN128.order


def test_zero_offset_rejected():
    with pytest.raises(InvalidScalarError):
        derive_offset(SECP256K1, b"")
    with pytest.raises(InvalidScalarError):
        derive_offset(SECP256K1, b"\x00\x00")
    with pytest.raises(InvalidScalarError):
        derive_offset(SECP256K1, SECP256K1.order.to_bytes(32, "big"))


def test_offset_range_checked():
    for bad in (0, SECP256K1.order, SECP256K1.order + 1, -3):
        with pytest.raises(InvalidScalarError):
            Offset(SECP256K1, bad)


def test_shared_value_type():
    with pytest.raises(TypeError):
        derive_offset(SECP256K1, 12345)


def test_negate():
    offset = derive_offset(SECP256K1, b"\x30\x39")
    negated = offset.negate()
    assert negated.value == SECP256K1.order - 12345
    assert int(offset.scalar() + negated.scalar()) == 0
    assert negated.negate() == offset


def test_offset_point_is_public():
    offset = derive_offset(SECP256K1, b"\x30\x39")
    assert offset.point() == SECP256K1.scalar_base_multiply(12345)
    assert offset.hex() == "00" * 30 + "3039"


def test_derive_offsets_batch():
    offsets = derive_offsets(SECP256K1, [b"\x01", "09", b"\x30\x39"])
    expected = SECP256K1.scalar_field([1, 12345, 12345])
    assert np.array_equal(offsets, expected)
