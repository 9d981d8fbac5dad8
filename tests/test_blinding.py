import dataclasses
import inspect
import time

import pytest

from keyblind import verifier
from keyblind.curve import BN128, SECP256K1
from keyblind.errors import GenerationError, InvalidPointError, InvalidScalarError
from keyblind.keys import PublicKey
from keyblind.offset import Offset, derive_offset
from keyblind.signer import (
    KeyPair,
    PrivateKey,
    blind_private_key,
    generate_keypair,
    keypair_from_hex,
    keypair_from_scalar,
)
from keyblind.verifier import blind_public_key

CURVES = [SECP256K1, BN128]


def test_small_value_scenario():
    keypair = keypair_from_scalar(SECP256K1, 7)
    offset = derive_offset(SECP256K1, b"\x30\x39")

    blinded_private = blind_private_key(keypair, offset)
    assert blinded_private.scalar == 12352

    blinded_public = blind_public_key(keypair.public, offset)
    assert blinded_public.point == SECP256K1.scalar_base_multiply(12352)


@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_homomorphism(curve):
    keypair = generate_keypair(curve)
    offset = derive_offset(curve, "Election 2019031")

    d = keypair.private.scalar
    expected = curve.scalar_base_multiply((d + offset.value) % curve.order)
    blinded_public = blind_public_key(keypair.public, offset)

    assert blinded_public.point == expected
    assert curve.is_on_curve(blinded_public.point)
    assert keypair.blind(offset).public == blinded_public


def test_bn128_private_blinding_is_fast():
    keypair = keypair_from_scalar(BN128, 7)
    offset = derive_offset(BN128, b"\x30\x39")

    start = time.perf_counter()
    blinded = blind_private_key(keypair, offset)
    assert time.perf_counter() - start < 5
    assert blinded.scalar == 12352


def test_blinded_point_off_curve_rejected():
    off_curve = dataclasses.replace(SECP256K1, native_add=lambda a, b: (1, 1))
    public = PublicKey(off_curve, off_curve.scalar_base_multiply(7))
    offset = derive_offset(off_curve, b"\x30\x39")

    with pytest.raises(InvalidPointError, match="not on secp256k1"):
        blind_public_key(public, offset)


def test_blinded_scalar_wraps_modulo_order():
    n = SECP256K1.order
    keypair = keypair_from_scalar(SECP256K1, n - 1)
    offset = Offset(SECP256K1, 5)

    assert blind_private_key(keypair, offset).scalar == 4
    assert blind_public_key(keypair.public, offset).point == SECP256K1.scalar_base_multiply(4)


@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_round_trip(curve):
    keypair = generate_keypair(curve)
    offset = derive_offset(curve, b"\x30\x39")

    blinded = keypair.blind(offset)
    restored = blinded.blind(offset.negate())
    assert restored.private == keypair.private
    assert restored.public == keypair.public

    public_restored = blind_public_key(blind_public_key(keypair.public, offset), offset.negate())
    assert public_restored == keypair.public


def test_offset_cancelling_the_key():
    keypair = keypair_from_scalar(SECP256K1, 7)
    offset = Offset(SECP256K1, SECP256K1.order - 7)

    with pytest.raises(InvalidScalarError):
        blind_private_key(keypair, offset)
    with pytest.raises(InvalidPointError):
        blind_public_key(keypair.public, offset)


def test_offset_from_other_curve():
    keypair = keypair_from_scalar(SECP256K1, 7)
    offset = derive_offset(BN128, b"\x30\x39")

    with pytest.raises(InvalidScalarError):
        blind_private_key(keypair, offset)
    with pytest.raises(InvalidScalarError):
        blind_public_key(keypair.public, offset)


def test_public_blinder_takes_only_public_keys():
    keypair = keypair_from_scalar(SECP256K1, 7)
    offset = derive_offset(SECP256K1, b"\x30\x39")

    for secret_material in (keypair, keypair.private, 7, SECP256K1.generator):
        with pytest.raises(TypeError):
            blind_public_key(secret_material, offset)
    with pytest.raises(TypeError):
        blind_public_key(keypair.public, 12345)

    params = list(inspect.signature(blind_public_key).parameters)
    assert params == ["public_key", "offset"]


def test_verifier_module_has_no_private_key_access():
    source = inspect.getsource(verifier)
    assert "from .signer" not in source
    assert "import signer" not in source
    assert not hasattr(verifier, "PrivateKey")
    assert not hasattr(verifier, "KeyPair")


def test_private_key_never_shown():
    private = PrivateKey(SECP256K1, 123456789)
    assert "123456789" not in repr(private)
    assert private.hex() not in repr(private)
    assert "redacted" in repr(private)


def test_private_key_range():
    for bad in (0, SECP256K1.order, -1):
        with pytest.raises(InvalidScalarError):
            PrivateKey(SECP256K1, bad)


def test_keypair_from_hex():
    keypair = keypair_from_hex(SECP256K1, "0x" + "00" * 31 + "07")
    assert keypair.private.scalar == 7
    assert keypair.public.point == SECP256K1.scalar_base_multiply(7)
    assert keypair.private.hex() == "00" * 31 + "07"
    with pytest.raises(InvalidScalarError):
        keypair_from_hex(SECP256K1, "not hex")


def test_keypair_curves_must_match():
    with pytest.raises(InvalidScalarError):
        KeyPair(PrivateKey(SECP256K1, 7), PrivateKey(BN128, 7).public_key())


@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_generate_keypair(curve):
    keypair = generate_keypair(curve)
    assert 0 < keypair.private.scalar < curve.order
    assert keypair.public.point == curve.scalar_base_multiply(keypair.private.scalar)
    assert generate_keypair(curve).private != keypair.private


def test_generation_failure(monkeypatch):
    from keyblind import signer

    def broken_randomness(upper):
        raise OSError("entropy source unavailable")

    monkeypatch.setattr(signer.secrets, "randbelow", broken_randomness)
    with pytest.raises(GenerationError):
        generate_keypair(SECP256K1)


def test_public_key_validation():
    x, y = SECP256K1.generator
    with pytest.raises(InvalidPointError):
        PublicKey(SECP256K1, (x, y + 1))
    with pytest.raises(InvalidPointError):
        PublicKey(SECP256K1, None)
    with pytest.raises(InvalidPointError):
        PublicKey.from_bytes(SECP256K1, b"\x00")

    public = PublicKey(SECP256K1, SECP256K1.generator)
    assert PublicKey.from_bytes(SECP256K1, public.to_bytes()) == public
