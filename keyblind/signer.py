"""
Signer side of the blinding scheme.

This module is the only place that handles private scalars.  A ``KeyPair`` is
created by the signer, its public half is handed to the verifier, and the
private half is blinded locally with the shared offset:

    d' = (d + k) mod n

so that ``d'*G`` equals the verifier's ``Q + k*G``.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from .curve import CurveContext
from .encoding import scalar_hex
from .errors import GenerationError, InvalidScalarError
from .keys import PublicKey
from .offset import Offset

logger = logging.getLogger(__name__)


class PrivateKey:
    """A private scalar ``d`` in ``[1, n - 1]``; never printed, never logged."""

    __slots__ = ("curve", "_scalar")

    def __init__(self, curve: CurveContext, scalar: int):
        self.curve = curve
        self._scalar = curve.require_scalar(scalar, "private scalar")

    @classmethod
    def from_hex(cls, curve: CurveContext, value: str) -> "PrivateKey":
        value = value.strip()
        if value.startswith("0x"):
            value = value[2:]
        try:
            scalar = int(value, 16)
        except ValueError:
            raise InvalidScalarError("private key must be a hex string") from None
        return cls(curve, scalar)

    @property
    def scalar(self) -> int:
        return self._scalar

    def public_key(self) -> PublicKey:
        return PublicKey(self.curve, self.curve.scalar_base_multiply(self._scalar))

    def hex(self) -> str:
        return scalar_hex(self._scalar, self.curve.scalar_size)

    def __eq__(self, other):
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self.curve == other.curve and secrets.compare_digest(
            self.hex(), other.hex()
        )

    def __hash__(self):
        return hash((self.curve.name, self._scalar))

    def __repr__(self) -> str:
        return f"PrivateKey(curve={self.curve.name!r}, scalar=<redacted>)"


@dataclass(frozen=True)
class KeyPair:
    private: PrivateKey
    public: PublicKey

    def __post_init__(self) -> None:
        if self.private.curve != self.public.curve:
            raise InvalidScalarError("private and public key are on different curves")

    @property
    def curve(self) -> CurveContext:
        return self.private.curve

    def blind(self, offset: Offset) -> "KeyPair":
        """Blinded pair ``(d + k, (d + k)*G)``, computed entirely on the signer side."""
        private = blind_private_key(self, offset)
        return KeyPair(private, private.public_key())


def keypair_from_scalar(curve: CurveContext, scalar: int) -> KeyPair:
    private = PrivateKey(curve, scalar)
    return KeyPair(private, private.public_key())


def keypair_from_hex(curve: CurveContext, value: str) -> KeyPair:
    private = PrivateKey.from_hex(curve, value)
    return KeyPair(private, private.public_key())


def generate_keypair(curve: CurveContext) -> KeyPair:
    try:
        scalar = secrets.randbelow(curve.order - 1) + 1
        keypair = keypair_from_scalar(curve, scalar)
    except (OSError, ArithmeticError, ValueError, TypeError) as exc:
        raise GenerationError(f"could not generate a {curve.name} key pair") from exc
    logger.debug("generated %s key pair, public key %s", curve.name, keypair.public.hex())
    return keypair


def blind_private_key(keypair: KeyPair, offset: Offset) -> PrivateKey:
    curve = keypair.curve
    if offset.curve != curve:
        raise InvalidScalarError(
            f"offset was derived for {offset.curve.name}, key pair is on {curve.name}"
        )
    blinded = curve.scalar(keypair.private.scalar) + offset.scalar()
    if blinded == 0:
        raise InvalidScalarError("blinded private scalar is zero")
    return PrivateKey(curve, int(blinded))
