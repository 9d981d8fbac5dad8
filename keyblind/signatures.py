"""
Signature services used to check a blinded key pair.

Two schemes are available:

* ``EcdsaSignatureService``: secp256k1 ECDSA with public-key recovery.  A
  signature is ``r || s || v`` (65 bytes, ``v`` is the recovery id 0 or 1) and
  verification recovers the signing key and compares it with the expected one.
* ``SchnorrSignatureService``: Schnorr signatures over any supported curve,
  ``s || e`` (two scalars), with ``R = s*G + e*Q`` recomputed on verification.

Both hash messages with SHA-256.  ``verify`` returns ``False`` for a well-formed
signature made by another key and raises ``VerificationError`` for malformed
signatures or keys.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING, Dict, Optional, Union

from py_ecc.secp256k1 import secp256k1

from .curve import SECP256K1, CurveContext
from .errors import InvalidScalarError, VerificationError
from .keys import PublicKey

if TYPE_CHECKING:
    from .signer import PrivateKey

logger = logging.getLogger(__name__)

Message = Union[bytes, bytearray, str]


def _message_bytes(message: Message) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, (bytes, bytearray)):
        return bytes(message)
    raise TypeError(f"message must be bytes or str, not {type(message).__name__}")


def _check_public_key(curve: CurveContext, public_key: PublicKey) -> None:
    if not isinstance(public_key, PublicKey):
        raise VerificationError(
            f"expected a PublicKey, got {type(public_key).__name__}"
        )
    if public_key.curve != curve:
        raise VerificationError(
            f"public key is on {public_key.curve.name}, expected {curve.name}"
        )
    if not curve.is_on_curve(public_key.point) or curve.is_infinity(public_key.point):
        raise VerificationError(f"public key is not a valid {curve.name} point")


class SignatureService:
    name = ""

    def __init__(self, curve: CurveContext):
        self.curve = curve

    def sign(self, private_key: "PrivateKey", message: Message) -> bytes:
        raise NotImplementedError

    def verify(self, public_key: PublicKey, message: Message, signature: bytes) -> bool:
        raise NotImplementedError

    def _check_private_key(self, private_key: "PrivateKey") -> None:
        if private_key.curve != self.curve:
            raise InvalidScalarError(
                f"private key is on {private_key.curve.name}, "
                f"{self.name} service is on {self.curve.name}"
            )


class EcdsaSignatureService(SignatureService):
    name = "ecdsa"
    signature_size = 65

    def __init__(self, curve: CurveContext = SECP256K1):
        if curve != SECP256K1:
            raise ValueError("recoverable ECDSA is only available on secp256k1")
        super().__init__(curve)

    @staticmethod
    def digest(message: Message) -> bytes:
        return hashlib.sha256(_message_bytes(message)).digest()

    def sign(self, private_key: "PrivateKey", message: Message) -> bytes:
        self._check_private_key(private_key)
        priv = private_key.scalar.to_bytes(32, "big")
        v, r, s = secp256k1.ecdsa_raw_sign(self.digest(message), priv)
        return r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v - 27])

    def recover(self, message: Message, signature: bytes) -> Optional[PublicKey]:
        """Public key that produced ``signature`` over ``message``."""
        if not isinstance(signature, (bytes, bytearray)) or len(signature) != self.signature_size:
            raise VerificationError(
                f"ECDSA signature must be {self.signature_size} bytes"
            )
        r = int.from_bytes(signature[:32], "big")
        s = int.from_bytes(signature[32:64], "big")
        v = signature[64]
        if v not in (0, 1):
            raise VerificationError("recovery id must be 0 or 1")
        if not (self.curve.is_valid_scalar(r) and self.curve.is_valid_scalar(s)):
            raise VerificationError("signature values out of range")

        try:
            recovered = secp256k1.ecdsa_raw_recover(self.digest(message), (v + 27, r, s))
        except (ValueError, ZeroDivisionError) as exc:
            raise VerificationError("signature does not encode a recoverable key") from exc
        if not recovered:
            raise VerificationError("signature does not encode a recoverable key")

        point = self.curve.from_native(recovered)
        if point is None:
            return None
        return PublicKey(self.curve, point)

    def verify(self, public_key: PublicKey, message: Message, signature: bytes) -> bool:
        _check_public_key(self.curve, public_key)
        recovered = self.recover(message, signature)
        ok = recovered is not None and recovered.point == public_key.point
        logger.debug("ecdsa verify under %s: %s", public_key.hex(), ok)
        return ok


class SchnorrSignatureService(SignatureService):
    name = "schnorr"

    @property
    def signature_size(self) -> int:
        return 2 * self.curve.scalar_size

    def _hash_to_scalar(self, *parts: bytes) -> int:
        return int.from_bytes(hashlib.sha256(b"".join(parts)).digest(), "big") % self.curve.order

    def _nonce(self, scalar: int, message: bytes) -> int:
        key_bytes = scalar.to_bytes(self.curve.scalar_size, "big")
        counter = 0
        while True:
            r = self._hash_to_scalar(message, key_bytes, counter.to_bytes(4, "big"))
            if r:
                return r
            counter += 1

    def _challenge(self, r_point, public_point, message: bytes) -> int:
        return self._hash_to_scalar(
            self.curve.encode_point(r_point),
            self.curve.encode_point(public_point),
            message,
        )

    def sign(self, private_key: "PrivateKey", message: Message) -> bytes:
        self._check_private_key(private_key)
        curve = self.curve
        msg = _message_bytes(message)
        d = private_key.scalar

        r = self._nonce(d, msg)
        r_point = curve.scalar_base_multiply(r)
        e = self._challenge(r_point, curve.scalar_base_multiply(d), msg)
        s = curve.scalar(r) - curve.scalar(d) * curve.scalar(e)

        size = curve.scalar_size
        return int(s).to_bytes(size, "big") + e.to_bytes(size, "big")

    def verify(self, public_key: PublicKey, message: Message, signature: bytes) -> bool:
        _check_public_key(self.curve, public_key)
        curve = self.curve
        size = curve.scalar_size
        if not isinstance(signature, (bytes, bytearray)) or len(signature) != self.signature_size:
            raise VerificationError(f"Schnorr signature must be {self.signature_size} bytes")
        s = int.from_bytes(signature[:size], "big")
        e = int.from_bytes(signature[size:], "big")
        if s >= curve.order or e >= curve.order:
            raise VerificationError("signature values out of range")

        # s*G + e*Q = (r - d*e)*G + e*d*G = r*G
        r_point = curve.point_add(
            curve.scalar_base_multiply(s), curve.multiply(public_key.point, e)
        )
        ok = self._challenge(r_point, public_key.point, _message_bytes(message)) == e
        logger.debug("schnorr verify under %s: %s", public_key.hex(), ok)
        return ok


SCHEMES: Dict[str, type] = {
    EcdsaSignatureService.name: EcdsaSignatureService,
    SchnorrSignatureService.name: SchnorrSignatureService,
}


def signature_service_for(curve: CurveContext, scheme: Optional[str] = None) -> SignatureService:
    if scheme is None:
        scheme = "ecdsa" if curve == SECP256K1 else "schnorr"
    try:
        service_cls = SCHEMES[scheme.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown signature scheme '{scheme}'. Choose one of: {', '.join(sorted(SCHEMES))}."
        ) from None
    return service_cls(curve)
